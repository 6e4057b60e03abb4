class ChordFinderError(RuntimeError):
    pass


class InvalidInput(ChordFinderError, ValueError):
    pass


class SourceUnavailable(ChordFinderError):
    pass


class SourceTimeout(SourceUnavailable):
    pass


class UnrecognizedStructure(ChordFinderError):
    pass


class UnsupportedSource(ChordFinderError):
    pass
