from __future__ import annotations

from chord_finder.sources.normalize import clean_text, fallback_stubs, normalize
from chord_finder.sources.types import NormalizedResult, QualityTier, ResultStub


def stub(url: str, *, quality: str = "", type_: str = "Chords") -> ResultStub:
    return ResultStub(
        title="Song",
        artist="Artist",
        source_url=url,
        type=type_,
        quality=quality,
        source="Test",
    )


class TestCleanText:
    def test_markup_and_entities(self):
        raw = "[tab][ch]Am[/ch] &amp; [ch]C[/ch]<br/>la &quot;la&quot;   \r\n<b>Chorus</b>[/tab]\n\n"
        assert clean_text(raw) == 'Am & C\nla "la"\nChorus'

    def test_keeps_inner_blank_lines_and_indentation(self):
        assert clean_text("  Am\n\n  C") == "  Am\n\n  C"

    def test_angle_bracket_chords_survive(self):
        text = "Intro: <Am> <G> x2\n<B>   <Em>\nla la"
        assert clean_text(text) == text

    def test_escaped_chords_decode_to_brackets(self):
        assert clean_text("<pre>&lt;Am&gt; &lt;B&gt;</pre>") == "<Am> <B>"

    def test_markup_tags_stripped(self):
        raw = '<span class="_3PpE">Am</span> <b>C</b><div>\n</div><p>G</p><a href="/x">D</a>'
        assert clean_text(raw) == "Am C\nGD"

    def test_entities_decoded_once(self):
        assert clean_text("AT&amp;amp;T") == "AT&amp;T"
        assert clean_text("&amp;lt;b&amp;gt;") == "&lt;b&gt;"

    def test_comparison_signs_survive(self):
        assert clean_text("1 < 2 > 0") == "1 < 2 > 0"


class TestNormalize:
    def test_ranks_in_input_order(self):
        out = normalize([stub("https://a/1"), stub("https://a/2")], query="q")
        assert [(r.rank, r.stub.source_url) for r in out] == [(1, "https://a/1"), (2, "https://a/2")]
        assert all(r.text is None for r in out)

    def test_dedupe_first_wins(self):
        first = stub("https://a/1", quality="Official")
        dup = stub("https://a/1")
        out = normalize([first, stub("https://a/2"), dup], query="q")
        assert [r.stub for r in out] == [first, stub("https://a/2")]
        assert out[0].stub.tier is QualityTier.OFFICIAL

    def test_texts_are_cleaned(self):
        out = normalize([stub("https://a/1")], {"https://a/1": "[ch]G[/ch]<br>x &amp; y"}, query="q")
        assert out[0].text == "G\nx & y"

    def test_blank_text_becomes_none(self):
        out = normalize([stub("https://a/1")], {"https://a/1": "<br/>  "}, query="q")
        assert out[0].text is None

    def test_idempotent(self):
        once = normalize(
            [stub("https://a/1"), stub("https://a/2", quality="Rating 4.0"), stub("https://a/1")],
            {"https://a/2": "&amp;lt;i&amp;gt;Am&amp;lt;/i&amp;gt;"},
            query="q",
        )
        twice = normalize(once, query="q")
        assert twice == once
        assert all(isinstance(r, NormalizedResult) for r in twice)

    def test_empty_gives_two_manual_links(self):
        out = normalize([], query="Группа крови")

        assert [r.rank for r in out] == [1, 2]
        assert [r.stub.source for r in out] == ["Ultimate Guitar", "Chordify"]
        assert all(not r.stub.extractable for r in out)
        assert all(r.stub.artist == "External Link" and r.stub.type == "Search" for r in out)
        assert out[0].stub.source_url.startswith("https://www.ultimate-guitar.com/search.php?")
        assert out[1].stub.source_url == "https://chordify.net/search/%D0%93%D1%80%D1%83%D0%BF%D0%BF%D0%B0%20%D0%BA%D1%80%D0%BE%D0%B2%D0%B8"

    def test_fallback_is_idempotent(self):
        out = normalize([], query="nothing")
        assert normalize(out, query="nothing") == out


def test_fallback_stubs_titles():
    ug, chordify = fallback_stubs("Wonderwall")
    assert ug.title == 'Search "Wonderwall" on Ultimate Guitar'
    assert chordify.title == 'Search "Wonderwall" on Chordify'
    assert ug.tier is QualityTier.PLAIN


def test_to_dict():
    (r,) = normalize([stub("https://a/1", type_="Official")], {"https://a/1": "Am"}, query="q")
    assert r.to_dict() == {
        "rank": 1,
        "title": "Song",
        "artist": "Artist",
        "url": "https://a/1",
        "type": "Official",
        "quality": "",
        "tier": "official",
        "source": "Test",
        "extractable": True,
        "text": "Am",
    }
