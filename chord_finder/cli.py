from __future__ import annotations

import json
import sys
from pathlib import Path

import colorama
import typer

from chord_finder.config import AppConfig, load_config, save_config_lang
from chord_finder.errors import InvalidInput
from chord_finder.i18n import SUPPORTED_LANGS, current_lang, set_lang, supported, t
from chord_finder.logging_setup import setup_logging
from chord_finder.render.ansi import PLAIN_THEME, Theme, format_results, format_sheet
from chord_finder.sources.service import ChordService
from chord_finder.storage.sqlite import Song, SongStore


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _setup(debug: bool) -> AppConfig:
    cfg = load_config()
    setup_logging(debug)
    set_lang(cfg.lang)
    return cfg


def _theme() -> Theme:
    return Theme() if sys.stdout.isatty() else PLAIN_THEME


def _song_dict(song: Song) -> dict[str, object]:
    return {
        "id": song.id,
        "share_id": song.share_id,
        "title": song.title,
        "artist": song.artist,
        "source_url": song.source_url,
        "notes": song.notes,
        "updated_at": song.updated_at,
    }


@app.command()
def search(
    query: str = typer.Argument(..., help="Song title, artist or both"),
    extract: int = typer.Option(0, "--extract", "-x", help="Also fetch chord text for the first N results"),
    sequential: bool = typer.Option(False, "--sequential", help="Query sources one after another"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """
    Search chord archives. Cyrillic queries go to AMDM.ru, everything else to Ultimate Guitar.
    """
    cfg = _setup(debug)
    if sequential:
        cfg = cfg.__class__(**{**cfg.__dict__, "parallel_search": False})

    service = ChordService(cfg)
    try:
        results = service.search_chords(query, extract_top=extract)
    except InvalidInput as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    if json_output:
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
        return
    typer.echo(format_results(results, manual_label=t("manual_link"), theme=_theme()), nl=False)


@app.command()
def extract(
    url: str = typer.Argument(..., help="Direct chord page URL"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Extract chord text from a single chord page."""
    cfg = _setup(debug)
    service = ChordService(cfg)
    try:
        content = service.extract_chord_content(url)
    except InvalidInput as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    if out and content.ok:
        out.write_text(content.text + "\n", encoding="utf-8")
        return
    # guidance goes to stderr so a redirected stdout only ever holds chords
    typer.echo(content.text, err=not content.ok)
    if not content.ok:
        raise typer.Exit(code=1)


@app.command()
def save(
    title: str,
    artist: str,
    url: str | None = typer.Option(None, "--url", help="Chord page to extract the content from"),
    file: Path | None = typer.Option(None, "--file", help="Read chord content from a file"),
    notes: str = typer.Option("", "--notes", help="Personal notes"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Save a song to the local songbook."""
    cfg = _setup(debug)
    if file is not None:
        content = file.read_text(encoding="utf-8")
    elif url:
        extracted = ChordService(cfg).extract_chord_content(url)
        if not extracted.ok:
            typer.echo(extracted.text, err=True)
            raise typer.Exit(code=1)
        content = extracted.text
    else:
        typer.echo(t("song_content_required"), err=True)
        raise typer.Exit(code=2)

    song = SongStore(cfg.db_path).save(
        title=title,
        artist=artist,
        chord_content=content,
        source_url=url or "",
        notes=notes,
    )
    typer.echo(t("song_saved", id=song.id, share_id=song.share_id))


@app.command()
def songs(
    query: str | None = typer.Option(None, "--query", "-q", help="Filter by title or artist"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List saved songs."""
    cfg = _setup(False)
    store = SongStore(cfg.db_path)
    found = store.search(query) if query else store.list_all()

    if json_output:
        typer.echo(json.dumps([_song_dict(s) for s in found], indent=2, ensure_ascii=False))
        return
    if not found:
        typer.echo(t("no_songs"))
        return
    for s in found:
        typer.echo(f"{s.id}. {s.display}  [{s.share_id}]")


@app.command()
def show(
    song_id: int | None = typer.Argument(None, help="Song id"),
    share: str | None = typer.Option(None, "--share", help="Look up by share id instead"),
):
    """Print a saved song."""
    cfg = _setup(False)
    store = SongStore(cfg.db_path)
    song = store.get_by_share_id(share) if share else (store.get_by_id(song_id) if song_id is not None else None)
    if song is None:
        typer.echo(t("song_not_found"), err=True)
        raise typer.Exit(code=1)

    typer.echo(format_sheet(song.display, song.chord_content, theme=_theme()), nl=False)
    if song.source_url:
        typer.echo(f"\n{song.source_url}")
    if song.notes:
        typer.echo(f"\n{song.notes}")


@app.command()
def update(
    song_id: int,
    title: str | None = typer.Option(None, "--title"),
    artist: str | None = typer.Option(None, "--artist"),
    notes: str | None = typer.Option(None, "--notes"),
    file: Path | None = typer.Option(None, "--file", help="Replace chord content from a file"),
):
    """Edit a saved song."""
    cfg = _setup(False)
    content = file.read_text(encoding="utf-8") if file is not None else None
    song = SongStore(cfg.db_path).update(song_id, title=title, artist=artist, notes=notes, chord_content=content)
    if song is None:
        typer.echo(t("song_not_found"), err=True)
        raise typer.Exit(code=1)
    typer.echo(t("song_updated", id=song.id))


@app.command()
def delete(song_id: int):
    """Delete a saved song."""
    cfg = _setup(False)
    if not SongStore(cfg.db_path).delete(song_id):
        typer.echo(t("song_not_found"), err=True)
        raise typer.Exit(code=1)
    typer.echo(t("song_deleted", id=song_id))


@app.command()
def config(
    lang: str = typer.Option(..., "--lang", case_sensitive=False, help="EN|RU"),
):
    """Save the interface language."""
    code = supported(lang)
    if code is None:
        raise typer.BadParameter("lang must be one of: " + ", ".join(c.upper() for c in SUPPORTED_LANGS))
    save_config_lang(code)
    set_lang(code)
    typer.echo(t("lang_saved", lang=current_lang()))


def main() -> None:
    colorama.just_fix_windows_console()
    app()


if __name__ == "__main__":
    main()
