"""
cli.py — Command-line interface for yt-content-extractor.

Provides the `yt-content` command group (registered as a console script in
pyproject.toml):

    grab      Extract transcript / duration / comments / metadata for a video.
    playlist  List a playlist's videos, or export them to CSV.

Usage examples:
    yt-content grab "https://youtu.be/dQw4w9WgXcQ" --transcript
    yt-content grab "https://www.youtube.com/watch?v=dQw4w9WgXcQ" --duration --comments --metadata --best-effort
    yt-content playlist "https://www.youtube.com/playlist?list=PL..." --csv videos.csv

The API key is read from --api-key or the YOUTUBE_API_KEY environment
variable.  Transcript extraction works without one.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import NoReturn

import click

from yt_content_extractor.config import (
    API_KEY_ENV,
    DEFAULT_LANGUAGE,
    ExtractorConfig,
)
from yt_content_extractor.errors import ExtractionError
from yt_content_extractor.extractor import Options, YouTubeExtractor
from yt_content_extractor.identifiers import resolve_ids


def _fail(exc: ExtractionError) -> NoReturn:
    click.echo(f"Error: {exc.message}", err=True)
    sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group — the top-level `yt-content` command
# ---------------------------------------------------------------------------

@click.group()
@click.option(
    "--api-key",
    envvar=API_KEY_ENV,
    default=None,
    help=f"YouTube Data API key (defaults to ${API_KEY_ENV}).",
)
@click.option("--verbose", "-v", is_flag=True, help="Log requests and fallbacks to stderr.")
@click.pass_context
def main(ctx: click.Context, api_key: str | None, verbose: bool) -> None:
    """
    YouTube Content Extractor — transcripts, comments, metadata and playlists.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # Subcommands build the engine lazily via ctx.obj so --help works offline.
    ctx.obj = ExtractorConfig(api_key=api_key)


def _engine(ctx: click.Context, language: str | None = None) -> YouTubeExtractor:
    config: ExtractorConfig = ctx.obj
    if language:
        config = ExtractorConfig(api_key=config.api_key, language=language)
    return YouTubeExtractor(config)


# ---------------------------------------------------------------------------
# Subcommand: grab — per-video extraction
# ---------------------------------------------------------------------------

@main.command()
@click.argument("url")
@click.option("--metadata", is_flag=True, help="Output video metadata.")
@click.option("--duration", is_flag=True, help="Output the duration in minutes.")
@click.option("--comments", is_flag=True, help="Output the comments on the video.")
@click.option("--transcript", is_flag=True, help="Output the transcript.")
@click.option(
    "--transcript-with-timestamps",
    is_flag=True,
    help="Output the transcript with [HH:MM:SS - HH:MM:SS] timestamps.",
)
@click.option(
    "--lang", "-l",
    default=DEFAULT_LANGUAGE,
    show_default=True,
    help="Caption language; falls back to the first available track.",
)
@click.option(
    "--best-effort",
    is_flag=True,
    help="Keep going after a field fails instead of stopping at the first error.",
)
@click.pass_context
def grab(
    ctx: click.Context,
    url: str,
    metadata: bool,
    duration: bool,
    comments: bool,
    transcript: bool,
    transcript_with_timestamps: bool,
    lang: str,
    best_effort: bool,
) -> None:
    """
    Extract content from a YouTube video URL and print it as JSON.

    With no field flags, only the transcript is fetched.
    """
    if not any((metadata, duration, comments, transcript, transcript_with_timestamps)):
        transcript = True

    options = Options(
        metadata=metadata,
        duration=duration,
        comments=comments,
        transcript=transcript,
        transcript_with_timestamps=transcript_with_timestamps,
        language=lang,
    )

    try:
        engine = _engine(ctx, lang)
        if best_effort:
            info = engine.grab_best_effort(url, options)
        else:
            info = engine.grab(url, options)
    except ExtractionError as exc:
        _fail(exc)

    click.echo(json.dumps(info.to_dict(), indent=2, ensure_ascii=False))
    if info.errors:
        for name, exc in info.errors.items():
            click.echo(f"Error ({name}): {exc.message}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# Subcommand: playlist — enumerate / export a playlist
# ---------------------------------------------------------------------------

@main.command()
@click.argument("playlist", metavar="URL_OR_ID")
@click.option(
    "--csv", "csv_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write VideoID,Title rows to this CSV file instead of printing.",
)
@click.pass_context
def playlist(ctx: click.Context, playlist: str, csv_path: str | None) -> None:
    """
    List every video in a playlist.

    URL_OR_ID can be any URL with a list= parameter, or a bare playlist id.
    """
    try:
        playlist_id = resolve_ids(playlist).playlist_id
    except ExtractionError:
        playlist_id = ""
    if not playlist_id:
        # No list= parameter: take the argument as a bare id unless it's a
        # video URL, which can't be enumerated.
        if "/" in playlist or "?" in playlist:
            raise click.BadParameter("no list= parameter found", param_hint="URL_OR_ID")
        playlist_id = playlist

    try:
        engine = _engine(ctx)
        if csv_path:
            engine.fetch_and_save_playlist(playlist_id, csv_path)
            click.echo(f"Playlist saved to {csv_path}", err=True)
        else:
            engine.fetch_and_print_playlist(playlist_id)
    except ExtractionError as exc:
        _fail(exc)
