"""
test_playlist.py — Tests for playlist enumeration and CSV export.

The Data API resource is a MagicMock and the pacing sleep is replaced, so
these tests never touch the network or actually wait.
"""

from __future__ import annotations

import csv
import io
from unittest.mock import MagicMock, call

import pytest
from googleapiclient.errors import HttpError

from yt_content_extractor.errors import ExportError, FetchError
from yt_content_extractor.playlist import (
    PlaylistEnumerator,
    PlaylistItem,
    fetch_and_print_playlist,
    fetch_and_save_playlist,
    normalize_title,
    save_videos_to_csv,
)

PLAYLIST_ID = "PLrAXtmErZgOeiKm4sgNOknGvNjby9efdf"


# ---------------------------------------------------------------------------
# Helpers — fake playlistItems pages
# ---------------------------------------------------------------------------

def _page(start: int, count: int, next_token: str | None = None) -> dict:
    """A playlistItems.list response with `count` items numbered from `start`."""
    page: dict = {
        "items": [
            {
                "snippet": {
                    "title": f"Episode {n}: Part #{n}",
                    "resourceId": {"kind": "youtube#video", "videoId": f"vid{n:08d}"},
                },
            }
            for n in range(start, start + count)
        ],
    }
    if next_token:
        page["nextPageToken"] = next_token
    return page


def _service(*pages) -> MagicMock:
    service = MagicMock()
    service.playlistItems.return_value.list.return_value.execute.side_effect = list(pages)
    return service


def _read_csv(path) -> list[list[str]]:
    with open(path, newline="", encoding="utf-8") as fh:
        return list(csv.reader(fh))


# ---------------------------------------------------------------------------
# normalize_title
# ---------------------------------------------------------------------------

class TestNormalizeTitle:
    """Runs of non-alphanumerics collapse into a single underscore."""

    @pytest.mark.parametrize("title, expected", [
        ("Hello, World!", "Hello_World_"),
        ("AC/DC -- Live", "AC_DC_Live"),
        ("plain", "plain"),
        ("Café 2024", "Caf_2024"),
        ("", ""),
    ])
    def test_normalize(self, title: str, expected: str) -> None:
        assert normalize_title(title) == expected

    def test_item_from_title(self) -> None:
        item = PlaylistItem.from_title("abc", "Part 1: Intro")
        assert item == PlaylistItem("abc", "Part 1: Intro", "Part_1_Intro")


# ---------------------------------------------------------------------------
# PlaylistEnumerator
# ---------------------------------------------------------------------------

class TestFetchPlaylistVideos:
    """Pagination, ordering and pacing."""

    def test_two_pages(self) -> None:
        """50 + 10 items → 60 in order, with exactly one pause between pages."""
        service = _service(_page(0, 50, next_token="PAGE2"), _page(50, 10))
        sleep = MagicMock()

        videos = PlaylistEnumerator(service, sleep=sleep).fetch_playlist_videos(PLAYLIST_ID)

        assert len(videos) == 60
        assert [v.video_id for v in videos] == [f"vid{n:08d}" for n in range(60)]
        assert videos[0].normalized_title == "Episode_0_Part_0"
        sleep.assert_called_once_with(1.0)

        list_calls = service.playlistItems.return_value.list.call_args_list
        assert list_calls == [
            call(part="snippet", playlistId=PLAYLIST_ID, maxResults=50, pageToken=None),
            call(part="snippet", playlistId=PLAYLIST_ID, maxResults=50, pageToken="PAGE2"),
        ]

    def test_single_page_never_sleeps(self) -> None:
        sleep = MagicMock()
        videos = PlaylistEnumerator(_service(_page(0, 3)), sleep=sleep).fetch_playlist_videos(PLAYLIST_ID)

        assert len(videos) == 3
        sleep.assert_not_called()

    def test_custom_pacing_interval(self) -> None:
        service = _service(_page(0, 1, "B"), _page(1, 1, "C"), _page(2, 1))
        sleep = MagicMock()

        PlaylistEnumerator(service, pacing_interval=0.25, sleep=sleep).fetch_playlist_videos(PLAYLIST_ID)

        assert sleep.call_args_list == [call(0.25), call(0.25)]

    def test_empty_playlist(self) -> None:
        assert PlaylistEnumerator(_service({"items": []}), sleep=MagicMock()).fetch_playlist_videos(PLAYLIST_ID) == []

    def test_http_error_aborts(self) -> None:
        resp = MagicMock()
        resp.status = 404
        resp.reason = "Not Found"
        service = _service(_page(0, 50, "PAGE2"), HttpError(resp, b"playlistNotFound"))

        with pytest.raises(FetchError) as exc_info:
            PlaylistEnumerator(service, sleep=MagicMock()).fetch_playlist_videos(PLAYLIST_ID)

        assert PLAYLIST_ID in exc_info.value.message
        assert "page 2" in exc_info.value.message


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------

class TestSaveVideosToCsv:
    """Header, raw ids and titles, overwrite semantics."""

    def test_rows_round_trip(self, tmp_path) -> None:
        videos = [
            PlaylistItem.from_title("abc", "Simple title"),
            PlaylistItem.from_title("def", 'Commas, "quotes" and\nnewlines'),
        ]
        path = tmp_path / "playlist.csv"

        save_videos_to_csv(str(path), videos)

        assert _read_csv(path) == [
            ["VideoID", "Title"],
            ["abc", "Simple title"],
            ["def", 'Commas, "quotes" and\nnewlines'],
        ]

    def test_empty_list_writes_header_only(self, tmp_path) -> None:
        path = tmp_path / "empty.csv"
        save_videos_to_csv(str(path), [])
        assert _read_csv(path) == [["VideoID", "Title"]]

    def test_overwrites_existing_file(self, tmp_path) -> None:
        path = tmp_path / "playlist.csv"
        path.write_text("old,content\n" * 5, encoding="utf-8")

        save_videos_to_csv(str(path), [PlaylistItem.from_title("abc", "New")])

        assert _read_csv(path) == [["VideoID", "Title"], ["abc", "New"]]

    def test_unwritable_path_raises_export_error(self, tmp_path) -> None:
        path = tmp_path / "missing-dir" / "playlist.csv"
        with pytest.raises(ExportError) as exc_info:
            save_videos_to_csv(str(path), [])
        assert isinstance(exc_info.value.__cause__, OSError)


# ---------------------------------------------------------------------------
# Composed operations
# ---------------------------------------------------------------------------

class TestComposedOperations:
    """fetch_and_save_playlist / fetch_and_print_playlist."""

    def test_fetch_and_save(self, tmp_path) -> None:
        path = tmp_path / "out.csv"
        enumerator = PlaylistEnumerator(_service(_page(0, 2)), sleep=MagicMock())

        videos = fetch_and_save_playlist(enumerator, PLAYLIST_ID, str(path))

        assert len(videos) == 2
        assert _read_csv(path)[1] == ["vid00000000", "Episode 0: Part #0"]

    def test_fetch_failure_skips_export(self, tmp_path) -> None:
        """A failed enumeration never creates the CSV file."""
        path = tmp_path / "out.csv"
        resp = MagicMock()
        resp.status = 500
        resp.reason = "Backend Error"
        enumerator = PlaylistEnumerator(_service(HttpError(resp, b"")), sleep=MagicMock())

        with pytest.raises(FetchError):
            fetch_and_save_playlist(enumerator, PLAYLIST_ID, str(path))
        assert not path.exists()

    def test_fetch_and_print(self) -> None:
        out = io.StringIO()
        enumerator = PlaylistEnumerator(_service(_page(0, 2)), sleep=MagicMock())

        fetch_and_print_playlist(enumerator, PLAYLIST_ID, out)

        assert out.getvalue().splitlines() == [
            f"Playlist: {PLAYLIST_ID}",
            "VideoId: Title",
            "vid00000000: Episode 0: Part #0",
            "vid00000001: Episode 1: Part #1",
        ]
