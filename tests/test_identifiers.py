"""
test_identifiers.py — Tests for video / playlist id resolution.

Covers every supported URL shape, URLs carrying both ids, and the
video-wins precedence applied by require_video_id().
"""

from __future__ import annotations

import pytest

from yt_content_extractor.errors import InvalidURLError, PlaylistNotVideoError
from yt_content_extractor.identifiers import require_video_id, resolve_ids

VIDEO_ID = "dQw4w9WgXcQ"
PLAYLIST_ID = "PLrAXtmErZgOeiKm4sgNOknGvNjby9efdf"


# ---------------------------------------------------------------------------
# resolve_ids — video URL shapes
# ---------------------------------------------------------------------------

class TestResolveVideoIds:
    """Each recognised video URL shape yields the id and no playlist."""

    @pytest.mark.parametrize("url", [
        f"https://www.youtube.com/watch?v={VIDEO_ID}",
        f"http://youtube.com/watch?v={VIDEO_ID}",
        f"https://m.youtube.com/watch?v={VIDEO_ID}",
        f"https://www.youtube.com/watch?feature=share&v={VIDEO_ID}",
        f"https://youtu.be/{VIDEO_ID}",
        f"https://youtu.be/{VIDEO_ID}?si=abcdef",
        f"https://www.youtube.com/embed/{VIDEO_ID}",
        f"https://www.youtube.com/e/{VIDEO_ID}",
        f"https://www.youtube.com/v/{VIDEO_ID}",
        f"https://www.youtube.com/shorts/{VIDEO_ID}",
        f"https://www.youtube.com/live/{VIDEO_ID}",
        f"https://www.youtube.com/user/SomeUser#p/a/u/1/{VIDEO_ID}",
        f"youtube.com/watch?v={VIDEO_ID}",
    ])
    def test_video_shapes(self, url: str) -> None:
        assert resolve_ids(url) == (VIDEO_ID, "")

    def test_watch_url_with_timestamp(self) -> None:
        """Extra parameters after the id don't leak into it."""
        url = f"https://www.youtube.com/watch?v={VIDEO_ID}&t=42s"
        assert resolve_ids(url).video_id == VIDEO_ID

    @pytest.mark.parametrize("url, playlist_id", [
        (f"https://www.youtube.com/watch?v={VIDEO_ID}&ref=https://t.co/abc", ""),
        (f"https://www.youtube.com/watch?v={VIDEO_ID}&list=PL1&pp=a/b/c", "PL1"),
    ])
    def test_slashes_in_later_query_values(self, url: str, playlist_id: str) -> None:
        """A later parameter containing "/" doesn't steal the v= id."""
        assert resolve_ids(url) == (VIDEO_ID, playlist_id)

    def test_ids_are_not_length_checked(self) -> None:
        """The pattern is permissive: any run of id characters is accepted."""
        assert resolve_ids("https://youtu.be/abc").video_id == "abc"


# ---------------------------------------------------------------------------
# resolve_ids — playlists and combinations
# ---------------------------------------------------------------------------

class TestResolvePlaylistIds:
    """Tests for the independent list= pattern."""

    def test_playlist_only(self) -> None:
        """A playlist URL yields the playlist id and an empty video id."""
        url = f"https://www.youtube.com/playlist?list={PLAYLIST_ID}"
        assert resolve_ids(url) == ("", PLAYLIST_ID)

    def test_video_in_playlist_context(self) -> None:
        """A watch URL with list= yields both ids."""
        url = f"https://www.youtube.com/watch?v={VIDEO_ID}&list={PLAYLIST_ID}&index=3"
        ids = resolve_ids(url)
        assert ids.video_id == VIDEO_ID
        assert ids.playlist_id == PLAYLIST_ID

    def test_short_link_with_playlist(self) -> None:
        url = f"https://youtu.be/{VIDEO_ID}?list={PLAYLIST_ID}"
        assert resolve_ids(url) == (VIDEO_ID, PLAYLIST_ID)

    def test_unpacks_as_tuple(self) -> None:
        video_id, playlist_id = resolve_ids(f"https://youtu.be/{VIDEO_ID}")
        assert (video_id, playlist_id) == (VIDEO_ID, "")


# ---------------------------------------------------------------------------
# resolve_ids — failures
# ---------------------------------------------------------------------------

class TestResolveFailures:
    """Inputs that match neither pattern raise InvalidURLError."""

    @pytest.mark.parametrize("url", [
        "",
        "not-a-youtube-url",
        "https://example.com/watch?v=dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=",
        "https://vimeo.com/123456",
    ])
    def test_invalid(self, url: str) -> None:
        with pytest.raises(InvalidURLError) as exc_info:
            resolve_ids(url)
        assert exc_info.value.http_status == 400


# ---------------------------------------------------------------------------
# require_video_id — precedence
# ---------------------------------------------------------------------------

class TestRequireVideoId:
    """Video id always wins; playlist-only URLs are rejected."""

    def test_video_wins_over_playlist(self) -> None:
        url = f"https://www.youtube.com/watch?v={VIDEO_ID}&list={PLAYLIST_ID}"
        assert require_video_id(url) == VIDEO_ID

    def test_playlist_only_raises(self) -> None:
        url = f"https://www.youtube.com/playlist?list={PLAYLIST_ID}"
        with pytest.raises(PlaylistNotVideoError) as exc_info:
            require_video_id(url)
        assert exc_info.value.playlist_id == PLAYLIST_ID

    def test_invalid_url_propagates(self) -> None:
        with pytest.raises(InvalidURLError):
            require_video_id("nothing here")
