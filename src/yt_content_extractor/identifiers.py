"""
identifiers.py — Pull video and playlist ids out of YouTube URLs.

YouTube's path conventions are varied and only informally documented, so
the video pattern is deliberately permissive: it is searched for anywhere in
the input rather than validated against a URL grammar.  Recognised shapes:

    - https://www.youtube.com/watch?v=VIDEO_ID
    - https://youtu.be/VIDEO_ID
    - https://www.youtube.com/embed/VIDEO_ID  (and /e/VIDEO_ID)
    - https://www.youtube.com/v/VIDEO_ID
    - https://www.youtube.com/shorts/VIDEO_ID
    - https://www.youtube.com/live/VIDEO_ID
    - https://www.youtube.com/<user>/<anything>/VIDEO_ID
    - any of the above carrying a &list=PLAYLIST_ID parameter

The playlist pattern is independent, so one URL can yield both ids.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from yt_content_extractor.errors import InvalidURLError, PlaylistNotVideoError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# The id group is allowed to be empty ("watch?v=" with nothing after it);
# an empty match counts as "no video id".  The v= branch comes before the
# generic path branch, whose greedy \S+ would otherwise run to the last "/"
# in a later query value.
_VIDEO_PATTERN = re.compile(
    r"(?:https?://)?(?:www\.)?"
    r"(?:youtube\.com/"
    r"(?:live/|\S*?[?&]v=|[^/\n\s]+/\S+/|(?:v|e(?:mbed)?)/|shorts/)"
    r"|youtu\.be/)"
    r"(?P<id>[a-zA-Z0-9_-]*)"
)

_PLAYLIST_PATTERN = re.compile(r"[?&]list=(?P<id>[a-zA-Z0-9_-]+)")


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

class VideoIdentifier(NamedTuple):
    """The ids found in a URL.  Empty string means "not present"."""
    video_id: str
    playlist_id: str


def resolve_ids(url: str) -> VideoIdentifier:
    """
    Extract the video id and/or playlist id from a URL string.

    No precedence is applied here: a playlist-context video URL returns
    both ids.

    Args:
        url: Any string that may contain a YouTube URL.

    Returns:
        A VideoIdentifier; at least one of its fields is non-empty.

    Raises:
        InvalidURLError: If neither pattern matches.
    """
    video_id = ""
    video_match = _VIDEO_PATTERN.search(url)
    if video_match:
        video_id = video_match.group("id")

    playlist_id = ""
    playlist_match = _PLAYLIST_PATTERN.search(url)
    if playlist_match:
        playlist_id = playlist_match.group("id")

    if not video_id and not playlist_id:
        raise InvalidURLError(url)

    return VideoIdentifier(video_id, playlist_id)


def require_video_id(url: str) -> str:
    """
    Resolve a URL for a video-level operation.

    A video id always wins when both are present.

    Raises:
        InvalidURLError:       If the URL has no recognisable id.
        PlaylistNotVideoError: If the URL only names a playlist.
    """
    video_id, playlist_id = resolve_ids(url)
    if not video_id:
        raise PlaylistNotVideoError(playlist_id)
    return video_id
