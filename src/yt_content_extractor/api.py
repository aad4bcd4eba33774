"""
api.py — FastAPI REST API for yt-content-extractor.

Endpoints:
    POST /youtube              — Transcript plus optional comments/metadata,
                                 best-effort (per-field errors in the body).
    GET  /youtube/{video_id}   — Plain or timestamped transcript for one video.
    GET  /health               — Simple health-check for load balancers / monitoring.

Run with:
    uv run uvicorn yt_content_extractor.api:app

The engine is created once per process (see get_extractor) and shared by
every request thread.  The global exception handler converts any
ExtractionError into an HTTP response using the status stored on it.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from yt_content_extractor.config import DEFAULT_LANGUAGE
from yt_content_extractor.errors import ExtractionError
from yt_content_extractor.extractor import Options, YouTubeExtractor

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="YouTube Content Extractor API",
    description="Extract YouTube transcripts, comments and metadata from loosely-formed URLs.",
    version="0.1.0",
)


@lru_cache(maxsize=1)
def get_extractor() -> YouTubeExtractor:
    """Build the process-wide engine from the environment on first use."""
    return YouTubeExtractor()


class YouTubeRequest(BaseModel):
    url: str
    language: str = DEFAULT_LANGUAGE
    with_comments: bool = False
    with_metadata: bool = False
    with_timestamps: bool = False


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------

@app.exception_handler(ExtractionError)
async def extraction_error_handler(request: Request, exc: ExtractionError) -> JSONResponse:
    """Translate any ExtractionError (or subclass) into an HTTP error response."""
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.message},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.post("/youtube")
def grab_video(
    body: YouTubeRequest,
    extractor: YouTubeExtractor = Depends(get_extractor),
) -> JSONResponse:
    """
    Fetch the transcript and, optionally, comments and metadata.

    Every requested field is attempted.  Fields that fail are left out of
    the response and reported under `errors` as `<field>_error`; the status
    stays 200 unless the URL itself can't be resolved.
    """
    options = Options(
        transcript=not body.with_timestamps,
        transcript_with_timestamps=body.with_timestamps,
        comments=body.with_comments,
        metadata=body.with_metadata,
        language=body.language or DEFAULT_LANGUAGE,
    )
    info = extractor.grab_best_effort(body.url, options)

    result: dict = {}
    if info.transcript:
        result["transcript"] = info.transcript
    if info.comments:
        result["comments"] = info.comments
    if info.metadata is not None:
        result["metadata"] = info.metadata.to_dict()
    if info.errors:
        result["errors"] = {f"{name}_error": exc.message for name, exc in info.errors.items()}
    return JSONResponse(content=result)


# response_model=None because this returns a bare PlainTextResponse.
@app.get("/youtube/{video_id}", response_model=None)
def get_transcript(
    video_id: str,
    lang: str = Query(default=DEFAULT_LANGUAGE, description="Caption language code."),
    timestamps: bool = Query(default=False, description="Prefix each line with [start - end]."),
    extractor: YouTubeExtractor = Depends(get_extractor),
) -> PlainTextResponse:
    """
    Fetch the transcript for a single video id.

    Failures propagate to the global handler (404 for a missing transcript).
    """
    if timestamps:
        text = extractor.grab_transcript_with_timestamps(video_id, lang)
    else:
        text = extractor.grab_transcript(video_id, lang)
    return PlainTextResponse(content=text)


@app.get("/health")
async def health() -> dict:
    """Returns HTTP 200 with {"status": "ok"}."""
    return {"status": "ok"}
