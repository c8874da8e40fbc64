import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from yt_analysis.config import DEFAULT_HTTP_TIMEOUT_SECONDS
from yt_analysis.errors import TranscriptFetchError

logger = logging.getLogger(__name__)

SUPADATA_TRANSCRIPT_URL = "https://api.supadata.co/services/youtube/transcript"


def _parse_transcript_body(body: Any) -> Tuple[str, List[Dict[str, Any]]]:
    """
    Pulls text and segments out of a Supadata response body of the shape
    ``{"success": bool, "message": str, "data": {"text": str, "segments": [...]}}``.
    """
    if not isinstance(body, dict):
        raise TranscriptFetchError("Unexpected response body from Supadata API")

    if not body.get("success"):
        raise TranscriptFetchError(body.get("message") or "Unknown error from Supadata API")

    data = body.get("data")
    if not isinstance(data, dict) or not isinstance(data.get("text"), str):
        raise TranscriptFetchError("Supadata API response is missing transcript text")

    return data["text"], data.get("segments") or []


def fetch_transcript(
    video_id: str,
    api_key: str,
    http=requests,
    timeout: Optional[float] = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> Tuple[str, List[Dict[str, Any]]]:
    """
    Fetches the transcript for a given YouTube video ID from Supadata.

    Args:
        video_id (str): The ID of the YouTube video.
        api_key (str): Supadata API key, sent as the ``x-api-key`` header.
        http: Anything with a requests-compatible ``get``. Defaults to the
              ``requests`` module.
        timeout: Seconds to wait for the provider before giving up.

    Returns:
        tuple: (text, segments). Segments are passed through as the provider
               returns them.

    Raises:
        TranscriptFetchError: on a non-2xx status, a body reporting failure,
                              a malformed body or a network error.
    """
    try:
        response = http.get(
            SUPADATA_TRANSCRIPT_URL,
            params={"videoId": video_id},
            headers={"x-api-key": api_key, "Content-Type": "application/json"},
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise TranscriptFetchError(f"Could not reach Supadata API: {e}") from e

    if not response.ok:
        raise TranscriptFetchError(f"Supadata API returned status: {response.status_code}")

    try:
        body = response.json()
    except ValueError as e:
        raise TranscriptFetchError("Supadata API returned invalid JSON") from e

    text, segments = _parse_transcript_body(body)
    logger.info(f"Fetched transcript for {video_id} ({len(text)} chars, {len(segments)} segments)")
    return text, segments
