import logging
import re
from typing import Optional

import httplib2
import requests
from googleapiclient.discovery import build

from yt_analysis.config import DEFAULT_HTTP_TIMEOUT_SECONDS
from yt_analysis.errors import MetadataFetchError
from yt_analysis.video_ref import extract_video_id

logger = logging.getLogger(__name__)

OEMBED_URL = "https://www.youtube.com/oembed"

ISO_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def build_youtube_client(api_key: Optional[str]):
    """YouTube Data API v3 client, or None when no key is configured."""
    if not api_key:
        return None
    try:
        return build("youtube", "v3", developerKey=api_key, cache_discovery=False)
    except Exception as e:
        logger.warning(
            f"Could not initialize YouTube Data API client. "
            f"Duration and description will be left empty. Error: {e}"
        )
        return None


def parse_iso_duration(value: Optional[str]) -> int:
    """Converts an ISO-8601 duration such as ``PT1H2M3S`` to seconds. 0 if unparseable."""
    if not value:
        return 0
    match = ISO_DURATION_PATTERN.match(value)
    if not match:
        return 0
    parts = {name: int(amount or 0) for name, amount in match.groupdict().items()}
    return parts["days"] * 86400 + parts["hours"] * 3600 + parts["minutes"] * 60 + parts["seconds"]


def _fetch_oembed(video_id: str, http, timeout: Optional[float]) -> dict:
    watch_url = f"https://www.youtube.com/watch?v={video_id}"
    try:
        response = http.get(OEMBED_URL, params={"url": watch_url, "format": "json"}, timeout=timeout)
    except requests.RequestException as e:
        raise MetadataFetchError(f"oEmbed request failed: {e}") from e

    if not response.ok:
        raise MetadataFetchError(f"Metadata fetch failed with status: {response.status_code}")

    try:
        metadata = response.json()
    except ValueError as e:
        raise MetadataFetchError("oEmbed returned invalid JSON") from e

    if not isinstance(metadata, dict):
        raise MetadataFetchError("oEmbed returned an unexpected body")
    return metadata


def _fetch_video_details(video_id: str, youtube_client, timeout: Optional[float]) -> dict:
    """Duration and description from the Data API; oEmbed carries neither."""
    # httplib2.Http is not thread-safe, so every call gets its own.
    request = youtube_client.videos().list(part="snippet,contentDetails", id=video_id)
    response = request.execute(http=httplib2.Http(timeout=timeout))
    items = response.get("items") or []
    if not items:
        raise MetadataFetchError(f"No video found for ID: {video_id}")

    item = items[0]
    return {
        "length_seconds": parse_iso_duration(item.get("contentDetails", {}).get("duration")),
        "description": item.get("snippet", {}).get("description", ""),
    }


def fetch_metadata(
    video_url: str,
    http=requests,
    youtube_client=None,
    timeout: Optional[float] = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> Optional[dict]:
    """
    Looks up public metadata for a video URL.

    Returns the raw oEmbed dict (``title``, ``author_name``, ``thumbnail_url``,
    ...), enriched with ``length_seconds`` and ``description`` when a YouTube
    Data API client is given. Returns None on any failure; never raises.
    """
    video_id = extract_video_id(video_url)
    if not video_id:
        logger.error("Could not extract video ID from URL, skipping metadata")
        return None

    try:
        metadata = _fetch_oembed(video_id, http, timeout)
    except MetadataFetchError as e:
        logger.error(f"Error fetching YouTube metadata for {video_id}: {e}")
        return None
    except Exception as e:
        logger.exception(f"Unexpected error fetching YouTube metadata for {video_id}: {e}")
        return None
    logger.info(f'Fetched metadata for: "{metadata.get("title")}"')

    if youtube_client is not None:
        try:
            metadata.update(_fetch_video_details(video_id, youtube_client, timeout))
        except Exception as e:
            logger.warning(f"Could not fetch video details for {video_id}: {e}")

    return metadata
