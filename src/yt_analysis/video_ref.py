import logging
import re
from typing import Optional

from yt_analysis.errors import InvalidUrlError
from yt_analysis.models import VideoReference

logger = logging.getLogger(__name__)

# watch?v=, youtu.be/, v/, embed/ and /u/<x>/ forms. Group 7 holds the candidate ID.
VIDEO_URL_PATTERN = re.compile(
    r"^.*((youtu.be\/)|(v\/)|(\/u\/\w\/)|(embed\/)|(watch\?))\??v?=?([^#&?]*).*"
)
VIDEO_ID_LENGTH = 11


def extract_video_id(url: Optional[str]) -> Optional[str]:
    """
    Extracts the 11 character video ID from a YouTube URL.

    Returns:
        The video ID, or None when the URL is empty, does not match a known
        YouTube shape, or the matched segment is not exactly 11 characters.
    """
    if not url:
        logger.error("Missing URL parameter")
        return None

    match = VIDEO_URL_PATTERN.match(url)
    if match and match.group(7) and len(match.group(7)) == VIDEO_ID_LENGTH:
        return match.group(7)

    logger.error(f"Could not extract video ID from URL: {url}")
    return None


def resolve_video_reference(url: Optional[str]) -> VideoReference:
    """
    Raises:
        InvalidUrlError: if no valid video ID can be extracted.
    """
    video_id = extract_video_id(url)
    if video_id is None:
        raise InvalidUrlError(url or "")
    return VideoReference(video_id=video_id, video_url=url)
