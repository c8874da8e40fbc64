from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

THUMBNAIL_URL_TEMPLATE = "https://img.youtube.com/vi/{video_id}/hqdefault.jpg"


class CamelModel(BaseModel):
    """Serialises with the camelCase keys the dashboard expects."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class VideoReference(CamelModel):
    video_id: str
    video_url: str


class VideoMetadata(CamelModel):
    title: str
    author: str = "Unknown"
    length_seconds: int = 0
    thumbnail_url: str
    description: str = ""
    video_id: str
    video_url: str

    @classmethod
    def from_raw(cls, reference: VideoReference, raw: Optional[dict]) -> "VideoMetadata":
        """Builds metadata from an oEmbed style dict, substituting placeholders."""
        raw = raw or {}
        video_id = reference.video_id
        return cls(
            title=raw.get("title") or f"Video {video_id}",
            author=raw.get("author_name") or "Unknown",
            length_seconds=raw.get("length_seconds") or 0,
            thumbnail_url=raw.get("thumbnail_url") or THUMBNAIL_URL_TEMPLATE.format(video_id=video_id),
            description=raw.get("description") or "",
            video_id=video_id,
            video_url=reference.video_url,
        )


class TranscriptError(CamelModel):
    message: str
    code: str


class Transcript(CamelModel):
    content: str
    segments: List[Any] = Field(default_factory=list)
    video_info: VideoMetadata
    error: Optional[TranscriptError] = None


class FrameworkComponent(CamelModel):
    heading: str
    description: str


class Framework(CamelModel):
    title: str
    components: List[FrameworkComponent]


class Topic(CamelModel):
    title: str
    description: str


class Analysis(CamelModel):
    title: str
    framework: Framework
    summary: str
    key_takeaways: List[str]
    topics: List[Topic]


class AnalysisPayload(CamelModel):
    transcript: Transcript
    analysis: Analysis


class AnalysisResponse(CamelModel):
    success: bool
    partial: Optional[bool] = None
    error: Optional[Union[str, Dict[str, str]]] = None
    troubleshooting: Optional[str] = None
    stack: Optional[str] = None
    request_id: str
    processing_time: int
    data: Optional[AnalysisPayload] = None
    status_code: int = Field(default=200, exclude=True)
