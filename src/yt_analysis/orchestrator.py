import logging
import time
import traceback
import uuid
from typing import Callable, NamedTuple, Optional

import requests
from pydantic import ValidationError

from yt_analysis.config import Settings
from yt_analysis.errors import (
    InvalidUrlError,
    MissingConfigurationError,
    SummarizationError,
    TranscriptFetchError,
)
from yt_analysis.llm_providers import LLMProvider, get_llm_provider
from yt_analysis.metadata import build_youtube_client, fetch_metadata
from yt_analysis.models import (
    AnalysisPayload,
    AnalysisResponse,
    Transcript,
    TranscriptError,
    VideoMetadata,
    VideoReference,
)
from yt_analysis.postprocess import build_analysis, fallback_analysis
from yt_analysis.summarizer import Summarizer
from yt_analysis.transcripts import fetch_transcript
from yt_analysis.video_ref import resolve_video_reference

default_logger = logging.getLogger(__name__)


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class MetadataOutcome(NamedTuple):
    video_info: VideoMetadata
    # oEmbed title, only when the lookup succeeded
    title: Optional[str] = None


class TranscriptOutcome(NamedTuple):
    transcript: Transcript
    error: Optional[TranscriptFetchError] = None


class SummaryOutcome(NamedTuple):
    text: Optional[str] = None
    error: Optional[SummarizationError] = None
    skipped: bool = False


class RequestContext:
    """Per-request values shared by the pipeline stages."""

    def __init__(self, request_id: str, logger: logging.Logger):
        self.request_id = request_id
        self.logger = logger
        self.started = time.monotonic()

    def elapsed_ms(self) -> int:
        return int((time.monotonic() - self.started) * 1000)

    def info(self, message: str) -> None:
        self.logger.info(f"[{self.request_id}] {message}")

    def warning(self, message: str) -> None:
        self.logger.warning(f"[{self.request_id}] {message}")

    def error(self, message: str) -> None:
        self.logger.error(f"[{self.request_id}] {message}")


class AnalysisOrchestrator:
    """
    Runs the analysis pipeline for one video URL:

        resolve ID -> metadata -> transcript -> summarization -> reduce

    Each stage returns a value describing what happened; ``_reduce`` picks the
    response tier. Metadata failures degrade to defaults, transcript failures
    skip summarization and yield a failed response, summarization failures
    yield a partial one. Nothing is retried.
    """

    def __init__(
        self,
        settings: Settings,
        logger: Optional[logging.Logger] = None,
        http=requests,
        llm_provider_factory: Callable[[Settings], LLMProvider] = get_llm_provider,
        youtube_client=None,
    ):
        self.settings = settings
        self.logger = logger or default_logger
        self.http = http
        self.llm_provider_factory = llm_provider_factory
        self.youtube_client = youtube_client or build_youtube_client(settings.youtube_api_key)

    def analyze(self, video_url: Optional[str], request_id: Optional[str] = None) -> AnalysisResponse:
        ctx = RequestContext(request_id or new_request_id(), self.logger)
        try:
            return self._run(ctx, video_url)
        except Exception as e:
            self.logger.exception(f"[{ctx.request_id}] Server error: {e}")
            return AnalysisResponse(
                success=False,
                request_id=ctx.request_id,
                processing_time=ctx.elapsed_ms(),
                error=f"Server error: {e}",
                stack=traceback.format_exc() if self.settings.is_development else None,
                status_code=500,
            )

    def _run(self, ctx: RequestContext, video_url: Optional[str]) -> AnalysisResponse:
        if not video_url:
            ctx.error("Missing videoUrl in request body")
            return self._failure(ctx, "Missing videoUrl parameter in request body", 400)

        ctx.info(f"Processing YouTube URL: {video_url}")

        try:
            self.settings.check_required_keys()
        except MissingConfigurationError as e:
            ctx.error(f"Missing {e.env_var} environment variable")
            return self._failure(ctx, str(e), 500, troubleshooting=e.troubleshooting)

        summarizer = Summarizer(self.llm_provider_factory(self.settings))

        try:
            reference = self._resolve(ctx, video_url)
        except InvalidUrlError:
            return self._failure(ctx, "Invalid YouTube URL. Could not extract video ID.", 400)

        metadata_outcome = self._fetch_metadata(ctx, reference)
        video_info = metadata_outcome.video_info
        transcript_outcome = self._fetch_transcript(ctx, reference, video_info)
        summary_outcome = self._summarize(ctx, summarizer, transcript_outcome)

        framework_title = metadata_outcome.title or f"Framework for {reference.video_id}"
        return self._reduce(ctx, video_info, framework_title, transcript_outcome, summary_outcome)

    def _resolve(self, ctx: RequestContext, video_url: str) -> VideoReference:
        reference = resolve_video_reference(video_url)
        ctx.info(f"Extracted video ID: {reference.video_id}")
        return reference

    def _fetch_metadata(self, ctx: RequestContext, reference: VideoReference) -> MetadataOutcome:
        raw = fetch_metadata(
            reference.video_url,
            http=self.http,
            youtube_client=self.youtube_client,
            timeout=self.settings.http_timeout_seconds,
        )
        if raw is None:
            ctx.warning("Metadata unavailable, using defaults")
            return MetadataOutcome(video_info=VideoMetadata.from_raw(reference, None))

        try:
            video_info = VideoMetadata.from_raw(reference, raw)
        except ValidationError as e:
            ctx.warning(f"Discarding malformed metadata, using defaults: {e}")
            return MetadataOutcome(video_info=VideoMetadata.from_raw(reference, None))
        return MetadataOutcome(video_info=video_info, title=video_info.title if raw.get("title") else None)

    def _fetch_transcript(
        self, ctx: RequestContext, reference: VideoReference, video_info: VideoMetadata
    ) -> TranscriptOutcome:
        ctx.info(f"Fetching transcript for video ID: {reference.video_id}")
        try:
            text, segments = fetch_transcript(
                reference.video_id,
                self.settings.supadata_api_key,
                http=self.http,
                timeout=self.settings.http_timeout_seconds,
            )
        except TranscriptFetchError as e:
            ctx.error(f"Error fetching transcript: {e}")
            placeholder = Transcript(
                content=f"Could not fetch transcript for video {reference.video_id}",
                segments=[],
                video_info=video_info,
                error=TranscriptError(message=str(e), code=e.code),
            )
            return TranscriptOutcome(transcript=placeholder, error=e)

        ctx.info(f"Successfully fetched transcript ({len(text)} chars)")
        return TranscriptOutcome(transcript=Transcript(content=text, segments=segments, video_info=video_info))

    def _summarize(
        self, ctx: RequestContext, summarizer: Summarizer, transcript_outcome: TranscriptOutcome
    ) -> SummaryOutcome:
        if transcript_outcome.error is not None:
            ctx.info("Skipping summarization after transcript failure")
            return SummaryOutcome(skipped=True)

        ctx.info("Getting framework analysis from the LLM provider")
        try:
            text = summarizer.summarize(transcript_outcome.transcript.content)
        except SummarizationError as e:
            ctx.error(f"Error with LLM analysis: {e}")
            return SummaryOutcome(error=e)

        ctx.info("LLM analysis completed successfully")
        return SummaryOutcome(text=text)

    def _reduce(
        self,
        ctx: RequestContext,
        video_info: VideoMetadata,
        framework_title: str,
        transcript_outcome: TranscriptOutcome,
        summary_outcome: SummaryOutcome,
    ) -> AnalysisResponse:
        transcript = transcript_outcome.transcript

        if transcript_outcome.error is not None:
            response = AnalysisResponse(
                success=False,
                error=f"Failed to fetch transcript: {transcript_outcome.error}",
                request_id=ctx.request_id,
                processing_time=ctx.elapsed_ms(),
                data=AnalysisPayload(transcript=transcript, analysis=fallback_analysis(video_info.title)),
            )
        elif summary_outcome.error is not None:
            response = AnalysisResponse(
                success=True,
                partial=True,
                error={"analysis": f"Error generating analysis: {summary_outcome.error}"},
                request_id=ctx.request_id,
                processing_time=ctx.elapsed_ms(),
                data=AnalysisPayload(transcript=transcript, analysis=fallback_analysis(video_info.title)),
            )
        else:
            analysis = build_analysis(summary_outcome.text or "", video_info.title, framework_title)
            response = AnalysisResponse(
                success=True,
                request_id=ctx.request_id,
                processing_time=ctx.elapsed_ms(),
                data=AnalysisPayload(transcript=transcript, analysis=analysis),
            )

        ctx.info(f"Request completed in {response.processing_time}ms (success={response.success})")
        return response

    def _failure(
        self, ctx: RequestContext, error: str, status_code: int, troubleshooting: Optional[str] = None
    ) -> AnalysisResponse:
        return AnalysisResponse(
            success=False,
            error=error,
            troubleshooting=troubleshooting,
            request_id=ctx.request_id,
            processing_time=ctx.elapsed_ms(),
            status_code=status_code,
        )
