from yt_analysis.config import Settings
from yt_analysis.metadata import OEMBED_URL
from yt_analysis.orchestrator import AnalysisOrchestrator
from yt_analysis.transcripts import SUPADATA_TRANSCRIPT_URL

from fakes import VIDEO_ID, VIDEO_URL, FakeHttp, FakeProvider, FakeResponse, transcript_ok


def make_orchestrator(settings, http, provider):
    return AnalysisOrchestrator(settings, http=http, llm_provider_factory=lambda _settings: provider)


def test_full_success(settings, fake_http, fake_provider):
    response = make_orchestrator(settings, fake_http, fake_provider).analyze(VIDEO_URL, request_id="abc12345")
    body = response.to_dict()

    assert response.status_code == 200
    assert body["success"] is True
    assert "partial" not in body
    assert body["requestId"] == "abc12345"
    assert isinstance(body["processingTime"], int)

    transcript = body["data"]["transcript"]
    assert transcript["content"] == "We're no strangers to love"
    assert transcript["videoInfo"]["title"] == "Never Gonna Give You Up"
    assert transcript["videoInfo"]["author"] == "Rick Astley"
    assert "error" not in transcript

    analysis = body["data"]["analysis"]
    assert analysis["framework"]["title"] == "Never Gonna Give You Up"
    assert analysis["keyTakeaways"][:3] == [
        "Commit to the relationship",
        "Never give up",
        "Never let anyone down",
    ]
    assert [t["title"] for t in analysis["topics"]] == ["Loyalty", "Honesty"]


def test_transcript_http_500_yields_failure(settings, fake_provider):
    http = FakeHttp({SUPADATA_TRANSCRIPT_URL: FakeResponse(500, {})})

    response = make_orchestrator(settings, http, fake_provider).analyze(VIDEO_URL)
    body = response.to_dict()

    assert body["success"] is False
    assert body["error"] == "Failed to fetch transcript: Supadata API returned status: 500"
    transcript = body["data"]["transcript"]
    assert transcript["error"] == {
        "message": "Supadata API returned status: 500",
        "code": "TRANSCRIPT_FETCH_ERROR",
    }
    assert transcript["content"] == f"Could not fetch transcript for video {VIDEO_ID}"
    assert transcript["segments"] == []
    # metadata failed too, so defaults flow into the fallback analysis
    assert body["data"]["analysis"]["framework"]["title"] == f"Framework for Video {VIDEO_ID}"
    assert fake_provider.calls == []
    assert "requestId" in body and "processingTime" in body


def test_llm_failure_yields_partial_success(settings, fake_http):
    provider = FakeProvider(error=RuntimeError("model overloaded"))

    response = make_orchestrator(settings, fake_http, provider).analyze(VIDEO_URL)
    body = response.to_dict()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["partial"] is True
    assert body["error"] == {"analysis": "Error generating analysis: model overloaded"}
    assert body["data"]["transcript"]["content"] == "We're no strangers to love"
    analysis = body["data"]["analysis"]
    assert analysis["framework"] == {
        "title": "Framework for Never Gonna Give You Up",
        "components": [
            {
                "heading": "Summary",
                "description": "A summary of the video could not be generated automatically.",
            }
        ],
    }
    assert analysis["summary"] == "Unable to generate a summary for this video."


def test_missing_supadata_key_makes_no_network_call(fake_http, fake_provider):
    settings = Settings(groq_api_key="groq-test-key")

    response = make_orchestrator(settings, fake_http, fake_provider).analyze(VIDEO_URL)
    body = response.to_dict()

    assert response.status_code == 500
    assert "Missing Supadata API key" in body["error"]
    assert body["troubleshooting"] == "Add SUPADATA_API_KEY to your environment variables"
    assert fake_http.calls == []
    assert fake_provider.calls == []


def test_missing_groq_key(fake_http, fake_provider):
    settings = Settings(supadata_api_key="supadata-test-key")

    response = make_orchestrator(settings, fake_http, fake_provider).analyze(VIDEO_URL)

    assert response.status_code == 500
    assert response.error == "Server configuration error: Missing Groq API key"
    assert fake_http.calls == []


def test_missing_video_url(settings, fake_http, fake_provider):
    response = make_orchestrator(settings, fake_http, fake_provider).analyze(None)
    assert response.status_code == 400
    assert response.error == "Missing videoUrl parameter in request body"


def test_invalid_url(settings, fake_http, fake_provider):
    response = make_orchestrator(settings, fake_http, fake_provider).analyze("https://vimeo.com/12345")
    assert response.status_code == 400
    assert response.error == "Invalid YouTube URL. Could not extract video ID."
    assert fake_http.calls == []


def test_metadata_failure_is_absorbed(settings, fake_provider):
    http = FakeHttp({OEMBED_URL: FakeResponse(503, {}), SUPADATA_TRANSCRIPT_URL: transcript_ok()})

    body = make_orchestrator(settings, http, fake_provider).analyze(VIDEO_URL).to_dict()

    assert body["success"] is True
    info = body["data"]["transcript"]["videoInfo"]
    assert info["title"] == f"Video {VIDEO_ID}"
    assert info["author"] == "Unknown"
    assert info["thumbnailUrl"] == f"https://img.youtube.com/vi/{VIDEO_ID}/hqdefault.jpg"
    assert body["data"]["analysis"]["framework"]["title"] == f"Framework for {VIDEO_ID}"


def test_unexpected_error_becomes_server_error(settings, fake_http):
    def broken_factory(_settings):
        raise RuntimeError("client exploded")

    orchestrator = AnalysisOrchestrator(settings, http=fake_http, llm_provider_factory=broken_factory)
    response = orchestrator.analyze(VIDEO_URL)
    body = response.to_dict()

    assert response.status_code == 500
    assert body["success"] is False
    assert body["error"] == "Server error: client exploded"
    assert "stack" not in body


def test_stack_trace_only_in_development(fake_http):
    settings = Settings(supadata_api_key="s", groq_api_key="g", app_env="development")

    def broken_factory(_settings):
        raise RuntimeError("client exploded")

    orchestrator = AnalysisOrchestrator(settings, http=fake_http, llm_provider_factory=broken_factory)
    body = orchestrator.analyze(VIDEO_URL).to_dict()

    assert "RuntimeError: client exploded" in body["stack"]


def test_long_transcript_is_truncated_before_summarization(settings, fake_provider):
    http = FakeHttp({OEMBED_URL: FakeResponse(404, {}), SUPADATA_TRANSCRIPT_URL: transcript_ok("z" * 20000)})

    make_orchestrator(settings, http, fake_provider).analyze(VIDEO_URL)

    _, content = fake_provider.calls[0]
    assert content.endswith("z" * 15000 + "...")


def test_malformed_metadata_falls_back_to_defaults(settings, fake_provider):
    malformed = FakeResponse(200, {"title": 12345, "author_name": "A", "length_seconds": "3:33"})
    http = FakeHttp({OEMBED_URL: malformed, SUPADATA_TRANSCRIPT_URL: transcript_ok()})

    response = make_orchestrator(settings, http, fake_provider).analyze(VIDEO_URL)
    body = response.to_dict()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["transcript"]["content"] == "We're no strangers to love"
    info = body["data"]["transcript"]["videoInfo"]
    assert info["title"] == f"Video {VIDEO_ID}"
    assert info["author"] == "Unknown"
    assert info["lengthSeconds"] == 0
    assert body["data"]["analysis"]["framework"]["title"] == f"Framework for {VIDEO_ID}"
