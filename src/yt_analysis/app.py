import asyncio
import logging
import sys
from typing import Optional

from quart import Quart, Response, jsonify, request
from quart_cors import cors

from yt_analysis import API_VERSION
from yt_analysis.config import Settings, load_settings
from yt_analysis.orchestrator import AnalysisOrchestrator, new_request_id

ANALYSIS_ROUTE = "/api/youtube-analysis"
HEALTH_ROUTE = "/api/health"

CORS_ALLOW_METHODS = ["GET", "POST", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "X-Requested-With"]
CORS_MAX_AGE_SECONDS = 86400

CORS_PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    "Access-Control-Max-Age": str(CORS_MAX_AGE_SECONDS),
}

# Configure logging for the whole package so every module's records reach stdout
package_logger = logging.getLogger("yt_analysis")
package_logger.setLevel(logging.INFO)
if not package_logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"
    )
    handler.setFormatter(formatter)
    package_logger.addHandler(handler)

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[AnalysisOrchestrator] = None,
) -> Quart:
    settings = settings or load_settings()
    orchestrator = orchestrator or AnalysisOrchestrator(settings, logger=logger)

    logger.info(f"YouTube Analysis API v{API_VERSION} initialized")
    logger.info(f"Environment check: {settings.environment_report()} (app_env={settings.app_env})")

    app = cors(
        Quart(__name__),
        allow_origin="*",
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=CORS_ALLOW_HEADERS,
        max_age=CORS_MAX_AGE_SECONDS,
    )
    app.config["SETTINGS"] = settings
    app.config["ORCHESTRATOR"] = orchestrator

    @app.route("/")
    async def hello():
        return "Hello World - YouTube Analysis API"

    @app.route(HEALTH_ROUTE, methods=["GET"])
    async def health():
        return jsonify(
            {
                "success": True,
                "version": API_VERSION,
                "message": "YouTube Analysis API is running",
                "environment": settings.environment_report(),
            }
        )

    @app.route(ANALYSIS_ROUTE, methods=["GET", "POST", "OPTIONS"])
    async def youtube_analysis():
        if request.method == "OPTIONS":
            return Response("", status=204, headers=CORS_PREFLIGHT_HEADERS)
        if request.method == "GET":
            return await health()

        request_id = new_request_id()
        logger.info(f"[{request_id}] Request received")

        data = await request.get_json(silent=True)
        if not isinstance(data, dict):
            logger.error(f"[{request_id}] Invalid JSON payload")
            return jsonify({"success": False, "requestId": request_id, "error": "Invalid JSON payload"}), 400

        # The pipeline makes blocking HTTP calls; keep them off the event loop.
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, orchestrator.analyze, data.get("videoUrl"), request_id)
        return jsonify(result.to_dict()), result.status_code

    return app
