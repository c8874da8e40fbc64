from yt_analysis.app import create_app, logger
from yt_analysis.config import load_settings

settings = load_settings()
app = create_app(settings)


if __name__ == "__main__":
    logger.info("Starting Quart app...")
    app.run(host=settings.host, port=settings.port)
