# LISTINGS/core/logger
import logging

from LISTINGS.core.config import CLOUD_LOGGING, LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL, cloud: bool = CLOUD_LOGGING) -> None:
    """
    Route records to Google Cloud Logging when enabled, otherwise to stderr.
    """
    if cloud:
        import google.cloud.logging

        client = google.cloud.logging.Client()
        client.setup_logging(log_level=getattr(logging, level, logging.INFO))
        return

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def log_to_cloud(category: str, severity: str, message: str, metadata: dict = None):
    logging.getLogger("listings.events").log(
        getattr(logging, severity.upper(), logging.INFO),
        f"[{category}] {message}",
        extra={"metadata": metadata or {}}
    )
