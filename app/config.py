import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class Settings:
    PROJECT_NAME: str = "Uptime Timeline API"

    def __init__(self):
        self.TIMEZONE: str = os.getenv("TIMELINE_TIMEZONE", "UTC")
        self.REFRESH_INTERVAL_SECONDS: float = float(os.getenv("TIMELINE_REFRESH_SECONDS", 60))

        # Resolver policy thresholds
        self.STALE_HEARTBEAT_HOURS: float = float(os.getenv("STALE_HEARTBEAT_HOURS", 12))
        self.OUTAGE_GAP_HOURS: float = float(os.getenv("OUTAGE_GAP_HOURS", 24))
        self.INVALID_EVENT_POLICY: str = os.getenv("INVALID_EVENT_POLICY", "discard").lower()

        # Tooltip geometry (pixels)
        self.TOOLTIP_OFFSET_PX: float = float(os.getenv("TOOLTIP_OFFSET_PX", 60))
        self.TOOLTIP_WIDTH_PX: float = float(os.getenv("TOOLTIP_WIDTH_PX", 160))
        self.TOOLTIP_HEIGHT_PX: float = float(os.getenv("TOOLTIP_HEIGHT_PX", 72))

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.CORS_ORIGINS: list = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]

        logger.debug("Loaded settings:")
        logger.debug(f"  TIMELINE_TIMEZONE: {self.TIMEZONE}")
        logger.debug(f"  TIMELINE_REFRESH_SECONDS: {self.REFRESH_INTERVAL_SECONDS}")
        logger.debug(f"  INVALID_EVENT_POLICY: {self.INVALID_EVENT_POLICY}")


settings = Settings()
