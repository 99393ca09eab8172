"""Application settings and configuration"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Emoji Trends Explorer"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Data sources
    DATA_BASE_URL: str = "http://localhost:8000"
    DATA_DIR: Optional[str] = None  # Read files from disk instead of HTTP when set
    TIMESERIES_PATH: str = "data/emojis_50"
    SENTIMENT_PATH: str = "data/Emoji_Sentiment_Data_v1.0.csv"
    EMOJI_METADATA_URL: str = "https://unpkg.com/emoji-datasource@15.0.0/emoji.json"
    PLATFORM_IMAGE_URL_TEMPLATE: str = (
        "https://cdn.jsdelivr.net/npm/emoji-datasource-{platform}@15.0.0/img/{platform}/64/{unified}.png"
    )

    # Fetch resilience
    FETCH_TIMEOUT_SECONDS: float = 15.0
    FETCH_MAX_RETRIES: int = 3
    FETCH_BACKOFF_BASE_SECONDS: float = 0.5
    FETCH_BACKOFF_MAX_SECONDS: float = 8.0
    FETCH_CONCURRENCY: int = 8
    USER_AGENT: str = "EmojiTrendsExplorer/1.0"

    # Chart defaults
    CHART_WIDTH: int = 800
    CHART_HEIGHT: int = 500
    CHART_MARGIN_TOP: int = 20
    CHART_MARGIN_RIGHT: int = 150
    CHART_MARGIN_BOTTOM: int = 50
    CHART_MARGIN_LEFT: int = 60

    # Catalog
    CATALOG_PAGE_SIZE: int = 48

    # Sentiment
    SENTIMENT_POLARITY_THRESHOLD: float = 0.2
    SENTIMENT_RARE_MIN_OCCURRENCES: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
