"""Configuration settings for the book catalog service"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Book Catalog"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Database Settings
    DATABASE_URL: str = "sqlite:///./bookcatalog.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30

    # Search Settings
    SEARCH_PAGE_SIZE: int = 25

    # Homepage Feed Settings
    FEED_TOP_GENRES: int = 5
    FEED_BOOKS_PER_GENRE: int = 10
    FEED_FALLBACK_LABEL: str = "Recently Added"

    # Similar Books Settings
    SIMILAR_TOP_K: int = 10
    SIMILAR_GENRE_WEIGHT: float = 5.0
    SIMILAR_AUTHOR_WEIGHT: float = 25.0
    SIMILAR_RATING_WEIGHT: float = 1.0

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Seconds a client should wait before retrying when the store is down
    STORE_RETRY_AFTER: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
