from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    app_name: str = "Anti-Portfolio API"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # AI/LLM Configuration
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    analysis_max_output_tokens: int = 4000
    generation_max_output_tokens: int = 5000

    # Uploads and extraction
    upload_max_size: int = 10 * 1024 * 1024  # bytes, larger files are dropped
    web_scraping_timeout: float = 30.0  # seconds
    pdf_extraction_timeout: float = 10.0  # seconds
    max_links: int = 3
    briefing_max_chars: int = 2500

    # Retry policy (additional attempts after the first one)
    max_retries: int = 2
    web_max_retries: int = 1
    retry_base_delay: float = 0.5  # seconds, doubled on every attempt

    class Config:
        env_file = ".env"
        extra = "ignore"
        # Make field names case-insensitive for environment variables
        case_sensitive = False

    def get_cors_origins(self) -> list:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
