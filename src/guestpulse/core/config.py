"""Configuration management for GuestPulse."""

from pydantic_settings import BaseSettings
from pydantic import Field

from .constants import BatchConstants


class Settings(BaseSettings):
    """Application settings."""
    
    # OpenAI API
    openai_api_key: str = Field("", description="OpenAI API key")
    openai_model: str = Field("gpt-4o-mini", description="Chat model used for every analysis call")
    request_timeout: float = Field(60.0, description="Timeout for a single LLM request in seconds")
    
    # Logging
    log_level: str = Field("INFO", description="Logging level")
    
    # Analysis settings
    batch_size: int = Field(BatchConstants.DEFAULT_BATCH_SIZE, description="Reviews per classification request")
    reviews_per_page: int = Field(5, description="Rows per page in the reviews table")
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
