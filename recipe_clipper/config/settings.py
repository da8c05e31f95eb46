from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # API Keys
    google_gemini_key: Optional[str] = Field(default=None, alias="GOOGLE_GEMINI_KEY")
    logfire_token: Optional[str] = None

    # Generative model
    gemini_model: str = "gemini-2.5-flash-lite"
    llm_temperature: float = 0.2
    llm_max_output_tokens: int = 2048

    # Timeouts (seconds)
    pipeline_timeout_seconds: float = 45.0
    fetch_timeout_seconds: float = 10.0
    probe_timeout_seconds: float = 5.0

    # Extraction tuning
    instruction_enhancement_enabled: bool = True
    instruction_enhancement_threshold: int = 8
    min_caption_length: int = 50
    caption_preview_length: int = 500

    # Server Configuration
    port: int = 8000
    logfire_console: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False  # Allow GOOGLE_GEMINI_KEY or google_gemini_key
        populate_by_name = True
        extra = "ignore"


# Create singleton instance
settings = Settings()
