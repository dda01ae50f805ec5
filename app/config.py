"""
Configuration management for the PDF Chat API.
Handles environment variables and application settings.
"""

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields from environment
    )

    # API Configuration
    app_name: str = Field(default="PDF Chat API")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001)
    cors_origins: List[str] = Field(default=["*"])

    # Google AI Configuration
    google_api_key: str = Field(default="")
    google_chat_model: str = Field(default="gemini-1.5-flash")
    google_temperature: float = Field(default=0.7)
    google_max_tokens: int = Field(default=500)

    # Upload Configuration
    upload_dir: str = Field(default="uploads")
    max_file_size_mb: int = Field(default=50)
    allowed_mime_types: List[str] = Field(default=["application/pdf"])

    # Search / Chat Heuristics
    search_result_limit: int = Field(default=10)
    lines_per_page_estimate: int = Field(default=50)
    chat_context_lines: int = Field(default=5)
    citation_confidence: float = Field(default=0.8)

# Global settings instance
settings = Settings()


def validate_required_settings() -> None:
    """Validate that all required settings are present."""
    required_settings = [
        ("google_api_key", settings.google_api_key),
    ]

    missing_settings = []
    for setting_name, setting_value in required_settings:
        if not setting_value:
            missing_settings.append(setting_name)

    if missing_settings:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_settings)}. "
            "Please check your .env file."
        )
