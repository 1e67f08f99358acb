"""
Configuration Settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "Chat IA"
    app_version: str = "1.0.0"
    debug: bool = False

    # Storage
    storage_type: str = "local"  # local, memory
    local_storage_path: str = "./data"
    storage_key_prefix: str = ""  # e.g. "chatia_" to namespace every record

    # Simulated assistant
    responder_delay_seconds: float = 1.5

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
    ]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/chatia.log"
    log_file_enabled: bool = True
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log every API request with status and timing

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
