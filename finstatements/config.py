"""Application configuration loaded from environment variables."""

import os
from pathlib import Path
from pydantic_settings import BaseSettings

# Check if .env file exists and is readable
_env_file = None
try:
    env_path = Path(".env")
    if env_path.exists() and os.access(env_path, os.R_OK):
        _env_file = ".env"
except (OSError, PermissionError):
    # If we can't access .env, continue without it
    pass


class Settings(BaseSettings):
    """All configuration for the statement service.

    Values are loaded from environment variables or a .env file.
    """

    # Application
    app_name: str = "finstatements"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./data/finstatements.db"

    # Hosted AI tools (prompt execution, URL fetch, file archive)
    ai_tools_base_url: str = "https://builder.empromptu.ai/api_tools"
    ai_tools_api_key: str = ""
    ai_tools_app_id: str = ""
    ai_tools_usage_key: str = ""
    archive_id: str = ""

    # "prompt_api" uses the hosted prompts, "anthropic" calls Claude directly
    extraction_backend: str = "prompt_api"
    anthropic_api_key: str = ""
    claude_model: str = "claude-sonnet-4-20250514"

    # Remote calls: 1 attempt means no retry
    http_timeout: float = 120.0
    http_retry_max_attempts: int = 1

    # Read side
    recent_activity_limit: int = 5

    model_config = {
        "env_file": _env_file,
        "env_file_encoding": "utf-8",
        "env_file_ignore_empty": True,
    }
