import tempfile
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings

# Current directory (where this file is located)
curr_dir = Path(__file__).parent if "__file__" in globals() else Path.cwd()


class Settings(BaseSettings):
    """
    Centralized application configuration.
    Values are loaded automatically from environment variables or `.env` file.
    """

    # --- Server Settings ---
    host: str = "0.0.0.0"                 # Default host
    port: int = 8000                      # Default port
    debug: bool = True                    # Enable debug mode

    # --- Database Settings ---
    sqlite_url: str = "sqlite:///./chat_runner.db"  # Chat transcript DB URL

    # --- CORS (Cross-Origin Resource Sharing) ---
    allow_origins: List[str] = [
        "http://localhost:3000",          # Frontend
        "http://localhost:8000",          # Backend
    ]

    # --- Language model ---
    openai_api_key: Optional[str] = None
    openai_model_url: Optional[str] = None
    model_name: str = "gpt-4o"
    llm_temperature: float = 0.0

    # --- Browser ---
    headless: bool = True
    browser_executable_path: Optional[str] = None
    screenshot_dir: str = tempfile.gettempdir()   # Process-wide temp dir

    class Config:
        """
        Pydantic Settings configuration:
        - Reads values from `.env` file in current directory
        - UTF-8 encoding for environment variables
        """
        env_file = curr_dir / ".env"
        env_file_encoding = "utf-8"


# Instantiate settings so it can be imported directly
settings = Settings()
