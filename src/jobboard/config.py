from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

# Get the absolute path to the project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_DB_PATH = str(PROJECT_ROOT / "databases" / "jobboard.db")
DEFAULT_UPLOAD_DIR = str(PROJECT_ROOT / "uploads")


class Settings(BaseSettings):
    """
    Centralized runtime configuration for the job board service.
    All defaults are sensible for dev-mode; ops override via ENV.
    """
    # --- Database ---
    database_path: str = Field(default=DEFAULT_DB_PATH)
    session_ttl_hours: int = Field(default=12)

    # --- Resume uploads ---
    upload_dir: str = Field(default=DEFAULT_UPLOAD_DIR)
    upload_endpoint_url: str = Field(default="http://localhost:8000/upload")
    public_base_url: str = Field(default="http://localhost:8000")
    max_resume_bytes: int = Field(default=3 * 1024 * 1024)

    # --- Outbound calls ---
    webhook_url: str = Field(default="")
    request_timeout: int = Field(default=30)

    # --- Job board ---
    generic_job_id: str = Field(default="AHS000")
    page_size: int = Field(default=6)
    cors_origins: List[str] = Field(default=["*"])

    # --- API server ---
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    # --- Seeding ---
    admin_email: str = Field(default="")
    admin_password: str = Field(default="")

    class Config:
        env_file = ".env"
        extra = "ignore"


# Create a singleton instance
settings = Settings()
