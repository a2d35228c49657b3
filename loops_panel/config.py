from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    # In-memory by default: jobs live only as long as the process
    database_url: str = "sqlite://"

    loops_api_base_url: str = "https://app.loops.so/api/v1"
    loops_api_timeout: Optional[float] = None  # seconds, None disables the timeout

    # Bulk import
    default_import_delay_ms: int = 500
    reconcile_orphaned_jobs: bool = False

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings():
    return Settings()
