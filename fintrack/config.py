"""Configuration settings for the client."""
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings."""
    
    app_name: str = "fintrack"
    debug: bool = False
    log_level: str = "INFO"
    
    # Remote finance API
    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 10.0
    
    # Resilient fetch
    retry_max_attempts: int = 3
    retry_base_delay: float = 1.0
    
    # Pause before refetching a list after a write (masks read-after-write lag)
    refetch_delay: float = 0.0
    
    # Session persistence
    session_db_path: str = "fintrack.db"
    session_ttl_minutes: Optional[int] = None
    
    currency: str = "USD"
    
    # Reference API token signing (development server only)
    reference_secret_key: str = "fintrack-dev-secret-change-me"
    reference_token_minutes: int = 60
    
    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
