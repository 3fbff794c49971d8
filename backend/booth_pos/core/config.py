"""
Centralized application configuration
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_TITLE: str = "Booth POS API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Point of sale backend for event booths"
    API_DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./booth_pos.db"
    DATABASE_ECHO: bool = False
    SEED_DEFAULT_CATALOG: bool = True

    # Sales
    # Ceiling for a single cart line (unit price * quantity), in cents
    MAX_LINE_TOTAL_CENTS: int = 10_000_000

    LOG_LEVEL: str = "INFO"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:1420,http://localhost:5173" or '["http://localhost:1420"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:1420,http://localhost:5173"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:1420"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()
