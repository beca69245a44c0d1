import os
from typing import Optional, List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Settings:
    APP_NAME: str = "newrelic-dashboard"
    APP_VERSION: str = "0.1.0"

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    ALLOWED_CORS_ORIGINS: str = os.getenv("ALLOWED_CORS_ORIGINS", "*")

    # New Relic Configuration
    NEWRELIC_API_KEY: Optional[str] = os.getenv("NEWRELIC_API_KEY") or os.getenv("NEW_RELIC_API_KEY")
    NEWRELIC_ACCOUNT_ID: Optional[str] = os.getenv("NEWRELIC_ACCOUNT_ID") or os.getenv("NEW_RELIC_ACCOUNT_ID")
    NEWRELIC_BASE_URL: str = os.getenv("NEWRELIC_BASE_URL", "https://api.newrelic.com")
    NEWRELIC_TIMEOUT: float = float(os.getenv("NEWRELIC_TIMEOUT", "30"))

    # Shift applied to every graph point so charts render in the dashboard's timezone
    NEWRELIC_DISPLAY_OFFSET_SECONDS: int = int(os.getenv("NEWRELIC_DISPLAY_OFFSET_SECONDS", "7200"))

    @property
    def newrelic_api_key(self) -> Optional[str]:
        """Get New Relic REST API key."""
        return self.NEWRELIC_API_KEY

    @property
    def newrelic_account_id(self) -> Optional[str]:
        """Get New Relic account id."""
        return self.NEWRELIC_ACCOUNT_ID

    @property
    def cors_origins_list(self) -> List[str]:
        if self.ALLOWED_CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_CORS_ORIGINS.split(",")]

settings = Settings()
