"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings

# Request verification defaults, shared with the services that use them
CERT_CACHE_SIZE = 5
CERT_FETCH_TIMEOUT = 2.0  # Seconds
TIMESTAMP_TOLERANCE = 150  # Seconds


class Settings(BaseSettings):
    """Skill server settings loaded from environment variables."""

    # Application
    environment: str = "development"
    debug: bool = False
    service_name: str = "alexa-skillserver"

    # CORS
    cors_origins: list[str] = ["*"]

    # Path prefix shared by every registered skill endpoint
    echo_prefix: str = "/echo/"

    # Request verification
    allow_dev_bypass: bool = True  # Honour the ?_dev= query parameter
    insecure_skip_verify: bool = False  # Skip certificate/signature checks entirely
    cert_cache_size: int = CERT_CACHE_SIZE
    cert_fetch_timeout: float = CERT_FETCH_TIMEOUT
    timestamp_tolerance: int = TIMESTAMP_TOLERANCE

    class Config:
        env_prefix = "SKILLSERVER_"
        case_sensitive = False

    @property
    def dev_bypass_enabled(self) -> bool:
        """Whether ``_dev`` may disable verification. Never in production."""
        return self.allow_dev_bypass and self.environment.lower() != "production"


settings = Settings()
