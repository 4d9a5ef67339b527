"""Configuration for the portfolio tracker API."""

import os
from dataclasses import dataclass, field

REQUIRED_ENV_VARS = (
    "API_TOKEN",
    "GOOGLE_CLIENT_EMAIL",
    "GOOGLE_PRIVATE_KEY",
    "GOOGLE_SHEETS_SPREADSHEET_ID",
)


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass
class Settings:
    """Settings for one running deployment.

    Built once at startup (usually via ``Settings.from_env()``) and handed to
    ``create_app``.
    """

    api_token: str
    google_client_email: str
    google_private_key: str
    spreadsheet_id: str

    port: int = 3000
    environment: str = "development"
    frontend_url: str = "http://localhost:3001"
    cors_extra_origins: list[str] = field(default_factory=list)

    # Fixed-window quota shared by every caller of this deployment
    rate_limit_window_ms: int = 900_000
    rate_limit_max_requests: int = 60

    sheets_timeout: float = 30.0

    # Named ranges inside the spreadsheet
    holdings_range: str = "MF_STOCKS"
    holdings_sheet: str = "MF & Stocks"  # tab title, used for row deletes
    ideal_allocation_range: str = "IDEAL_ALLOCATION"
    monthly_growth_range: str = "MONTHLY_GROWTH"
    snapshot_range: str = "SNAPSHOT"

    log_level: str = "INFO"

    otlp_enabled: bool = False
    otlp_endpoint: str = "http://localhost:4318/v1/metrics"
    otlp_export_interval: int = 5000

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def cors_origins(self) -> list[str]:
        return [self.frontend_url, *self.cors_extra_origins]

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables.

        Raises:
            ConfigError: If a required variable is missing or a numeric
                variable cannot be parsed
        """
        for name in REQUIRED_ENV_VARS:
            if not os.getenv(name):
                raise ConfigError(f"Missing required environment variable: {name}")

        try:
            return cls(
                api_token=os.environ["API_TOKEN"],
                google_client_email=os.environ["GOOGLE_CLIENT_EMAIL"],
                # Keys pasted into .env files usually carry literal "\n"
                google_private_key=os.environ["GOOGLE_PRIVATE_KEY"].replace("\\n", "\n"),
                spreadsheet_id=os.environ["GOOGLE_SHEETS_SPREADSHEET_ID"],
                port=int(os.getenv("PORT", "3000")),
                environment=os.getenv("ENVIRONMENT") or os.getenv("NODE_ENV") or "development",
                frontend_url=os.getenv("FRONTEND_URL", "http://localhost:3001"),
                cors_extra_origins=[
                    origin.strip()
                    for origin in os.getenv("CORS_EXTRA_ORIGINS", "").split(",")
                    if origin.strip()
                ],
                rate_limit_window_ms=int(os.getenv("RATE_LIMIT_WINDOW_MS", "900000")),
                rate_limit_max_requests=int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "60")),
                sheets_timeout=float(os.getenv("SHEETS_TIMEOUT", "30")),
                holdings_range=os.getenv("HOLDINGS_RANGE", "MF_STOCKS"),
                holdings_sheet=os.getenv("HOLDINGS_SHEET", "MF & Stocks"),
                ideal_allocation_range=os.getenv("IDEAL_ALLOCATION_RANGE", "IDEAL_ALLOCATION"),
                monthly_growth_range=os.getenv("MONTHLY_GROWTH_RANGE", "MONTHLY_GROWTH"),
                snapshot_range=os.getenv("SNAPSHOT_RANGE", "SNAPSHOT"),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
                otlp_enabled=os.getenv("OTLP_ENABLED", "false").lower() == "true",
                otlp_endpoint=os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/metrics"),
                otlp_export_interval=int(os.getenv("OTLP_EXPORT_INTERVAL", "5000")),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid numeric configuration value: {e}") from e
