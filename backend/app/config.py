from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App configuration from environment variables."""

    # Resend (email delivery provider)
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com"
    resend_timeout_seconds: float = 30.0

    # Outbound identity -- fixed, never taken from the request
    email_from: str = "Odel Assistant <noreply@mail.odel.app>"
    subject_prefix: str = "Odel has sent"

    # Abuse report link embedded in every footer
    report_abuse_base_url: str = "https://odel.app/report-abuse"

    # Analytics sink (optional -- empty disables event recording)
    analytics_database_url: str = ""

    # Connection pool
    db_pool_min: int = 1
    db_pool_max: int = 5

    # CORS -- comma-separated origins
    cors_origins: str = "http://localhost:3000"

    # Print finished spans to stdout
    otel_console_export: bool = False

    class Config:
        env_file = ".env"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def analytics_configured(self) -> bool:
        return bool(self.analytics_database_url.strip())


settings = Settings()
