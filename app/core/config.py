from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from backend project root so it loads regardless of cwd
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str

    # JWT (provider staff sessions)
    secret_key: str
    access_token_expire_minutes: int = 12 * 60
    algorithm: str = "HS256"

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Env
    env: str = "development"

    # Email (Gmail SMTP). Leave smtp_host empty to disable sending.
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    from_email: str = ""
    from_name: str = "Petzify"
    # Inbox that receives new boarding/transportation booking notifications
    business_email: str = ""
    email_logo_url: str = ""
    # Branding and contact in footer
    site_name: str = "Petzify"
    contact_email: str = "support@petzify.com"
    contact_phone: str = ""
    contact_address: str = ""

    # Object storage (S3-compatible). Leave storage_bucket empty to disable uploads.
    storage_endpoint_url: str = ""
    storage_access_key_id: str = ""
    storage_secret_access_key: str = ""
    storage_bucket: str = ""
    # Public base URL objects are served from (e.g. a CDN or bucket website URL)
    storage_public_base_url: str = ""

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def email_enabled(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password and self.from_email)

    @property
    def storage_enabled(self) -> bool:
        return bool(self.storage_bucket)

    @property
    def notification_inbox(self) -> str:
        return self.business_email or self.from_email or self.contact_email


settings = Settings()
