from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Backend enforces access itself; bypasses RLS when set

    # Blob store (Supabase Storage)
    storage_bucket: str = "vault-files"
    signed_url_ttl_seconds: int = 3600

    # Sharing / invites
    public_app_origin: str = "http://localhost:5173"
    invite_code_length: int = 6
    invite_code_max_attempts: int = 10

    # Pagination
    default_page_size: int = 25
    max_page_size: int = 100

    # App
    app_name: str = "knowledge-vault-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    public_rate_limit: str = "30/minute"  # anonymous share-token endpoints

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def project_share_url(self, token: str) -> str:
        return f"{self.public_app_origin.rstrip('/')}/s/{token}"

    def board_share_url(self, token: str) -> str:
        return f"{self.public_app_origin.rstrip('/')}/share/board/{token}"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
