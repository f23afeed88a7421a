from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase (the Next.js front end exposes the same values as NEXT_PUBLIC_*)
    supabase_url: str = Field(
        "", validation_alias=AliasChoices("supabase_url", "next_public_supabase_url")
    )
    supabase_key: str = Field(
        "", validation_alias=AliasChoices("supabase_key", "supabase_anon_key", "next_public_supabase_anon_key")
    )
    supabase_service_role_key: Optional[str] = None  # Required for reports, storage admin and scripts

    # Auth
    auth_cache_ttl: int = 60
    otp_redirect_url: Optional[str] = None

    # Storage
    signed_url_expiry: int = 3600

    # App
    app_name: str = "wolthers-trips"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,https://wolthers-trips.vercel.app"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def has_service_role(self) -> bool:
        return bool(self.supabase_service_role_key)

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
