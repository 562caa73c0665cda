from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for admin operations like creating student accounts

    # Storage buckets
    documents_bucket: str = "documents"
    avatars_bucket: str = "avatars"
    max_upload_size_mb: int = 20
    allowed_material_extensions: str = "pdf,doc,docx,txt,ppt,pptx"

    # Students
    student_email_domain: str = "quizforge.edu"

    # Appearance
    default_theme: str = "dark"  # light | dark | system
    theme_storage_key: str = "quizforge_theme"

    # App
    app_name: str = "quizforge-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    frontend_url: str = "http://localhost:3000"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def get_allowed_material_extensions(self) -> List[str]:
        return [e.strip().lower().lstrip(".") for e in self.allowed_material_extensions.split(",") if e.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
