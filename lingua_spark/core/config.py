from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    url: str = Field(
        default="sqlite+aiosqlite:///./lingua_spark.db", alias="DATABASE_URL"
    )
    echo: bool = Field(default=False, alias="DATABASE_ECHO")

    @computed_field
    def is_memory(self) -> bool:
        return ":memory:" in self.url


class GoogleDriveSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    client_id: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_ID")
    client_secret: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_SECRET")
    client_secrets_file: Optional[str] = Field(
        default=None, alias="GOOGLE_CLIENT_SECRETS_FILE"
    )
    redirect_uri: str = Field(
        default="http://localhost:9000/v1/backup/oauth/callback",
        alias="GOOGLE_REDIRECT_URI",
    )
    scope: str = Field(
        default="https://www.googleapis.com/auth/drive.file", alias="GOOGLE_SCOPE"
    )
    backup_file_name: str = Field(
        default="lingua_spark_backup_v1.json", alias="BACKUP_FILE_NAME"
    )
    api_base: str = Field(
        default="https://www.googleapis.com/drive/v3", alias="DRIVE_API_BASE"
    )
    upload_base: str = Field(
        default="https://www.googleapis.com/upload/drive/v3",
        alias="DRIVE_UPLOAD_BASE",
    )
    # Client config readiness polling
    init_attempts: int = Field(default=20, alias="GOOGLE_INIT_ATTEMPTS")
    init_interval_sec: float = Field(default=0.2, alias="GOOGLE_INIT_INTERVAL_SEC")


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="lingua-spark", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    database: DatabaseSettings = Field(default_factory=lambda: DatabaseSettings())
    drive: GoogleDriveSettings = Field(default_factory=lambda: GoogleDriveSettings())

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")

    # Model provider selection: "google" or "openrouter"
    model_provider: str = Field(default="google", alias="MODEL_PROVIDER")
    generation_model: str = Field(default="gemini-2.5-flash", alias="GENERATION_MODEL")
    openrouter_model: str = Field(
        default="google/gemini-2.5-flash", alias="OPENROUTER_MODEL"
    )

    # Languages used in generated content
    definition_language: str = Field(
        default="Traditional Chinese (Taiwan usage)", alias="DEFINITION_LANGUAGE"
    )
    study_language: str = Field(default="English", alias="STUDY_LANGUAGE")

    flashcard_flip_delay_ms: int = Field(default=200, alias="FLASHCARD_FLIP_DELAY_MS")

    # Idle study sessions are dropped by a background sweep
    session_idle_seconds: int = Field(default=600, alias="SESSION_IDLE_SECONDS")
    session_sweep_interval: int = Field(default=60, alias="SESSION_SWEEP_INTERVAL")


settings = Settings()
