from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    SUPABASE_URL: str | None = None
    SUPABASE_ANON_KEY: str | None = None
    HTTP_TIMEOUT_SECONDS: float = 10.0

    BUSINESS_NAME: str = "Your Salon"
    BUSINESS_TIMEZONE: str = "America/Sao_Paulo"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    SESSION_LIMIT: int = 1000


settings = Settings()
