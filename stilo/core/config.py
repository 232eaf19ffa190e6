from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BACKEND_PROVIDER: str = "memory"  # "memory" | "supabase"
    SUPABASE_URL: str | None = None
    SUPABASE_ANON_KEY: str | None = None
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Wall clock the salon works in; the core handles naive local times only.
    LOCAL_TIMEZONE: str = "America/Los_Angeles"
    BOOKING_WINDOW_DAYS: int = 14
    SIGN_IN_PATH: str = "/sign-in"


settings = Settings()
