from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    VERSION: str = "1.0.0"

    # Флаг для тестового окружения (SQLite вместо PostgreSQL)
    TESTING: bool = False

    # Database settings
    DATABASE_URL: str

    # App settings
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"

    # Referral codes settings
    # Сколько кодов отдаем в топе по использованию
    TOP_REFERRAL_CODES_LIMIT: int = 10
    # Создавать ли дефолтные коды при старте приложения
    SEED_DEFAULT_REFERRAL_CODES: bool = True

    @property
    def ALLOWED_ORIGINS(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
