from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PROJECT_NAME: str = "Textile ERP"
    API_V1_PREFIX: str = "/api/v1"
    APP_ENV: str = "development"

    DATABASE_URL: str = "sqlite:///./textile_erp.db"
    TEST_DATABASE_URL: str = "sqlite:///./textile_erp_test.db"

    # How many times a ledger unit of work is replayed after a version conflict
    LEDGER_MAX_RETRIES: int = 3

    LOG_LEVEL: str = "INFO"
    CURRENCY: str = "Rs"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
