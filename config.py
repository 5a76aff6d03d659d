from pydantic_settings import BaseSettings, SettingsConfigDict


class ENV(BaseSettings):
    model_config = SettingsConfigDict(validate_default=True, env_file=".env", env_file_encoding="utf-8")

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_NAME: str = "fulfillment"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASS: str = ""
    # Full SQLAlchemy URL, takes precedence over the POSTGRES_* parts
    DATABASE_URL: str | None = None

    ADMIN_API_TOKEN: str = ""

    DEFAULT_COMMISSION_PERCENTAGE: int = 5
    MIN_WITHDRAWAL_AMOUNT: int = 50_000


class Settings():
    def __init__(self):
        self.env = ENV()

    def generate_postgres_url(self) -> str:
        if self.env.DATABASE_URL:
            return self.env.DATABASE_URL
        return f"postgresql+asyncpg://{self.env.POSTGRES_USER}:{self.env.POSTGRES_PASS}@{self.env.POSTGRES_HOST}:{self.env.POSTGRES_PORT}/{self.env.POSTGRES_NAME}"

    def is_sqlite(self) -> bool:
        return self.generate_postgres_url().startswith("sqlite")
