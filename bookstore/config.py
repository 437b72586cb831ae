from pydantic_settings import BaseSettings
from typing import List, Optional
from urllib.parse import quote_plus

class Settings(BaseSettings):
    env: str = "local"
    log_level: str = "INFO"

    postgres_user: str
    postgres_password: str
    postgres_db: str
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # full SQLAlchemy URL, wins over the postgres_* fields when set
    db_url: Optional[str] = None

    redis_url: str = "redis://localhost:6379/0"

    # GHN carrier credentials
    ghn_token_api: str
    ghn_shop_id: str
    ghn_end_point: str
    ghn_cache_ttl: Optional[int] = 60 * 60 * 24
    ghn_timeout: float = 10.0

    session_cookie_name: str = "sid"
    session_max_age: int = 60 * 60 * 24 * 7
    session_cookie_secure: bool = False

    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    @property
    def database_url(self):
        if self.db_url:
            return self.db_url
        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
