from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./todo.db"
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    ENV: str = "local"  # Environment setting
    LOG_LEVEL: str = "INFO"

    # Background jobs
    SCHEDULER_ENABLED: bool = True
    REMINDER_INTERVAL_MINUTES: int = 15
    REMINDER_WINDOW_MINUTES: int = 15
    # False = notify each overdue todo once instead of on every tick
    OVERDUE_RENOTIFY_EVERY_TICK: bool = True
    OUTBOX_DISPATCH_INTERVAL_SECONDS: int = 10
    OUTBOX_MAX_ATTEMPTS: int = 5
    # Delivered and dead-lettered events are kept this long
    OUTBOX_RETENTION_HOURS: int = 24

    # Search
    DEFAULT_PAGE_SIZE: int = 50

    class Config:
        env_file = ".env"

settings = Settings()
