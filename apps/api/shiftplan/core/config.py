from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    database_url: str = "sqlite:///./shiftplan.db"

    # Comma-separated list, e.g. "http://localhost:8081,https://planner.example.com"
    cors_origins: str = ""

    default_timezone: str = "UTC"
    week_starts_on: str = "MON"
    max_expansion_days: int = 366
    log_level: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
