from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./sessions.db"
    database_echo: bool = False  # Log every SQL statement

    log_level: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
