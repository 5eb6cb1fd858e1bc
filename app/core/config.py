from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str
    DATABASE_ECHO: bool = False

    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480  # 8 hours

    # Unique code generation
    CODE_MAX_ATTEMPTS: int = 10

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
