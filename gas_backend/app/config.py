from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "Gas Usage Calculator"
    VERSION: str = "v1.0-Python"
    LOG_LEVEL: str = "INFO"

    # True 时不检查负数/零台仪器，保持旧版前端的宽松行为
    ALLOW_OUT_OF_RANGE: bool = False

    CORS_ORIGINS: List[str] = ["*"]


settings = Settings()
