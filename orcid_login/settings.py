import os
from functools import lru_cache
from logging import getLogger
from os.path import join
from pathlib import Path

from pydantic import AnyHttpUrl, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from orcid_login.util.consts import DEV, PROD, TEST

BASE_DIR = Path(__file__).parent.parent.absolute().as_posix()

logger = getLogger(__name__)

CONFIG_DIR = join(BASE_DIR, "configs")


def get_env_file(env_: str) -> str:
    return join(CONFIG_DIR, f".{env_}.env")


def current_env() -> str:
    env = os.environ.get("ENV", DEV)
    if env not in [DEV, PROD, TEST]:
        raise Exception(f"unknown env: {env}. Should be one of: {[DEV, PROD, TEST]}")
    return env


class Settings(BaseSettings):
    ENV: str = Field(DEV, description="Environment: dev, prod or test")
    HOST: AnyHttpUrl = Field(
        "http://localhost:8000", description="Host address (including port) of the app"
    )
    PORT: int = Field(8000, description="Port uvicorn binds to")

    SESSION_SECRET: SecretStr = Field(
        ..., description="Secret to sign the session cookie (holds the oauth state)"
    )

    DATABASE_URL: str = Field(
        "sqlite:///./users.sqlite", description="SQLAlchemy url of the user database"
    )

    PLATFORM_TITLE: str = Field("ORCiD login", description="Title of the app")

    STRATEGY_CONFIG_SUBPATH: str = Field(
        "strategies",
        description="Folder in the configs folder with one json file per login strategy",
    )

    CORS_OTHER_ORIGINS: str = ""

    model_config = SettingsConfigDict(env_file=get_env_file(current_env()), extra="ignore")

    def is_dev(self):
        return self.ENV in [DEV, TEST]


@lru_cache()
def env_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as err:
        logger.exception(err)
        for error in err.errors():
            field_name = error["loc"][0]
            field = Settings.model_fields.get(field_name)
            if field:
                logger.error(f"{field_name}: {field.description}")
        raise


def strategy_config_dir() -> str:
    return join(CONFIG_DIR, env_settings().STRATEGY_CONFIG_SUBPATH)


LOGGER_CONFIG_FILE_PATH = join(CONFIG_DIR, "logger_config.yml")

LOG_BASE_DIR = join(BASE_DIR, "logs")
