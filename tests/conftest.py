"""Shared fixtures for the login tests."""

import os

os.environ["ENV"] = "test"
os.environ.setdefault("SESSION_SECRET", "test-session-secret")

from typing import List, Tuple  # noqa: E402

import orjson  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from orcid_login.models.schema.OAuthSchemas import NormalizedProfile  # noqa: E402
from orcid_login.services.provisioning import DbUserProvisioner  # noqa: E402
from orcid_login.settings import env_settings  # noqa: E402
from orcid_login.setup_db import create_session_factory  # noqa: E402

env_settings.cache_clear()

ORCID_ID = "0000-0001-2345-6789"


class StorageUnavailable(Exception):
    pass


class RecordingProvisioner:
    """Returns a fixed user and records every call."""

    def __init__(self, user=None):
        self.user = user if user is not None else {"id": 1}
        self.calls: List[Tuple[NormalizedProfile, str]] = []

    async def process_profile(self, profile: NormalizedProfile, provider_key: str):
        self.calls.append((profile, provider_key))
        return self.user


class FailingProvisioner:
    def __init__(self, error: Exception):
        self.error = error

    async def process_profile(self, profile: NormalizedProfile, provider_key: str):
        raise self.error


class RecordingRegistry:
    def __init__(self):
        self.entries = {}
        self.calls = []

    def use(self, name, strategy):
        self.calls.append(name)
        self.entries[name] = strategy


def orcid_config(**overrides) -> dict:
    config = {
        "client_id": "APP-TEST",
        "client_secret": "secret",
        "callback_url": "http://test/login/orcid/callback",
    }
    config.update(overrides)
    return config


def write_strategy_file(folder, name: str, content) -> str:
    path = folder / f"{name}.json"
    if isinstance(content, (dict, list)):
        path.write_bytes(orjson.dumps(content))
    else:
        path.write_text(content)
    return str(path)


@pytest.fixture
def session_factory(tmp_path):
    return create_session_factory(f"sqlite:///{tmp_path / 'users.sqlite'}")


@pytest.fixture
def db_provisioner(session_factory):
    return DbUserProvisioner(session_factory)


@pytest.fixture
def strategy_dir(tmp_path):
    folder = tmp_path / "strategies"
    folder.mkdir()
    write_strategy_file(
        folder,
        "orcid",
        {
            "key": "orcid",
            "strategy": "orcid",
            "display_name": "ORCiD",
            "config": orcid_config(),
        },
    )
    write_strategy_file(
        folder,
        "orcid-sandbox",
        {
            "key": "orcid-sandbox",
            "strategy": "orcid",
            "config": orcid_config(
                client_id="APP-SANDBOX",
                callback_url="http://test/login/orcid-sandbox/callback",
                sandbox=True,
            ),
        },
    )
    return folder


@pytest.fixture
def app(strategy_dir, db_provisioner):
    from orcid_login.setup import setup_all

    application = FastAPI()
    setup_all(application, provisioner=db_provisioner, config_dir=str(strategy_dir))
    return application


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
