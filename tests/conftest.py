import pytest
from fastapi.testclient import TestClient

from contact_service.core import Cipher
from contact_service.main import create_app
from contact_service.shared import Config

TEST_SECRET = "test_key_32_bytes_for_demo_only!"


def make_config(tmp_path, **overrides) -> Config:
    data = {
        "general": {"title": "contact-service-test", "mode": "development"},
        "database": {
            "url": f"sqlite:///{tmp_path / 'contacts.db'}",
            "max_retries": 0,
            "retry_interval": 0,
        },
        "encryption": {"secret": TEST_SECRET},
        "pagination": {"default_limit": 10, "default_page": 1},
        "logging": {"level": "DEBUG"},
        "paths": {"logs": str(tmp_path / "logs")},
    }
    data.update(overrides)
    return Config(**data)


@pytest.fixture
def config(tmp_path) -> Config:
    return make_config(tmp_path)


@pytest.fixture
def cipher() -> Cipher:
    return Cipher(TEST_SECRET.encode())


@pytest.fixture
def client(config):
    with TestClient(create_app(config)) as client:
        yield client
