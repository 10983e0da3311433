"""Shared fixtures: a sample identity and an HTTP client around it."""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from schemas import build

ENV_KEYS = (
    "NAME", "BLUESKY", "EMAIL", "GITHUB", "WHATSAPP", "FACEBOOK",
    "PHONE", "BASE_URL", "PORT", "LOG_LEVEL", "LOG_FORMAT",
)

JANE = {
    "display_name": "Jane Doe",
    "canonical_url": "https://example.com/jane",
    "email": "jane@example.com",
    "phone": "",
    "github": "https://github.com/jane",
    "bluesky": "",
    "whatsapp": "",
    "facebook": "",
}

FULL = {
    "display_name": "Sam Roe",
    "canonical_url": "https://example.com/sam",
    "email": "sam@example.com",
    "phone": "+15551234567",
    "github": "https://github.com/sam",
    "bluesky": "https://bsky.app/profile/sam.example.com",
    "whatsapp": "https://wa.me/15551234567",
    "facebook": "https://facebook.com/sam",
}


@pytest.fixture
def clean_env(monkeypatch):
    """Strip identity keys so the host environment can't leak into settings."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def jane():
    return build(JANE)


@pytest.fixture
def full():
    return build(FULL)


@pytest.fixture
def client(jane):
    return TestClient(create_app(jane))
