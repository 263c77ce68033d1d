"""Shared fixtures for matrix_stack_setup tests."""

import pytest

from matrix_stack_setup.credentials import Secrets
from matrix_stack_setup.settings import Settings


@pytest.fixture
def settings():
    return Settings(
        domain="chat.example.org",
        federation_whitelist=("matrix.org", "example.net"),
        max_upload_size="50M",
    )


@pytest.fixture
def secrets():
    return Secrets(
        postgres_user="AB12cd34AB12cd34",
        postgres_password="0123456789abcdfA",
        postgres_db="DDDDccccBBBB0000",
        redis_password="f0f0f0f0F1F1F1F1",
        livekit_key="aaaaBBBB11112222",
        livekit_secret="0123456789ABCDFabcdf0123456789AB",
        registration_shared_secret="9999888877776666",
    )
