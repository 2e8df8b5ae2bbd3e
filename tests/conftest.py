"""Shared fixtures for unit tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from docsearch.core.settings import ServerSettings


@pytest.fixture
def server_settings() -> ServerSettings:
    return ServerSettings(
        api_key="sk-test",
        gpu_server_origin="http://gpu:9000",
    )


@pytest.fixture
def http_client() -> MagicMock:
    return MagicMock()
