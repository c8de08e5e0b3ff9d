"""
Root conftest for all tests.

Resets process-wide state that leaks between tests: the trace ID context
variable and the cached ``VaultSettings``.
"""

from collections.abc import Iterator

import pytest

from vaultkit.common.logging.context import clear_trace_id
from vaultkit.config import get_settings

VAULT_ADDRESS = "http://vault.test:8200"


@pytest.fixture(autouse=True)
def _reset_process_state() -> Iterator[None]:
    clear_trace_id()
    get_settings.cache_clear()
    yield
    clear_trace_id()
    get_settings.cache_clear()


@pytest.fixture()
def vault_address() -> str:
    return VAULT_ADDRESS
