"""
Store round-trip guard tests.
"""

import asyncio

import pytest
from pymongo.errors import AutoReconnect

from clinicbook.adapters.db.mongo.store_call import store_call
from clinicbook.core.exceptions import StoreUnavailableError


async def test_returns_result():
    async def find():
        return 42

    assert await store_call("doctors.find", find(), timeout=1) == 42


async def test_timeout_becomes_retryable_store_error():
    async def hang():
        await asyncio.sleep(5)

    with pytest.raises(StoreUnavailableError) as exc_info:
        await store_call("appointments.insert", hang(), timeout=0.01)
    assert exc_info.value.error_code == "STORE_UNAVAILABLE"
    assert exc_info.value.details["retryable"] is True
    assert exc_info.value.details["operation"] == "appointments.insert"


async def test_driver_error_becomes_store_error():
    async def fail():
        raise AutoReconnect("primary stepped down")

    with pytest.raises(StoreUnavailableError) as exc_info:
        await store_call("ledger.reserve", fail(), timeout=1)
    assert exc_info.value.details["error_type"] == "AutoReconnect"


async def test_other_errors_propagate():
    async def broken():
        raise KeyError("bug")

    with pytest.raises(KeyError):
        await store_call("doctors.find", broken(), timeout=1)
