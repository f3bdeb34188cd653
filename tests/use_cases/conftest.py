"""Pytest fixtures for session lifecycle stories."""

from __future__ import annotations

from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio

from irma import AsyncIrmaClient, IrmaClientBuilder
from tests.fixtures import IRMA_URL, REQUESTOR_TOKEN, FakeIrmaServer


@pytest.fixture
def irma_server() -> FakeIrmaServer:
    """Fake IRMA server that accepts unauthenticated requestors."""
    return FakeIrmaServer()


@pytest.fixture
def authenticated_irma_server() -> FakeIrmaServer:
    """Fake IRMA server that requires the requestor token."""
    return FakeIrmaServer(requestor_token=REQUESTOR_TOKEN)


@pytest_asyncio.fixture
async def irma_client(
    irma_server: FakeIrmaServer,
) -> AsyncGenerator[AsyncIrmaClient, None]:
    """Async client wired to ``irma_server`` through ASGI."""
    client = IrmaClientBuilder(IRMA_URL).build_async(
        transport=httpx.ASGITransport(app=irma_server.app)
    )
    async with client:
        yield client
