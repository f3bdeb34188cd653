"""Test fixtures package."""

from .fake_irma_server import IRMA_URL, REQUESTOR_TOKEN, FakeIrmaServer

__all__ = ["FakeIrmaServer", "IRMA_URL", "REQUESTOR_TOKEN"]
