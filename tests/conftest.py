"""Shared fixtures: a fixed config and an in-process BrandCloud stub."""

from typing import Callable, List, Optional

import httpx
import pytest

import brandcloud_mcp_server as server
from brandcloud_mcp_server import BrandCloudConfig


class StubBrandCloud:
    """Records outbound requests and answers them with ``handler``."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.handler: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is None:
            return httpx.Response(200, json={})
        return self.handler(request)


@pytest.fixture
def config() -> BrandCloudConfig:
    return BrandCloudConfig(default_domain="acme", api_key="KEY123")


@pytest.fixture
def brandcloud(monkeypatch) -> StubBrandCloud:
    stub = StubBrandCloud()

    def client_factory(config: BrandCloudConfig) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(stub), timeout=config.timeout)

    monkeypatch.setattr(server, "_new_http_client", client_factory)
    return stub


@pytest.fixture
def use_config(monkeypatch, config):
    """Install ``config`` as the process-wide configuration for tool calls."""
    monkeypatch.setattr(server, "CONFIG", config)
    return config
