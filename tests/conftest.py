"""Shared fixtures: canned Nomad API responses served through httpx.MockTransport."""

import json
from collections.abc import Callable

import httpx
import pytest
import structlog

from nomad_tramp import nomadapi

ADDRESS = "http://nomad.test:4646"


def make_allocation(
    alloc_id: str,
    name: str,
    tasks: list[str],
    node_name: str = "nodeA",
    client_status: str = "running",
) -> dict:
    """Build an allocation stub the way the Nomad API renders it."""
    return {
        "ID": alloc_id,
        "Name": name,
        "Namespace": "default",
        "NodeName": node_name,
        "JobID": name.split(".")[0],
        "JobType": "service",
        "TaskGroup": name.split(".")[1].split("[")[0],
        "ClientStatus": client_status,
        "TaskStates": {
            task: {"State": client_status, "ClientStatus": client_status, "Failed": False}
            for task in tasks
        },
    }


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_client(
    requests_seen: list[httpx.Request],
) -> Callable[..., nomadapi.NomadApiClient]:
    """Factory for clients whose transport answers every request from a handler.

    Pass either ``body`` (JSON-encoded for you), ``content`` (raw bytes) or a
    full ``handler``.
    """
    clients = []

    def factory(
        body=None,
        content: bytes | None = None,
        status_code: int = 200,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
        **kwargs,
    ) -> nomadapi.NomadApiClient:
        def default_handler(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, content=json.dumps(body).encode())

        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return (handler or default_handler)(request)

        client = nomadapi.NomadApiClient(
            base_url=ADDRESS,
            transport=httpx.MockTransport(recording_handler),
            **kwargs,
        )
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def myjob_allocations() -> list[dict]:
    """A single allocation of myjob's web group with two tasks."""
    return [make_allocation("abc123", "myjob.web[0]", ["server", "sidecar"])]


@pytest.fixture
def allocation() -> Callable[..., dict]:
    """Factory for allocation stubs, see make_allocation."""
    return make_allocation
