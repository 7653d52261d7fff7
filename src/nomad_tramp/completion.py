"""Completion candidates for Nomad addresses.

Fetches all allocations across namespaces from the Nomad API and turns each
task of each running allocation into a ``(task, host%node)`` pair, the shape
the editor offers for address completion.
"""

from dataclasses import dataclass

from . import nomadapi
from .address import display_allocation_name

RUNNING = "running"


@dataclass(frozen=True)
class CompletionCandidate:
    """A task reachable through an address."""

    task: str
    host: str
    # Not part of the address; resolution looks in the configured namespace
    namespace: str = ""

    def __str__(self) -> str:
        return f"{self.task}@{self.host}"


def _transform_allocation(
    raw: nomadapi.types.RawAllocation,
) -> list[CompletionCandidate]:
    """Produce one candidate per task of an allocation.

    Args:
        raw: Raw allocation from the Nomad API.

    Returns:
        Candidates in ``TaskStates`` order.
    """
    host = f"{display_allocation_name(raw.name)}%{raw.node_name}"
    return [
        CompletionCandidate(task=task, host=host, namespace=raw.namespace)
        for task in raw.task_states
    ]


def list_running(
    client: nomadapi.NomadApiClient,
    namespace: str = "*",
) -> list[CompletionCandidate]:
    """List completion candidates for every running allocation.

    Args:
        client: Nomad API client to use for fetching.
        namespace: Namespace to list, ``*`` for all namespaces.

    Returns:
        Candidates in API response order.
    """
    raw_allocations = client.get_allocations(namespace=namespace)
    return [
        candidate
        for allocation in raw_allocations
        if allocation.client_status == RUNNING
        for candidate in _transform_allocation(allocation)
    ]


def format_candidates(candidates: list[CompletionCandidate]) -> str:
    """Render candidates one per line as ``task@host%node``."""
    return "\n".join(str(candidate) for candidate in candidates)
