"""Allocation resolution.

Maps an address specification onto a concrete allocation ID and task name
using a single read of the job's allocation list.
"""

from dataclasses import dataclass

import structlog

from . import nomadapi
from .address import AddressSpecification, canonical_allocation_name
from .errors import NotFoundError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResolvedTarget:
    """Allocation and task an address resolved to."""

    allocation_id: str
    task: str
    # Namespace the allocation lives in, empty if the API omitted it
    namespace: str = ""


def _default_task(allocation: nomadapi.types.RawAllocation) -> str:
    """Pick the first task of an allocation.

    The order is that of the ``TaskStates`` object in the API response.
    Nomad does not document this order, so an address without an explicit
    task depends on it.

    Raises:
        NotFoundError: If the allocation reports no tasks.
    """
    for task in allocation.task_states:
        return task
    msg = f"Allocation {allocation.name} ({allocation.id}) has no tasks"
    raise NotFoundError(msg)


def find_allocation(
    allocations: list[nomadapi.types.RawAllocation],
    name: str,
) -> nomadapi.types.RawAllocation | None:
    """Return the first allocation whose name matches, in API order.

    Both the ``job.group[N]`` and ``job.group.N`` renderings match.
    """
    wanted = canonical_allocation_name(name)
    for allocation in allocations:
        if canonical_allocation_name(allocation.name) == wanted:
            return allocation
    return None


def resolve(
    client: nomadapi.NomadApiClient,
    spec: AddressSpecification,
    namespace: str | None = None,
) -> ResolvedTarget:
    """Resolve an address specification to an allocation ID and task name.

    An explicit task in the specification is returned verbatim; Nomad
    reports an unknown task when exec runs. Otherwise the allocation's
    first task is used.

    Args:
        client: Nomad API client.
        spec: Address to resolve.
        namespace: Namespace of the job, or None for the agent default.

    Returns:
        The resolved allocation ID and task name.

    Raises:
        TransportError: If the API cannot be reached.
        ParseError: If the API response is malformed.
        NotFoundError: If no allocation matches the address.
    """
    name = spec.allocation_name
    allocations = client.get_job_allocations(spec.job, namespace=namespace)

    allocation = find_allocation(allocations, name)
    if allocation is None:
        logger.info(
            "No matching allocation",
            allocation_name=name,
            candidates=len(allocations),
        )
        msg = f"No allocation named {name} for job '{spec.job}'"
        raise NotFoundError(msg)

    task = spec.task or _default_task(allocation)
    logger.debug(
        "Resolved address",
        address=str(spec),
        allocation_id=allocation.id,
        task=task,
    )
    return ResolvedTarget(
        allocation_id=allocation.id,
        task=task,
        namespace=allocation.namespace,
    )
