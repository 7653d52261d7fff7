"""Address specifications and allocation name forms.

A remote address has the form ``task@job.task-group.alloc-index%node-name``
where ``task@`` and ``%node-name`` are optional. The editor's remote-access
framework splits it into user (task), host (``job.group.index``) and a
port-like suffix (node) before calling us; :func:`parse_address` exists for
callers that hold the raw string.

Nomad names allocations ``job.group[index]``. Internally that bracket form is
canonical; the dotted form used in addresses is converted at the boundary.
"""

import re
from dataclasses import dataclass

from .errors import AddressError

_BRACKET_INDEX = re.compile(r"\[(\d+)\]")
_TRAILING_DOT_INDEX = re.compile(r"\.(\d+)$")


@dataclass(frozen=True)
class AddressSpecification:
    """Parsed remote address, alive for a single resolution."""

    job: str
    task_group: str
    alloc_index: int = 0
    task: str | None = None
    node_name: str | None = None

    def __post_init__(self):
        if not self.job:
            msg = "Address is missing a job name"
            raise AddressError(msg)
        if not self.task_group:
            msg = f"Address for job '{self.job}' is missing a task group"
            raise AddressError(msg)
        if self.alloc_index < 0:
            msg = f"Allocation index must be non-negative, got {self.alloc_index}"
            raise AddressError(msg)

    @classmethod
    def from_parts(
        cls,
        user: str | None,
        host: str,
        node: str | None = None,
    ) -> "AddressSpecification":
        """Build a specification from already-split address fields.

        Args:
            user: Task name, or None/empty for the allocation's first task.
            host: ``job.group.index`` (index optional).
            node: Node name; kept for display only.

        Returns:
            The address specification.

        Raises:
            AddressError: If the host part is malformed.
        """
        job, task_group, alloc_index = parse_host(host)
        return cls(
            job=job,
            task_group=task_group,
            alloc_index=alloc_index,
            task=user or None,
            node_name=node or None,
        )

    @property
    def allocation_name(self) -> str:
        """Canonical allocation name this address refers to."""
        return allocation_name(self.job, self.task_group, self.alloc_index)

    @property
    def host(self) -> str:
        """Dotted host form, as written in addresses."""
        return f"{self.job}.{self.task_group}.{self.alloc_index}"

    def __str__(self) -> str:
        address = self.host
        if self.task:
            address = f"{self.task}@{address}"
        if self.node_name:
            address = f"{address}%{self.node_name}"
        return address


def parse_host(host: str) -> tuple[str, str, int]:
    """Split a host part into job, task group and allocation index.

    The last component is the index when it is all digits, otherwise the
    index defaults to 0. Job names may themselves contain dots.

    Examples:
        "myjob.web.0" -> ("myjob", "web", 0)
        "myjob.web" -> ("myjob", "web", 0)
        "my.job.web.3" -> ("my.job", "web", 3)

    Args:
        host: Host part of an address.

    Returns:
        Tuple of (job, task_group, alloc_index).

    Raises:
        AddressError: If the host has fewer than two components.
    """
    parts = host.split(".")
    alloc_index = 0
    if len(parts) > 2 and parts[-1].isdigit():  # noqa: PLR2004
        alloc_index = int(parts.pop())

    if len(parts) < 2 or not all(parts):  # noqa: PLR2004
        msg = f"Expected host of the form job.task-group.index, got '{host}'"
        raise AddressError(msg)

    return ".".join(parts[:-1]), parts[-1], alloc_index


def parse_address(address: str) -> AddressSpecification:
    """Parse a raw ``task@job.group.index%node`` address.

    Args:
        address: The user-facing address string.

    Returns:
        The address specification.

    Raises:
        AddressError: If the address is malformed.
    """
    user, sep, rest = address.partition("@")
    if not sep:
        user, rest = "", address
    host, _, node = rest.partition("%")
    return AddressSpecification.from_parts(user, host, node)


def allocation_name(job: str, task_group: str, alloc_index: int) -> str:
    """Build the canonical allocation name ``job.group[index]``."""
    return f"{job}.{task_group}[{alloc_index}]"


def canonical_allocation_name(name: str) -> str:
    """Normalize an allocation name to the bracket form.

    Examples:
        "myjob.web[0]" -> "myjob.web[0]"
        "myjob.web.0" -> "myjob.web[0]"
    """
    if _BRACKET_INDEX.search(name):
        return name
    return _TRAILING_DOT_INDEX.sub(r"[\1]", name)


def display_allocation_name(name: str) -> str:
    """Rewrite bracketed indexes to the dotted address form.

    Examples:
        "myjob.web[2]" -> "myjob.web.2"
    """
    return _BRACKET_INDEX.sub(r".\1", name)
