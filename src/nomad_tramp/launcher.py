"""Hand the terminal over to ``nomad exec``."""

import os
import shutil
from collections.abc import Mapping, Sequence
from typing import NoReturn

import structlog

from .errors import ExecLaunchError

logger = structlog.get_logger(__name__)

DEFAULT_BINARY = "nomad"
DEFAULT_SHELL = "/bin/sh"


def build_exec_command(
    task: str,
    allocation_id: str,
    binary: str = DEFAULT_BINARY,
    exec_options: Sequence[str] = (),
    shell: str = DEFAULT_SHELL,
) -> list[str]:
    """Build the argv for an interactive shell inside an allocation.

    Examples:
        ("server", "abc123") -> ["nomad", "exec", "-task", "server", "abc123", "/bin/sh"]

    Args:
        task: Task name inside the allocation.
        allocation_id: Allocation identifier.
        binary: Nomad executable.
        exec_options: Extra options placed after ``exec``.
        shell: Remote command to run.

    Returns:
        Command argv.
    """
    return [binary, "exec", *exec_options, "-task", task, allocation_id, shell]


def launch(
    address: str,
    task: str,
    allocation_id: str,
    binary: str = DEFAULT_BINARY,
    exec_options: Sequence[str] = (),
    shell: str = DEFAULT_SHELL,
    token: str | None = None,
    namespace: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> NoReturn:
    """Replace the current process with ``nomad exec``.

    Stdio is inherited, so the caller's terminal becomes the remote shell.
    Nothing after a successful call runs.

    Args:
        address: Nomad API address, passed on as ``NOMAD_ADDR``.
        task: Task name inside the allocation.
        allocation_id: Allocation identifier.
        binary: Nomad executable.
        exec_options: Extra options placed after ``exec``.
        shell: Remote command to run.
        token: ACL token, passed on as ``NOMAD_TOKEN`` when set.
        namespace: Namespace of the allocation, passed on as
            ``NOMAD_NAMESPACE`` when set. nomad exec looks the allocation
            up in this namespace.
        environ: Base environment; defaults to ``os.environ``.

    Raises:
        ExecLaunchError: If the binary cannot be found or started.
    """
    executable = shutil.which(binary)
    if executable is None:
        msg = f"Cannot find '{binary}' on PATH"
        raise ExecLaunchError(msg)

    argv = build_exec_command(
        task,
        allocation_id,
        binary=binary,
        exec_options=exec_options,
        shell=shell,
    )
    env = dict(os.environ if environ is None else environ)
    env["NOMAD_ADDR"] = address
    if token:
        env["NOMAD_TOKEN"] = token
    if namespace:
        env["NOMAD_NAMESPACE"] = namespace

    logger.info(
        "Launching nomad exec",
        executable=executable,
        allocation_id=allocation_id,
        task=task,
        namespace=namespace,
    )
    try:
        os.execve(executable, argv, env)
    except OSError as e:
        msg = f"Failed to start {executable}: {e}"
        raise ExecLaunchError(msg) from e
