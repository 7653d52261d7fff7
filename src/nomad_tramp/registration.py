"""Registration of the ``nomad`` remote-access method.

The consuming application creates its own :class:`MethodRegistry` during
startup and calls :func:`register` once. Nothing is registered at import
time.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from . import completion, config
from .errors import RegistrationError

logger = structlog.get_logger(__name__)

METHOD_NAME = "nomad"
PROGRAM_NAME = "nomad-tramp"


@dataclass(frozen=True)
class MethodHandle:
    """Everything a remote-access framework needs to drive the method.

    ``login_args`` is a template; the framework substitutes ``%u`` (task),
    ``%h`` (``job.group.index``) and ``%p`` (node) before running it.
    """

    name: str
    login_program: str
    login_args: tuple[str, ...]
    remote_shell: str
    complete: Callable[[], list[completion.CompletionCandidate]]

    @property
    def login_command(self) -> list[str]:
        return [self.login_program, *self.login_args]


@dataclass
class MethodRegistry:
    """Caller-owned table of remote-access methods."""

    methods: dict[str, MethodHandle] = field(default_factory=dict)

    def add(self, handle: MethodHandle) -> None:
        if handle.name in self.methods:
            msg = f"Method '{handle.name}' is already registered"
            raise RegistrationError(msg)
        self.methods[handle.name] = handle

    def get(self, name: str) -> MethodHandle | None:
        return self.methods.get(name)


def register(
    registry: MethodRegistry,
    cfg: config.NomadTrampConfig,
    name: str = METHOD_NAME,
    config_path: str | None = None,
) -> MethodHandle:
    """Register the nomad method and return its handle.

    Args:
        registry: Registry owned by the consuming application.
        cfg: Validated configuration; its address is baked into the login
            command.
        name: Method name (default: "nomad").
        config_path: File ``cfg`` was loaded from. When set it is passed as
            ``--config`` so the login command sees the same token, namespace
            and exec settings. Without it the login command only reads
            ``NOMAD_TRAMP_CONFIG_PATH`` from the framework's environment.

    Returns:
        The registered handle.

    Raises:
        RegistrationError: If ``name`` is already registered.
    """

    def complete() -> list[completion.CompletionCandidate]:
        # Fresh client per call: completion data is never cached
        with config.create_client(cfg) as client:
            return completion.list_running(client, namespace=cfg.namespace or "*")

    config_args = ("--config", config_path) if config_path else ()
    handle = MethodHandle(
        name=name,
        login_program=PROGRAM_NAME,
        login_args=(
            *config_args,
            "--address",
            cfg.nomad_address,
            "exec",
            "--task",
            "%u",
            "%h",
            "%p",
        ),
        remote_shell=cfg.remote_shell,
        complete=complete,
    )
    registry.add(handle)
    logger.info("Registered method", method=name, address=cfg.nomad_address)
    return handle
