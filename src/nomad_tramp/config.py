"""Configuration and logging setup for nomad-tramp."""

import json
import logging
import os
import pathlib
import sys
from typing import TextIO

import pydantic
import structlog

from . import launcher, nomadapi

CONFIG_ENV_VAR = "NOMAD_TRAMP_CONFIG_PATH"
ADDRESS_ENV_VAR = "NOMAD_ADDR"


class NomadTrampConfig(pydantic.BaseModel):
    """Configuration for nomad-tramp."""

    nomad_address: str = pydantic.Field(
        nomadapi.DEFAULT_ADDRESS,
        description="Base URL for the Nomad HTTP API",
    )
    nomad_binary: str = pydantic.Field(
        launcher.DEFAULT_BINARY,
        description="Nomad executable used for exec",
    )
    exec_options: list[str] = pydantic.Field(
        default_factory=list,
        description="Extra options passed to nomad exec",
    )
    remote_shell: str = pydantic.Field(
        launcher.DEFAULT_SHELL,
        description="Command run inside the allocation",
    )
    # Not consulted during resolution.
    use_task_names: bool = pydantic.Field(
        True,
        description="Display task and group names instead of allocation IDs",
    )
    namespace: str | None = pydantic.Field(
        None,
        description="Namespace used when resolving a job's allocations",
    )
    token_file: str | None = pydantic.Field(
        None,
        description="Path to file containing a Nomad ACL token",
    )
    timeout: float = pydantic.Field(
        nomadapi.DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("WARNING", description="Logging level")


def configure_logging(log_level_name: str, stream: TextIO | None = None) -> None:
    """Configure structlog for logfmt output.

    Stdout belongs to the remote shell, so records go to ``stream``, which
    defaults to the stderr in effect at call time. Unknown level names fall
    back to WARNING.
    """
    log_level = getattr(logging, log_level_name.upper(), logging.WARNING)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "msg"),
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


def load_config(config_path: str | None = None) -> NomadTrampConfig:
    """Load configuration from a JSON file.

    An explicit path must exist. Without one, the path in
    ``NOMAD_TRAMP_CONFIG_PATH`` is used if set, and defaults apply otherwise.
    ``NOMAD_ADDR`` fills in the API address when the file does not set it.

    Raises:
        FileNotFoundError: If an explicitly requested file does not exist.
        ValueError: If the file is not a JSON object.
        pydantic.ValidationError: If a setting is invalid.
    """
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    data = {}
    if resolved_path:
        path = pathlib.Path(resolved_path)
        if not path.exists():
            msg = f"Configuration file not found: {resolved_path}"
            raise FileNotFoundError(msg)

        with path.open("r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            msg = f"Configuration in {resolved_path} must be a JSON object"
            raise ValueError(msg)

    if "nomad_address" not in data and os.environ.get(ADDRESS_ENV_VAR):
        data["nomad_address"] = os.environ[ADDRESS_ENV_VAR]

    return NomadTrampConfig(**data)


def create_client(config: NomadTrampConfig) -> nomadapi.NomadApiClient:
    """Construct an API client from validated config."""
    return nomadapi.NomadApiClient(
        base_url=config.nomad_address,
        token_file=config.token_file,
        timeout=config.timeout,
    )
