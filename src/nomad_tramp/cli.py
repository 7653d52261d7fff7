"""Command line entry point for nomad-tramp."""

import os
import sys
from typing import NoReturn

import click
import structlog

from . import completion, config, launcher, nomadapi, registration, resolver
from .address import AddressSpecification
from .errors import NomadTrampError

logger = structlog.get_logger(__name__)

CONFIG_PATH_KEY = "nomad_tramp.config_path"


def _fail(error: NomadTrampError) -> NoReturn:
    logger.error(str(error), error_type=type(error).__name__)
    sys.exit(error.exit_code)


def _create_client(cfg: config.NomadTrampConfig) -> nomadapi.NomadApiClient:
    """Build an API client, reporting bad settings as usage errors."""
    try:
        return config.create_client(cfg)
    except FileNotFoundError as e:
        raise click.FileError(cfg.token_file or "", hint=str(e)) from e
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--address'") from e


def _resolve(
    cfg: config.NomadTrampConfig,
    spec: AddressSpecification,
) -> tuple[resolver.ResolvedTarget, str | None]:
    with _create_client(cfg) as client:
        target = resolver.resolve(client, spec, namespace=cfg.namespace)
        return target, client.token


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"JSON configuration file. Defaults to ${config.CONFIG_ENV_VAR}.",
)
@click.option("--address", default=None, help="Nomad API address.")
@click.option("--log-level", default=None, help="Logging level.")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: str | None,
    address: str | None,
    log_level: str | None,
) -> None:
    """Resolve Nomad addresses and open shells inside allocations."""
    resolved_path = config_path or os.environ.get(config.CONFIG_ENV_VAR)
    try:
        cfg = config.load_config(resolved_path)
    except FileNotFoundError as e:
        raise click.FileError(resolved_path or "", hint=str(e)) from e
    except ValueError as e:
        # Malformed JSON and pydantic validation errors
        raise click.FileError(
            resolved_path or "",
            hint=f"invalid configuration: {e}",
        ) from e

    updates = {}
    if address:
        updates["nomad_address"] = address
    if log_level:
        updates["log_level"] = log_level
    cfg = cfg.model_copy(update=updates)

    config.configure_logging(cfg.log_level)
    ctx.meta[CONFIG_PATH_KEY] = resolved_path
    ctx.obj = cfg


@main.command("exec")
@click.option("-t", "--task", default=None, help="Task name. Defaults to the first task.")
@click.argument("host")
@click.argument("node", required=False, default=None)
@click.pass_obj
def exec_command(
    cfg: config.NomadTrampConfig,
    task: str | None,
    host: str,
    node: str | None,
) -> NoReturn:
    """Open a shell in the allocation addressed by HOST (job.group.index).

    NODE is accepted for display only.
    """
    try:
        spec = AddressSpecification.from_parts(task, host, node)
        target, token = _resolve(cfg, spec)
        launcher.launch(
            cfg.nomad_address,
            target.task,
            target.allocation_id,
            binary=cfg.nomad_binary,
            exec_options=cfg.exec_options,
            shell=cfg.remote_shell,
            token=token,
            namespace=target.namespace or cfg.namespace,
        )
    except NomadTrampError as e:
        _fail(e)


@main.command("resolve")
@click.option("-t", "--task", default=None, help="Task name. Defaults to the first task.")
@click.argument("host")
@click.pass_obj
def resolve_command(
    cfg: config.NomadTrampConfig,
    task: str | None,
    host: str,
) -> None:
    """Print the allocation ID and task for HOST."""
    try:
        spec = AddressSpecification.from_parts(task, host)
        target, _ = _resolve(cfg, spec)
    except NomadTrampError as e:
        _fail(e)
    click.echo(f"{target.allocation_id}\t{target.task}")


@main.command("complete")
@click.pass_obj
def complete_command(cfg: config.NomadTrampConfig) -> None:
    """Print task@job.group.index%node for every running task."""
    try:
        with _create_client(cfg) as client:
            candidates = completion.list_running(
                client,
                namespace=cfg.namespace or "*",
            )
    except NomadTrampError as e:
        _fail(e)
    if candidates:
        click.echo(completion.format_candidates(candidates))


@main.command("method")
@click.pass_context
def method_command(ctx: click.Context) -> None:
    """Print the login command template of the nomad method."""
    handle = registration.register(
        registration.MethodRegistry(),
        ctx.obj,
        config_path=ctx.meta.get(CONFIG_PATH_KEY),
    )
    click.echo(" ".join(handle.login_command))
