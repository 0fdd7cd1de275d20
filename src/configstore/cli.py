"""Command line front end for the config store."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from .config import ENGINE_NAMES, BaseConfig
from .errors import ConfigStoreError
from .infra.storage import open_storage
from .logging_config import setup_logging
from .models.setting import Setting
from .services.config_store import ConfigStore
from .services.schema_loader import load_schema


def _open_store(ctx: click.Context) -> ConfigStore:
    """Build the store from the group options; storage failures become CLI errors."""

    opts = ctx.obj
    schema = None
    if opts["schema"] is not None:
        try:
            schema = load_schema(opts["schema"])
        except (OSError, ValueError) as exc:
            raise click.ClickException(f"Cannot load schema: {exc}") from exc
    try:
        adapter = open_storage(opts["engine"], opts["path"])
    except ConfigStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    try:
        store = ConfigStore(adapter, autosave=opts["autosave"], schema=schema)
    except (ConfigStoreError, ValueError) as exc:
        adapter.close()
        raise click.ClickException(str(exc)) from exc
    ctx.call_on_close(store.close)
    return store


def _print_keys(store: ConfigStore, pattern: str) -> None:
    for key in store.find(pattern):
        value = store.get(key)
        click.echo(f"{key:40}: {value.to_string()}")


@click.group(name="config-store")
@click.version_option(package_name="configstore", prog_name="config-store")
@click.option(
    "-e",
    "--engine",
    type=click.Choice(ENGINE_NAMES),
    default=None,
    help="Storage engine [default: $CONFIGSTORE_ENGINE or sqlite]",
)
@click.option(
    "-p",
    "--path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file [default: $CONFIGSTORE_PATH or settings.db]",
)
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON schema file replacing the built-in settings",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging on stderr")
@click.pass_context
def main(
    ctx: click.Context,
    engine: Optional[str],
    path: Optional[Path],
    schema_path: Optional[Path],
    verbose: bool,
) -> None:
    """View and change settings."""

    try:
        config = BaseConfig()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(config, verbose=verbose)
    ctx.obj = {
        "engine": engine or config.ENGINE,
        "path": path or config.PATH,
        "schema": schema_path or config.SCHEMA_PATH,
        "autosave": config.AUTOSAVE,
    }


@main.command()
@click.option("-k", "--key", required=True, help="Setting key")
@click.pass_context
def view(ctx: click.Context, key: str) -> None:
    """View a setting."""

    store = _open_store(ctx)
    if not store.has(key):
        click.echo("Key not found")
        ctx.exit(1)

    info = store.get_info(key)
    value = store.get(key)
    click.echo(f"Key            : {key}")
    click.echo(f"Current Value  : {value.to_string()}")
    click.echo(f"Default Value  : {info.default.to_string() if info else '-'}")
    click.echo(f"Description    : {info.description if info else '-'}")


@main.command(name="list")
@click.pass_context
def list_settings(ctx: click.Context) -> None:
    """List all settings."""

    _print_keys(_open_store(ctx), "*")


@main.command(name="set")
@click.option("-k", "--key", required=True, help="Setting key")
@click.option("-v", "--value", required=True, help="New value (type is inferred)")
@click.pass_context
def set_setting(ctx: click.Context, key: str, value: str) -> None:
    """Set a setting."""

    store = _open_store(ctx)
    try:
        store.set(key, Setting.from_string(value))
        store.flush()
    except ConfigStoreError as exc:
        raise click.ClickException(str(exc)) from exc


@main.command()
@click.option("-k", "--key", required=True, help="Pattern to search for ('*' for all)")
@click.pass_context
def search(ctx: click.Context, key: str) -> None:
    """Search for a setting."""

    _print_keys(_open_store(ctx), key)
