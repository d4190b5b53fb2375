"""Configuration management command."""

import click
from rich.console import Console
from rich.table import Table

from ...core.config import ConfigManager
from ...exceptions import ReqchainError
from ..error_handler import CLIErrorHandler

console = Console()


@click.command()
@click.option("--show", is_flag=True, help="Show current configuration")
@click.option("--init", "init_file", is_flag=True, help="Write a configuration file with defaults")
@click.option("--force", is_flag=True, help="Overwrite an existing file with --init")
@click.pass_context
def config(ctx: click.Context, show: bool, init_file: bool, force: bool) -> None:
    """Manage configuration.

    \b
    Examples:
        reqchain config --show
        reqchain config --init
    """
    manager = ConfigManager(ctx.obj.get("config_file"))
    try:
        if init_file:
            if manager.config_file.exists() and not force:
                console.print(
                    f"[yellow]{manager.config_file} already exists (use --force to overwrite)[/yellow]"
                )
                ctx.exit(1)
            path = manager.save_config()
            console.print(f"[green]Configuration written to {path}[/green]")
            return

        _show(manager)
    except ReqchainError as e:
        ctx.exit(CLIErrorHandler().handle(e))


def _show(manager: ConfigManager) -> None:
    config = manager.load_config()

    table = Table(title=f"Configuration ({manager.config_file})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for section, values in config.model_dump(mode="json").items():
        for key, value in values.items():
            table.add_row(f"{section}.{key}", str(value))

    console.print(table)
