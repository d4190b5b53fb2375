"""reqchain CLI main entry point."""

import logging
from pathlib import Path
from typing import Optional

import click

from ..core.config import ConfigManager
from ..exceptions import ReqchainError
from ..logging import configure_logging
from . import __version__
from .commands import config, request


def setup_logging(config_file: Optional[Path] = None, verbose: int = 0) -> None:
    """Configure logging from the config file; ``-v``/``-vv`` raise the level."""
    level = logging.DEBUG if verbose > 1 else logging.INFO if verbose else None

    try:
        logging_config = ConfigManager(config_file).logging_config(
            service_name="reqchain-cli", version=__version__
        )
    except ReqchainError as e:
        logging.basicConfig(
            level=level or logging.WARNING,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        logging.getLogger("reqchain.cli").debug(f"Using fallback logging configuration: {e.message}")
        return

    if level is not None:
        logging_config.level = level
    logging_config.include_transport = verbose > 1
    configure_logging(logging_config)


@click.group()
@click.version_option(version=__version__, prog_name="reqchain")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file path",
)
@click.option(
    "--verbose", "-v",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG including urllib3)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: int) -> None:
    """reqchain: build and send HTTP requests.

    \b
    Examples:
        reqchain request GET https://httpbin.org/get -q q=python
        reqchain request POST https://httpbin.org/post -f name=value
        reqchain config --show
    """
    setup_logging(config, verbose)

    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config
    ctx.obj["verbose"] = verbose


cli.add_command(request)
cli.add_command(config)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
