import asyncio
import logging
import os
import sys
from pathlib import Path

import click

from .configuration import ServerConfig, load_environment_variables
from .error_handling import ConfigurationError
from .logging_config import configure_logging
from .server import serve


@click.command()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v INFO, -vv DEBUG)")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Additional .env file to load credentials and settings from",
)
def main(verbose: int, env_file: Path | None) -> None:
    """MCP GitHub Server - GitHub and GitHub Enterprise tools for MCP"""
    if verbose == 1:
        log_level = "INFO"
    elif verbose >= 2:
        log_level = "DEBUG"
    else:
        log_level = os.environ.get("LOG_LEVEL", "WARNING")
    configure_logging(log_level)
    logger = logging.getLogger(__name__)

    load_environment_variables(env_file)

    try:
        config = ServerConfig.from_env()
    except ConfigurationError as e:
        logger.error(f"❌ {e.message}", extra={"error_kind": e.kind.value})
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    asyncio.run(serve(config))


if __name__ == "__main__":
    main()
