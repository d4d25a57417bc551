"""Main CLI entry point for result-service commands."""

import click

from result_service import __version__
from result_service.cli.commands import export, server
from result_service.infra.logging.config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="result-service")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Result Service CLI - export task results and run the API.

    \b
    Quick Start:
      result-service export 42 --format csv -o ./exports
      result-service server --port 8080
    """
    ctx.ensure_object(dict)


cli.add_command(export.export_results)
cli.add_command(server.server)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
