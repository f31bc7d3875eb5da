"""Main CLI entry point"""

import click

from .commands import generate as generate_cmd
from .commands import search as search_cmd
from .commands import list_strategies as list_strategies_cmd


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """Fair league schedule search"""
    pass


cli.add_command(generate_cmd.generate)
cli.add_command(search_cmd.search)
cli.add_command(search_cmd.score)
cli.add_command(list_strategies_cmd.list_strategies)


if __name__ == "__main__":
    cli()
