"""List search strategies command"""

import click

from ...registry import registry


@click.command(name="list-strategies")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed strategy information")
def list_strategies(verbose: bool):
    """List the registered combo search strategies."""
    # Ensure registrations
    import fair_scheduler.search  # noqa: F401

    click.echo("=== Search Strategies ===")
    for name, md in registry.get_all_metadata().items():
        if verbose:
            click.echo(f"  - {name}")
            click.echo(f"      Description: {md.description or 'N/A'}")
            click.echo(f"      Version: {md.version}")
            click.echo(f"      Parallel: {'Yes' if md.parallel else 'No'}")
        else:
            desc = f" - {md.description}" if md.description else ""
            click.echo(f"  - {name}{desc}")
