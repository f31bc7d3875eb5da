"""Error handling utilities for the CLI"""

from contextlib import contextmanager
import logging

import click

from fair_scheduler.exceptions import (
    SchedulerException,
    ConfigurationError,
    InfeasibleRoundError,
    ComboIndexError,
    IncompleteSearchError,
)

logger = logging.getLogger(__name__)


@contextmanager
def handle_cli_errors():
    """
    Context manager turning scheduler exceptions into a CLI exit.

    Usage:
        with handle_cli_errors():
            ... command code ...
    """
    try:
        yield
    except InfeasibleRoundError as e:
        click.echo(f"Error: {e}; relax the validation rules", err=True)
        raise SystemExit(2)
    except (ConfigurationError, ComboIndexError, IncompleteSearchError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    except FileNotFoundError as e:
        click.echo(f"Error: File not found: {e}", err=True)
        raise SystemExit(1)
    except SchedulerException as e:
        logger.debug("Unexpected scheduler error", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
