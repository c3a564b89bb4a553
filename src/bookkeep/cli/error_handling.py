"""CLI error handling helpers."""

import logging

import click

from bookkeep.domain.errors import DomainError, PersistenceError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Rolled back writes keep their traceback in the debug log (``-vv``).
    """
    if isinstance(error, PersistenceError):
        logger.debug("%s was rolled back", error.operation, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
