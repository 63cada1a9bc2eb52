"""Main CLI entry point."""

import logging

import click
from talikhata.database.factories import create_sqlite_database
from talikhata.cli.logging_setup import configure_logging

# Import and register all commands at module level
from talikhata.cli.commands import (
    customer,
    add,
    transaction,
    summary,
    repair,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TALIKHATA_DB_PATH environment variable)",
    envvar="TALIKHATA_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Talikhata - customer credit ledger.

    Record what you give to and receive from each customer and always know
    who owes whom.
    """
    ctx.ensure_object(dict)
    configure_logging(logging.DEBUG if verbose else None)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
customer.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)
repair.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
