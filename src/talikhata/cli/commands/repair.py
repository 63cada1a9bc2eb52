"""Balance repair command."""

import click
from talikhata.domain.errors import DomainError
from talikhata.domain.ledger import LedgerEngine
from talikhata.cli.error_handling import handle_domain_error
from talikhata.cli.formatting import format_money
from talikhata.utils.customer_resolver import match_customer


def _echo_repair(repair, names, dry_run: bool) -> None:
    name = names.get(repair.customer_id, f"#{repair.customer_id}")
    verb = "Would fix" if dry_run else "Fixed"
    click.echo(
        f"{verb} {name} (ID: {repair.customer_id}): due "
        f"{format_money(repair.before.due_amount)} -> {format_money(repair.after.due_amount)}, "
        f"given {format_money(repair.before.total_given)} -> {format_money(repair.after.total_given)}, "
        f"received {format_money(repair.before.total_received)} -> "
        f"{format_money(repair.after.total_received)}"
    )


@click.command("repair")
@click.argument("customer", required=False)
@click.option("--dry-run", is_flag=True, help="Only report customers whose totals are off")
@click.pass_context
def repair(ctx, customer: str | None, dry_run: bool):
    """Recalculate customer totals from their transactions.

    Without CUSTOMER every customer is checked. Deleted customers can be
    named too.

    Examples:
        talikhata repair
        talikhata repair "Rahim Uddin" --dry-run
    """
    db = ctx.obj["db"]
    ledger = LedgerEngine(db)

    # Inactive customers are repaired too
    everyone = db.list_customers(active_only=False, sort_by="name", descending=False)
    names = {c.id: c.name for c in everyone}

    try:
        if customer is not None:
            customer_id = match_customer(everyone, customer)
            found = ledger.detect_drift(customer_id)
            repairs = [found] if found is not None else []
            if repairs and not dry_run:
                ledger.recompute(customer_id)
        elif dry_run:
            repairs = [r for r in (ledger.detect_drift(c.id) for c in everyone) if r is not None]
        else:
            repairs = ledger.recompute_all()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not repairs:
        click.echo("All customer totals match their transactions.")
        return

    for found in repairs:
        _echo_repair(found, names, dry_run)
    click.echo(f"\n{len(repairs)} customer(s) {'need repair' if dry_run else 'repaired'}")


def register_commands(cli):
    """Register repair command with CLI."""
    cli.add_command(repair)
