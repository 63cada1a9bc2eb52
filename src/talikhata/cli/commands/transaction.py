"""Transaction management commands."""

import click
from talikhata.domain.customer import CustomerService
from talikhata.domain.entities import GIVEN, PAYMENT_METHODS, RECEIVED, TRANSACTION_TYPES, ZERO
from talikhata.domain.errors import DomainError
from talikhata.domain.transaction import TransactionService
from talikhata.utils.date_parser import parse_date
from talikhata.utils.amount_parser import parse_amount
from talikhata.cli.customer_resolution import resolve_customer_or_exit
from talikhata.cli.date_filters import period_options, resolve_cli_date_range
from talikhata.cli.error_handling import handle_domain_error
from talikhata.cli.formatting import describe_due, format_money


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--customer", help="Move to another customer (name or ID)")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), help="given or received")
@click.option("--amount", help="New amount")
@click.option("--refund", help="New refund amount")
@click.option("--note", help="Note (empty string to clear)")
@click.option("--refund-note", help="Refund note (empty string to clear)")
@click.option("--date", "txn_date", help="Transaction date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--time", "txn_time", help="Time of day as HH:MM")
@click.option("--due-date", help="Due date (empty string to clear)")
@click.option("--method", type=click.Choice(PAYMENT_METHODS), help="Payment method")
@click.option("--paid/--unpaid", default=None, help="Mark as settled or not")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    customer: str | None,
    txn_type: str | None,
    amount: str | None,
    refund: str | None,
    note: str | None,
    refund_note: str | None,
    txn_date: str | None,
    txn_time: str | None,
    due_date: str | None,
    method: str | None,
    paid: bool | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Customer balances are
    recalculated when customer, type, amount or refund change.

    Examples:
        talikhata transaction update 7 --amount 1200
        talikhata transaction update 7 --customer "Karim Store"
        talikhata transaction update 7 --note ""  # Clear note
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    customer_service = CustomerService(db)

    changes = {}

    if customer is not None:
        changes["customer_id"] = resolve_customer_or_exit(ctx, customer_service, customer)
    if txn_type is not None:
        changes["type"] = txn_type

    try:
        if amount is not None:
            changes["amount"] = parse_amount(amount)
        if refund is not None:
            changes["refund_amount"] = parse_amount(refund)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        if txn_date is not None:
            changes["date"] = parse_date(txn_date)
        if due_date is not None:
            changes["due_date"] = parse_date(due_date) if due_date.strip() else None
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    if note is not None:
        changes["note"] = note
    if refund_note is not None:
        changes["refund_note"] = refund_note
    if txn_time is not None:
        changes["time"] = txn_time
    if method is not None:
        changes["payment_method"] = method
    if paid is not None:
        changes["is_paid"] = paid

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        transaction_service.update_transaction(transaction_id, **changes)
        click.echo(f"Updated transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("list")
@click.option("--customer", help="Customer name or ID")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), help="Only given or received")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice(["date", "amount", "created"]),
    default="date",
    show_default=True,
    help="Sort field",
)
@click.option("--asc", is_flag=True, help="Oldest/smallest first")
@click.option("--limit", type=int, help="Show at most this many transactions")
@click.option("--verbose", "-v", is_flag=True, help="Show all columns including refund, method and notes")
@click.pass_context
def list_transactions(
    ctx,
    customer: str | None,
    txn_type: str | None,
    start_date: str | None,
    end_date: str | None,
    today: bool,
    this_week: bool,
    this_month: bool,
    last_month: bool,
    this_year: bool,
    last_year: bool,
    sort_by: str,
    asc: bool,
    limit: int | None,
    verbose: bool,
):
    """View transactions with optional filters."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    customer_service = CustomerService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "today": today,
            "this-week": this_week,
            "this-month": this_month,
            "last-month": last_month,
            "this-year": this_year,
            "last-year": last_year,
        },
    )

    customer_id = None
    if customer:
        customer_id = resolve_customer_or_exit(ctx, customer_service, customer)

    sort_fields = {"date": "date", "amount": "amount", "created": "created_at"}
    try:
        transactions = service.list_transactions(
            customer_id=customer_id,
            type=txn_type,
            start_date=start,
            end_date=end,
            sort_by=sort_fields[sort_by],
            descending=not asc,
            limit=limit,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    names = {c.id: c.name for c in customer_service.list_customers()}

    if verbose:
        click.echo(
            f"{'ID':<6} {'Date':<10} {'Time':<5} {'Customer':<20} {'Type':<8} "
            f"{'Amount':>12} {'Refund':>10} {'Method':<14} {'Paid':<4} {'Note':<30}"
        )
        click.echo("-" * 130)
    else:
        click.echo(f"{'ID':<6} {'Date':<10} {'Customer':<25} {'Type':<8} {'Amount':>12} {'Note':<30}")
        click.echo("-" * 96)

    for txn in transactions:
        name = names.get(txn.customer_id, f"#{txn.customer_id}")
        note = txn.note or ""
        if verbose:
            click.echo(
                f"{txn.id:<6} {txn.date.isoformat():<10} {txn.time:<5} {name[:20]:<20} {txn.type:<8} "
                f"{format_money(txn.amount):>12} {format_money(txn.refund_amount):>10} "
                f"{txn.payment_method:<14} {'yes' if txn.is_paid else 'no':<4} {note[:30]:<30}"
            )
        else:
            click.echo(
                f"{txn.id:<6} {txn.date.isoformat():<10} {name[:25]:<25} {txn.type:<8} "
                f"{format_money(txn.amount):>12} {note[:30]:<30}"
            )

    given = sum((t.net_amount for t in transactions if t.type == GIVEN), ZERO)
    received = sum((t.net_amount for t in transactions if t.type == RECEIVED), ZERO)
    click.echo(f"\nTotal: {len(transactions)} transaction(s)")
    click.echo(f"Given (net):    {format_money(given)}")
    click.echo(f"Received (net): {format_money(received)}")


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show transaction details."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    customer_service = CustomerService(db)

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    owner = customer_service.get_customer(txn.customer_id)
    click.echo(f"ID:           {txn.id}")
    click.echo(f"Customer:     {owner.name if owner else '#' + str(txn.customer_id)} (ID: {txn.customer_id})")
    click.echo(f"Type:         {txn.type}")
    click.echo(f"Date:         {txn.date.isoformat()} {txn.time}")
    click.echo(f"Amount:       {format_money(txn.amount)}")
    if txn.refund_amount:
        click.echo(f"Refund:       {format_money(txn.refund_amount)}")
        if txn.refund_note:
            click.echo(f"Refund note:  {txn.refund_note}")
        click.echo(f"Net:          {format_money(txn.net_amount)}")
    click.echo(f"Method:       {txn.payment_method}")
    click.echo(f"Paid:         {'yes' if txn.is_paid else 'no'}")
    if txn.due_date:
        click.echo(f"Due date:     {txn.due_date.isoformat()}")
    if txn.note:
        click.echo(f"Note:         {txn.note}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction and reverse it from the customer's balance."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"Transaction {txn.id}: {txn.date.isoformat()} {txn.type} {format_money(txn.amount)}")
    if not yes and not click.confirm("Are you sure you want to delete this transaction?"):
        click.echo("Cancelled.")
        return

    try:
        customer = service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
        click.echo(f"{customer.name}: {describe_due(customer.due_amount)}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with CLI."""
    cli.add_command(transaction_group, name="transaction")
