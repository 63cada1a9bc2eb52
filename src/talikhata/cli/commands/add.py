"""Commands for recording money given to or received from a customer."""

from decimal import Decimal

import click
from talikhata.domain.customer import CustomerService
from talikhata.domain.entities import GIVEN, PAYMENT_METHODS, RECEIVED
from talikhata.domain.errors import DomainError
from talikhata.domain.transaction import TransactionService
from talikhata.utils.date_parser import parse_date
from talikhata.utils.amount_parser import parse_amount
from talikhata.cli.customer_resolution import resolve_customer_or_exit
from talikhata.cli.error_handling import handle_domain_error
from talikhata.cli.formatting import describe_due, format_money


def transaction_options(func):
    """Options shared by give and receive."""
    options = [
        click.argument("customer"),
        click.argument("amount"),
        click.option("--refund", help="Part of the amount that was refunded"),
        click.option("--note", help="Note"),
        click.option("--refund-note", help="Note about the refund"),
        click.option("--date", "txn_date", help="Date (YYYY-MM-DD, DD/MM/YYYY or 'today', 'yesterday')"),
        click.option("--time", "txn_time", help="Time of day as HH:MM (defaults to now)"),
        click.option("--due-date", help="Date the amount is due (e.g., 'in 7 days')"),
        click.option(
            "--method",
            type=click.Choice(PAYMENT_METHODS),
            default="cash",
            show_default=True,
            help="Payment method",
        ),
        click.option("--paid", is_flag=True, help="Mark the transaction as settled"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _record(
    ctx,
    txn_type: str,
    customer: str,
    amount: str,
    refund: str | None,
    note: str | None,
    refund_note: str | None,
    txn_date: str | None,
    txn_time: str | None,
    due_date: str | None,
    method: str,
    paid: bool,
) -> None:
    db = ctx.obj["db"]
    customer_service = CustomerService(db)
    transaction_service = TransactionService(db)

    customer_id = resolve_customer_or_exit(ctx, customer_service, customer)

    try:
        txn_amount = parse_amount(amount)
        refund_amount = parse_amount(refund) if refund is not None else Decimal("0")
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    parsed_date = None
    parsed_due_date = None
    try:
        if txn_date is not None:
            parsed_date = parse_date(txn_date)
        if due_date is not None:
            parsed_due_date = parse_date(due_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction_id = transaction_service.create_transaction(
            customer_id=customer_id,
            type=txn_type,
            amount=txn_amount,
            refund_amount=refund_amount,
            note=note,
            refund_note=refund_note,
            date=parsed_date,
            time=txn_time,
            due_date=parsed_due_date,
            payment_method=method,
            is_paid=paid,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    c = customer_service.require_customer(customer_id)
    verb = "Gave" if txn_type == GIVEN else "Received"
    click.echo(f"{verb} {format_money(txn_amount)} (transaction ID: {transaction_id})")
    click.echo(f"{c.name}: {describe_due(c.due_amount)}")


@click.command("give")
@transaction_options
@click.pass_context
def give(ctx, customer, amount, refund, note, refund_note, txn_date, txn_time, due_date, method, paid):
    """Record money or goods given to a customer.

    Examples:
        talikhata give "Rahim Uddin" 1500
        talikhata give 3 "৳2,000" --note "Rice, 25kg" --due-date "in 7 days"
    """
    _record(ctx, GIVEN, customer, amount, refund, note, refund_note, txn_date, txn_time, due_date, method, paid)


@click.command("receive")
@transaction_options
@click.pass_context
def receive(ctx, customer, amount, refund, note, refund_note, txn_date, txn_time, due_date, method, paid):
    """Record money received from a customer.

    Examples:
        talikhata receive "Rahim Uddin" 500
        talikhata receive 3 1000 --method mobile_banking
    """
    _record(ctx, RECEIVED, customer, amount, refund, note, refund_note, txn_date, txn_time, due_date, method, paid)


def register_commands(cli):
    """Register give/receive commands with CLI."""
    cli.add_command(give)
    cli.add_command(receive)
