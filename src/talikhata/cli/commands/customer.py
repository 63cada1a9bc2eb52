"""Customer management commands."""

import click
from talikhata.domain.customer import CustomerService
from talikhata.domain.errors import DomainError
from talikhata.domain.summary import SummaryService
from talikhata.domain.transaction import TransactionService
from talikhata.cli.customer_resolution import resolve_customer_or_exit
from talikhata.cli.error_handling import handle_domain_error
from talikhata.cli.formatting import describe_due, format_money

RECENT_LIMIT = 5


@click.group()
def customer_group():
    """Manage customers."""
    pass


@customer_group.command("add")
@click.argument("name")
@click.option("--phone", help="Mobile number (e.g., 01712345678 or +8801712345678)")
@click.option("--email", help="Email address")
@click.option("--address", help="Postal address")
@click.option("--description", help="Free-text description")
@click.option("--photo-url", help="Reference to an already uploaded photo")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.pass_context
def add_customer(
    ctx,
    name: str,
    phone: str | None,
    email: str | None,
    address: str | None,
    description: str | None,
    photo_url: str | None,
    tags: tuple[str, ...],
):
    """Add a new customer.

    Examples:
        talikhata customer add "Rahim Uddin" --phone 01712345678
        talikhata customer add "Karim Store" --tag wholesale --tag monthly
    """
    db = ctx.obj["db"]
    service = CustomerService(db)

    try:
        customer_id = service.create_customer(
            name=name,
            phone=phone,
            email=email,
            address=address,
            description=description,
            photo_url=photo_url,
            tags=tags,
        )
        click.echo(f"Created customer '{name.strip()}' (ID: {customer_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@customer_group.command("list")
@click.option("--search", "-s", help="Match name, phone, email or address")
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice(["name", "due", "created", "updated"]),
    default="created",
    show_default=True,
    help="Sort field",
)
@click.option("--asc", is_flag=True, help="Sort ascending instead of descending")
@click.pass_context
def list_customers(ctx, search: str | None, sort_by: str, asc: bool):
    """List active customers with their balances."""
    db = ctx.obj["db"]
    service = CustomerService(db)

    sort_fields = {
        "name": "name",
        "due": "due_amount",
        "created": "created_at",
        "updated": "updated_at",
    }
    customers = service.list_customers(
        search=search, sort_by=sort_fields[sort_by], descending=not asc
    )

    if not customers:
        click.echo("No customers found.")
        return

    click.echo(f"{'ID':<6} {'Name':<30} {'Phone':<16} {'Given':>14} {'Received':>14} {'Due':>14}")
    click.echo("-" * 99)
    for c in customers:
        name = c.name[:28] + ".." if len(c.name) > 30 else c.name
        click.echo(
            f"{c.id:<6} {name:<30} {c.phone or '':<16} "
            f"{format_money(c.total_given):>14} {format_money(c.total_received):>14} "
            f"{format_money(c.due_amount):>14}"
        )
    click.echo(f"\nTotal: {len(customers)} customer(s)")


@customer_group.command("show")
@click.argument("customer")
@click.pass_context
def show_customer(ctx, customer: str):
    """Show customer details by name or ID."""
    db = ctx.obj["db"]
    service = CustomerService(db)

    customer_id = resolve_customer_or_exit(ctx, service, customer)
    c = service.require_customer(customer_id)

    click.echo(f"ID:          {c.id}")
    click.echo(f"Name:        {c.name}")
    if c.phone:
        click.echo(f"Phone:       {c.phone}")
    if c.email:
        click.echo(f"Email:       {c.email}")
    if c.address:
        click.echo(f"Address:     {c.address}")
    if c.description:
        click.echo(f"Description: {c.description}")
    if c.photo_url:
        click.echo(f"Photo:       {c.photo_url}")
    if c.tags:
        click.echo(f"Tags:        {', '.join(c.tags)}")
    click.echo(f"Given:       {format_money(c.total_given)}")
    click.echo(f"Received:    {format_money(c.total_received)}")
    click.echo(f"Due:         {format_money(c.due_amount)} ({describe_due(c.due_amount)})")
    click.echo(f"Created:     {c.created_at:%Y-%m-%d %H:%M}")

    recent = TransactionService(db).list_transactions(customer_id=customer_id, limit=RECENT_LIMIT)
    if recent:
        click.echo("\nRecent transactions:")
        for txn in recent:
            click.echo(
                f"  {txn.id:<6} {txn.date.isoformat():<10} {txn.type:<8} "
                f"{format_money(txn.amount):>12} {txn.note or ''}"
            )


@customer_group.command("edit")
@click.argument("customer")
@click.option("--name", help="New name")
@click.option("--phone", help="New phone number (empty string to clear)")
@click.option("--email", help="New email (empty string to clear)")
@click.option("--address", help="New address (empty string to clear)")
@click.option("--description", help="New description (empty string to clear)")
@click.option("--photo-url", help="New photo reference (empty string to clear)")
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable)")
@click.option("--clear-tags", is_flag=True, help="Remove all tags")
@click.pass_context
def edit_customer(
    ctx,
    customer: str,
    name: str | None,
    phone: str | None,
    email: str | None,
    address: str | None,
    description: str | None,
    photo_url: str | None,
    tags: tuple[str, ...],
    clear_tags: bool,
):
    """Edit customer contact details.

    Only the given options are changed. Balances cannot be edited here;
    they always follow the customer's transactions.

    Examples:
        talikhata customer edit 3 --phone 01812345678
        talikhata customer edit "Rahim Uddin" --email ""
    """
    db = ctx.obj["db"]
    service = CustomerService(db)

    customer_id = resolve_customer_or_exit(ctx, service, customer)

    changes = {
        field: value
        for field, value in (
            ("name", name),
            ("phone", phone),
            ("email", email),
            ("address", address),
            ("description", description),
            ("photo_url", photo_url),
        )
        if value is not None
    }
    if clear_tags:
        changes["tags"] = ()
    elif tags:
        changes["tags"] = tags

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        updated = service.update_customer(customer_id, **changes)
        click.echo(f"Updated customer '{updated.name}' (ID: {customer_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@customer_group.command("delete")
@click.argument("customer")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_customer(ctx, customer: str, yes: bool):
    """Delete a customer.

    Only customers without transactions can be deleted.
    """
    db = ctx.obj["db"]
    service = CustomerService(db)

    customer_id = resolve_customer_or_exit(ctx, service, customer)
    c = service.require_customer(customer_id)

    if not yes and not click.confirm(f"Delete customer '{c.name}' (ID: {c.id})?"):
        click.echo("Cancelled.")
        return

    try:
        service.delete_customer(customer_id)
        click.echo(f"Deleted customer '{c.name}' (ID: {customer_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@customer_group.command("stats")
@click.argument("customer")
@click.pass_context
def customer_stats(ctx, customer: str):
    """Show transaction statistics for one customer."""
    db = ctx.obj["db"]
    customer_service = CustomerService(db)
    summary_service = SummaryService(db)

    customer_id = resolve_customer_or_exit(ctx, customer_service, customer)
    try:
        stats = summary_service.customer_stats(customer_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Customer:      {stats.customer.name} (ID: {stats.customer.id})")
    click.echo(f"Transactions:  {stats.transaction_count}")
    click.echo(f"Given:         {format_money(stats.total_given)}")
    click.echo(f"Received:      {format_money(stats.total_received)}")
    click.echo(f"Refunded:      {format_money(stats.total_refund)}")
    click.echo(f"Net (gross):   {format_money(stats.net_balance)}")
    click.echo(f"Due:           {describe_due(stats.customer.due_amount)}")


def register_commands(cli):
    """Register customer commands with CLI."""
    cli.add_command(customer_group, name="customer")
