"""CLI commands for sales and their sold lines."""

from __future__ import annotations

import click

from retail.application.create_sale import CreateSaleHandler
from retail.application.dto import SaleDTO, to_sold_line_dto
from retail.application.show_sale import ShowSaleHandler
from retail.domain.exceptions import DomainException
from retail.infrastructure.bootstrap import sale_line_ledger, sale_repository


def _display_sale(dto: SaleDTO) -> None:
    """Shared formatting for displaying a sale."""
    click.echo(f"Sale #{dto.id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(
        f"  {'Line':<6} {'Product':<20} {'Qty':>5} {'Price':>10} "
        f"{'Total':>10} {'Disc':>5} {'Final':>10}"
    )
    click.echo(f"  {'-'*72}")
    for item in dto.lines:
        name = item.name + (" (deleted)" if item.deleted else "")
        click.echo(
            f"  {item.id:<6} {name:<20} {item.quantity:>5} {item.unit_price:>10} "
            f"{item.total:>10} {item.discount:>4}% {item.final_price:>10}"
        )
    click.echo(f"  {'-'*72}")
    click.echo(f"  {'Total':<27} {dto.total_price:>47}")
    click.echo(f"  {'Discount':<27} {dto.total_discount_amount:>47}")
    click.echo(f"  {'To pay':<27} {dto.total_discounted_price:>47}")


@click.command("create")
def sale_create() -> None:
    """Open a new, empty sale."""
    dto = CreateSaleHandler(sale_repo=sale_repository()).handle()
    click.echo(f"Sale #{dto.id} created.")


@click.command("show")
@click.option("--id", "sale_id", required=True, type=int, help="Sale ID to display.")
@click.option("--all", "include_deleted", is_flag=True, default=False, help="Include deleted lines.")
def sale_show(sale_id: int, include_deleted: bool) -> None:
    """Show a sale with its lines and totals."""
    handler = ShowSaleHandler(sale_repo=sale_repository())

    try:
        dto = handler.handle(sale_id, include_deleted=include_deleted)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_sale(dto)


@click.command("add")
@click.option("--sale", "sale_id", required=True, type=int, help="Sale ID.")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units sold.")
@click.option("--request-id", default=None, help="Idempotency key for safe retries.")
def line_add(sale_id: int, product_id: int, quantity: int, request_id: str | None) -> None:
    """Ring up a product on a sale (merges with an existing line)."""
    try:
        line = sale_line_ledger().add_or_merge_line(sale_id, product_id, quantity, request_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    dto = to_sold_line_dto(line)
    click.echo(
        f"Line #{dto.id}: {dto.quantity} x {dto.name} at {dto.unit_price} "
        f"= {dto.total}, {dto.discount}% off, pay {dto.final_price}"
    )


@click.command("update")
@click.option("--id", "line_id", required=True, type=int, help="Sold line ID.")
@click.option("--quantity", required=True, type=int, help="New quantity.")
@click.option("--request-id", default=None, help="Idempotency key for safe retries.")
def line_update(line_id: int, quantity: int, request_id: str | None) -> None:
    """Change the quantity of a sold line."""
    try:
        line = sale_line_ledger().update_line(line_id, quantity, request_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Line #{line.id} now {line.quantity} x {line.name}, pay {line.final_price}")


@click.command("delete")
@click.option("--id", "line_id", required=True, type=int, help="Sold line ID.")
@click.option("--request-id", default=None, help="Idempotency key for safe retries.")
def line_delete(line_id: int, request_id: str | None) -> None:
    """Delete a sold line (returns its units to stock)."""
    try:
        sale_line_ledger().delete_line(line_id, request_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Line #{line_id} deleted — stock restored.")
