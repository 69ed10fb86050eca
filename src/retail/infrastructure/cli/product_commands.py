"""CLI commands for catalog products."""

from __future__ import annotations

import click

from retail.domain.exceptions import DomainException, ProductNotFoundError
from retail.domain.model.product import Product
from retail.domain.model.value_objects import Money
from retail.infrastructure.bootstrap import product_catalog


@click.command("show")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_show(product_id: int) -> None:
    """Show a product, inactive ones included."""
    try:
        product = product_catalog().get_by_id_including_inactive(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product not found with id: {product_id}")
    except DomainException as exc:
        raise click.ClickException(str(exc))

    status = "active" if product.active else "inactive"
    click.echo(f"Product #{product.id} '{product.name}' at {product.price}")
    click.echo(f"Inventory: {product.inventory}  ({status})")


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--inventory", default=0, type=int, help="Units in stock.")
def product_add(name: str, price: str, inventory: int) -> None:
    """Add a new product to the catalog."""
    if not name.strip():
        raise click.BadParameter("Product name is required.")

    try:
        draft = Product(id=None, name=name.strip(), price=Money.of(price), inventory=inventory)
        product = product_catalog().create(draft)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("delete")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
def product_delete(product_id: int) -> None:
    """Remove a product from the catalog."""
    try:
        product_catalog().delete(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} deleted.")
