"""CLI commands for the Campaign aggregate."""

from __future__ import annotations

import click

from retail.application.dto import CampaignDTO, to_campaign_dto
from retail.domain.exceptions import DomainException
from retail.infrastructure.bootstrap import campaign_store


def _parse_ids(raw: str) -> list[int]:
    """Parse '1,2,3' into a list of product IDs."""
    ids: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            raise click.BadParameter(f"Invalid product id '{part}'.")
    return ids


def _display_campaign(dto: CampaignDTO) -> None:
    products = ", ".join(str(pid) for pid in dto.product_ids) or "-"
    click.echo(f"Campaign #{dto.id} '{dto.name}'  discount={dto.discount}%")
    click.echo(f"Products: {products}")


@click.command("add")
@click.option("--name", required=True, help="Campaign name.")
@click.option("--discount", required=True, type=int, help="Discount percentage (0-100).")
@click.option("--description", default="", help="Free text description.")
def campaign_add(name: str, discount: int, description: str) -> None:
    """Create a new campaign."""
    try:
        campaign = campaign_store().create(name, discount, description)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_campaign(to_campaign_dto(campaign))


@click.command("list")
def campaign_list() -> None:
    """List active campaigns."""
    campaigns = campaign_store().list_active()

    if not campaigns:
        click.echo("No campaigns found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Discount':>9} {'Products':>9}")
    click.echo("-" * 51)
    for c in campaigns:
        click.echo(f"{c.id:<6} {c.name:<24} {c.discount.value:>8}% {len(c.product_ids):>9}")


@click.command("rename")
@click.option("--id", "campaign_id", required=True, type=int, help="Campaign ID.")
@click.option("--name", required=True, help="New name.")
def campaign_rename(campaign_id: int, name: str) -> None:
    """Rename a campaign."""
    try:
        campaign_store().rename(campaign_id, name)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Campaign #{campaign_id} renamed to '{name.strip()}'")


@click.command("delete")
@click.option("--id", "campaign_id", required=True, type=int, help="Campaign ID.")
def campaign_delete(campaign_id: int) -> None:
    """Delete a campaign (its products become free to join another)."""
    try:
        campaign_store().soft_delete(campaign_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Campaign #{campaign_id} deleted.")


@click.command("assign")
@click.option("--id", "campaign_id", required=True, type=int, help="Campaign ID.")
@click.option("--products", required=True, help="Product IDs as '1,2,3'.")
def campaign_assign(campaign_id: int, products: str) -> None:
    """Add products to a campaign."""
    try:
        campaign = campaign_store().assign_products(campaign_id, _parse_ids(products))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_campaign(to_campaign_dto(campaign))


@click.command("unassign")
@click.option("--id", "campaign_id", required=True, type=int, help="Campaign ID.")
@click.option("--products", required=True, help="Product IDs as '1,2,3'.")
def campaign_unassign(campaign_id: int, products: str) -> None:
    """Remove products from a campaign (all or none)."""
    try:
        campaign = campaign_store().unassign_products(campaign_id, _parse_ids(products))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_campaign(to_campaign_dto(campaign))


@click.command("unassign-all")
@click.option("--id", "campaign_id", required=True, type=int, help="Campaign ID.")
def campaign_unassign_all(campaign_id: int) -> None:
    """Remove every product from a campaign."""
    try:
        campaign = campaign_store().unassign_all(campaign_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_campaign(to_campaign_dto(campaign))


@click.command("discount")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
def campaign_discount(product_id: int) -> None:
    """Show the discount that applies to a product right now."""
    store = campaign_store()
    discount = store.resolve_discount(product_id)
    if discount is None:
        click.echo(f"Product #{product_id} is not in any campaign.")
        return
    click.echo(
        f"Product #{product_id}: {discount}% off "
        f"(campaign '{store.campaign_name_for(product_id)}')"
    )
