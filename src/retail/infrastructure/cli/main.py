import click

from retail.infrastructure.bootstrap import settings
from retail.infrastructure.cli.campaign_commands import (
    campaign_add,
    campaign_assign,
    campaign_delete,
    campaign_discount,
    campaign_list,
    campaign_rename,
    campaign_unassign,
    campaign_unassign_all,
)
from retail.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_show,
)
from retail.infrastructure.cli.sale_commands import (
    line_add,
    line_delete,
    line_update,
    sale_create,
    sale_show,
)
from retail.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Retail — sales, campaigns and inventory"""
    cfg = settings()
    configure_logging(cfg.log_level, json=cfg.log_json)


@cli.group()
def campaign() -> None:
    """Manage campaigns."""


@cli.group()
def sale() -> None:
    """Manage sales."""


@cli.group()
def line() -> None:
    """Manage the sold lines of a sale."""


@cli.group()
def product() -> None:
    """Query and manage catalog products."""


# Register subcommands
campaign.add_command(campaign_add)
campaign.add_command(campaign_assign)
campaign.add_command(campaign_delete)
campaign.add_command(campaign_discount)
campaign.add_command(campaign_list)
campaign.add_command(campaign_rename)
campaign.add_command(campaign_unassign)
campaign.add_command(campaign_unassign_all)
sale.add_command(sale_create)
sale.add_command(sale_show)
line.add_command(line_add)
line.add_command(line_delete)
line.add_command(line_update)
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_show)
