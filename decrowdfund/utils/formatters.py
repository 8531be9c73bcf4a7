"""Shared formatting utilities for the console front-end."""

from datetime import datetime
from decimal import Decimal
from typing import List

from rich.console import Console
from rich.table import Table

from decrowdfund.campaigns.models import Campaign

# Shared console instance
console = Console()


def format_address(address: str, length: int = 10) -> str:
    """
    Format an Ethereum address to show first and last characters.

    Args:
        address: Ethereum address
        length: Addresses this short or shorter are shown whole

    Returns:
        Formatted address like "0x1234...5678"
    """
    if not address:
        return "N/A"
    if len(address) <= length:
        return address
    return f"{address[:6]}...{address[-4:]}"


def format_timestamp(
    timestamp: int, format_str: str = "%Y-%m-%d %H:%M"
) -> str:
    """Format a Unix timestamp to a readable local date string."""
    return datetime.fromtimestamp(timestamp).strftime(format_str)


def format_ether(amount: Decimal) -> str:
    """Ether amount without trailing zeros: Decimal('1.500') -> '1.5 ETH'."""
    normalized = amount.normalize() if amount else Decimal(0)
    # normalize() turns 100 into 1E+2
    text = format(normalized, "f")
    return f"{text} ETH"


def format_rating(campaign: Campaign) -> str:
    return f"{campaign.rating:.2f}/5"


def format_donors(campaign: Campaign) -> str:
    top = campaign.top_donors()
    if not top:
        return "No donations yet."
    return "\n".join(
        f"{format_address(d.donor)} - {format_ether(d.amount)}" for d in top
    )


def campaigns_table(
    title: str, campaigns: List[Campaign], account: str = None
) -> Table:
    """Rich table for one lifecycle bucket."""
    table = Table(title=title, show_lines=True)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Title")
    table.add_column("Goal", justify="right")
    table.add_column("Raised", justify="right", style="green")
    table.add_column("Deadline")
    table.add_column("Rating", justify="right")
    table.add_column("Top donors")

    for campaign in campaigns:
        marker = " (yours)" if campaign.is_owned_by(account) else ""
        table.add_row(
            str(campaign.id),
            f"{campaign.title}{marker}",
            format_ether(campaign.goal_ether),
            format_ether(campaign.amount_collected_ether),
            format_timestamp(campaign.deadline),
            format_rating(campaign),
            format_donors(campaign),
        )
    return table
