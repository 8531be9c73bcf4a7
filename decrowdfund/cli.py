#!/usr/bin/env python3
"""
Console front-end for the DeCrowdFund client.

Examples:
  - Campaigns
    decrowdfund list
    decrowdfund list --json

  - Owner actions
    decrowdfund create --title "Roof" --goal 1 --duration 86400
    decrowdfund edit 3 goal 2.5
    decrowdfund cancel 3
    decrowdfund withdraw 3

  - Supporter actions
    decrowdfund donate 3 0.5
    decrowdfund rate 3 5
    decrowdfund refund 3

Connection settings come from DCF_RPC_URL / DCF_ARTIFACT /
DCF_ACCOUNT_INDEX (or a .env file) and can be overridden per call.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from decrowdfund.actions.dispatcher import ActionDispatcher
from decrowdfund.actions.drafts import CampaignForm
from decrowdfund.shared.constants import Settings
from decrowdfund.shared.exceptions import ConfigurationException, ValidationException
from decrowdfund.shared.logging import set_level, use_rich_console
from decrowdfund.shared.notifications import (
    Notification,
    NotificationLevel,
    Notifier,
)
from decrowdfund.utils.formatters import campaigns_table, console

_LEVEL_STYLES = {
    NotificationLevel.SUCCESS: "green",
    NotificationLevel.WARNING: "yellow",
    NotificationLevel.INFO: "cyan",
    NotificationLevel.ERROR: "red",
}


def print_notification(notification: Notification) -> None:
    style = _LEVEL_STYLES[notification.level]
    console.print(f"[{style}]{notification.message}[/{style}]")


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if args.rpc_url:
        settings.rpc_url = args.rpc_url
    if args.artifact:
        settings.artifact_path = Path(args.artifact)
    if args.account_index is not None:
        settings.account_index = args.account_index
    return settings


def show_campaigns(dispatcher: ActionDispatcher, as_json: bool = False) -> None:
    buckets = dispatcher.buckets()
    if as_json:
        console.print_json(json.dumps(buckets.to_dict()))
        return

    console.print(f"Connected: [bold]{dispatcher.account}[/bold]")
    for title, campaigns in (
        ("Active Campaigns", buckets.active),
        ("Completed Campaigns", buckets.completed),
        ("Cancelled Campaigns", buckets.cancelled),
    ):
        if not campaigns:
            console.print(f"[dim]No {title.split()[0].lower()} campaigns yet.[/dim]")
            continue
        console.print(campaigns_table(title, campaigns, dispatcher.account))


async def run_command(args: argparse.Namespace) -> bool:
    """Connect, load campaigns, run the requested action."""
    notifier = Notifier()
    notifier.subscribe(print_notification)
    dispatcher = ActionDispatcher.connect(_settings_from_args(args), notifier)
    await dispatcher.refresh()

    command = args.command
    if command == "list":
        show_campaigns(dispatcher, as_json=args.json)
        return True
    if command == "create":
        form = CampaignForm(
            title=args.title,
            description=args.description,
            goal=args.goal,
            duration=args.duration,
        )
        return await dispatcher.create_campaign(form)
    if command == "donate":
        return await dispatcher.donate(args.campaign_id, args.amount)
    if command == "cancel":
        return await dispatcher.cancel_campaign(args.campaign_id)
    if command == "edit":
        return await dispatcher.edit_field(args.campaign_id, args.field, args.value)
    if command == "rate":
        try:
            dispatcher.drafts.select_rating(args.campaign_id, args.stars)
        except ValidationException as e:
            dispatcher.notifier.warning(e.message)
            return False
        return await dispatcher.rate(args.campaign_id)
    if command == "withdraw":
        return await dispatcher.withdraw_funds(args.campaign_id)
    if command == "refund":
        return await dispatcher.claim_refund(args.campaign_id)
    raise ValueError(f"Unknown command: {command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="decrowdfund", description="DeCrowdFund console client"
    )
    parser.add_argument("--rpc-url", help="JSON-RPC endpoint")
    parser.add_argument("--artifact", help="Path to the CrowdFunding artifact JSON")
    parser.add_argument(
        "--account-index", type=int, help="Index of the sending account"
    )
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="Show campaigns by lifecycle")
    p_list.add_argument("--json", action="store_true", help="Print JSON")

    p_create = sub.add_parser("create", help="Create a campaign")
    p_create.add_argument("--title", required=True)
    p_create.add_argument("--description", default="")
    p_create.add_argument("--goal", required=True, help="Goal in ETH")
    p_create.add_argument("--duration", required=True, help="Duration in seconds")

    p_donate = sub.add_parser("donate", help="Donate ETH to a campaign")
    p_donate.add_argument("campaign_id", type=int)
    p_donate.add_argument("amount", help="Amount in ETH")

    for name, help_text in (
        ("cancel", "Cancel your campaign and refund donors"),
        ("withdraw", "Withdraw funds from your completed campaign"),
        ("refund", "Claim a refund"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("campaign_id", type=int)

    p_edit = sub.add_parser("edit", help="Edit a field of your campaign")
    p_edit.add_argument("campaign_id", type=int)
    p_edit.add_argument(
        "field", choices=["title", "description", "goal", "deadline"]
    )
    p_edit.add_argument(
        "value", help="New value (ETH for goal, extra seconds for deadline)"
    )

    p_rate = sub.add_parser("rate", help="Rate a campaign from 1 to 5")
    p_rate.add_argument("campaign_id", type=int)
    p_rate.add_argument("stars", type=int)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    use_rich_console()
    if args.verbose:
        set_level("DEBUG")

    try:
        ok = asyncio.run(run_command(args))
    except ConfigurationException:
        # already reported through the notifier
        sys.exit(2)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
