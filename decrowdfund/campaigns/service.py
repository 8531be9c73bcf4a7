"""
CampaignService - mirrors the on-chain campaign set into a CampaignSet

This service handles:
1. Reading the campaign count and every campaign record by id
2. Reading each campaign's donor ledger and ranking it
3. Reading each campaign's average rating (optional decoration)

Failure policy:
- Any read failure for one campaign id drops that id from the result and is
  logged; it never aborts the sync and never reaches the user
- A failing getAverageRating only defaults the rating to 0
- A failing campaignCount yields a failed Result with an empty set

Campaigns come back in ascending id order. Reads are issued one id at a time.
"""

import time
from typing import Awaitable, Callable, Optional, TypeVar

from decrowdfund.campaigns.models import Campaign, CampaignSet
from decrowdfund.campaigns.ranking import rank_donors
from decrowdfund.contracts.client import ChainClient
from decrowdfund.shared.logging import get_logger
from decrowdfund.shared.results import ErrorSeverity, Result, SyncSummary

T = TypeVar("T")

logger = get_logger(__name__)

FIRST_CAMPAIGN_ID = 1


async def fetch_or_skip(
    fetch: Callable[[], Awaitable[T]],
    result: Result,
    source: str,
    context: dict,
) -> Optional[T]:
    """
    Run ``fetch``; on failure log it, record a warning on ``result`` and
    return None so the caller can drop the item.
    """
    try:
        return await fetch()
    except Exception as e:
        logger.warning(f"Skipping {source} {context}: {e}")
        result.add_warning(
            source=source,
            message=f"{source} failed: {e}",
            context=context,
            exception=e,
        )
        return None


class CampaignService:
    """
    Service for fetching DeCrowdFund campaign data.

    Attributes:
        client: ChainClient bound to the session's contract
        last_summary: Counters from the most recent sync_all()
    """

    def __init__(self, client: ChainClient):
        self.client = client
        self.last_summary = SyncSummary()

    async def _read_rating(self, campaign_id: int, summary: SyncSummary) -> int:
        try:
            return int(await self.client.read("getAverageRating", campaign_id))
        except Exception as e:
            summary.ratings_defaulted += 1
            logger.debug(f"No rating for campaign {campaign_id} ({e}), using 0")
            return 0

    async def _assemble(
        self, campaign_id: int, summary: Optional[SyncSummary] = None
    ) -> Campaign:
        """Read record, donors and rating for one id and build the Campaign."""
        summary = summary or SyncSummary()
        record = await self.client.read("getCampaign", campaign_id)
        donors_data = await self.client.read("getDonors", campaign_id)

        raw_donors, raw_amounts = (
            (donors_data[0], donors_data[1])
            if isinstance(donors_data, (list, tuple)) and len(donors_data) >= 2
            else (None, None)
        )
        donors = rank_donors(raw_donors, raw_amounts)
        avg_rating = await self._read_rating(campaign_id, summary)

        return Campaign.from_contract(
            campaign_id, record, donors=donors, avg_rating=avg_rating
        )

    async def get_campaign(self, campaign_id: int) -> Campaign:
        """
        Fetch a single campaign with ranked donors and rating.

        Unlike sync_all(), read failures propagate to the caller.
        """
        return await self._assemble(campaign_id)

    async def get_campaign_count(self) -> int:
        return int(await self.client.read("campaignCount"))

    async def sync_all(self) -> Result[CampaignSet]:
        """
        Fetch every campaign and build a fresh CampaignSet.

        Returns:
            Result[CampaignSet]: Always carries a CampaignSet (possibly
            empty). Skipped ids are reported as warnings, a failed count
            read as an error.

        Example:
            >>> result = await service.sync_all()
            >>> buckets = result.data.buckets()
        """
        summary = SyncSummary()
        self.last_summary = summary

        try:
            count = await self.get_campaign_count()
        except Exception as e:
            logger.warning(f"Could not read campaign count: {e}")
            return Result.fail_with_message(
                source="sync",
                message=f"campaignCount failed: {e}",
                severity=ErrorSeverity.ERROR,
                exception=e,
                data=CampaignSet(campaigns=[], synced_at=int(time.time())),
            )

        summary.campaign_count = count
        result: Result[CampaignSet] = Result.ok(None)
        campaigns = []

        for campaign_id in range(FIRST_CAMPAIGN_ID, count + 1):
            campaign = await fetch_or_skip(
                lambda: self._assemble(campaign_id, summary),
                result,
                source="campaign",
                context={"campaign_id": campaign_id},
            )
            if campaign is None:
                summary.record_skip(campaign_id)
                continue
            campaigns.append(campaign)

        summary.campaigns_loaded = len(campaigns)
        result.data = CampaignSet(campaigns=campaigns, synced_at=int(time.time()))

        logger.info(
            f"Synced {summary.campaigns_loaded}/{count} campaigns"
            + (
                f" (skipped ids {summary.skipped_ids})"
                if summary.skipped_ids
                else ""
            )
        )
        return result
