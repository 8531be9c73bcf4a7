"""
Lifecycle classification for campaigns.

Rules, evaluated per campaign:
- cancelled                      -> CANCELLED (deadline ignored)
- not cancelled, deadline > now  -> ACTIVE
- not cancelled, deadline <= now -> COMPLETED

The Active -> Completed transition happens purely by the clock, with no
chain event, so nothing here is cached: callers classify on every view.
"""

import time
from typing import Iterable, Optional

from decrowdfund.campaigns.models import Campaign, CampaignBuckets, CampaignStatus


def current_timestamp() -> int:
    return int(time.time())


def lifecycle_status(campaign: Campaign, now: Optional[int] = None) -> CampaignStatus:
    """Bucket for a single campaign at ``now`` (seconds)."""
    if campaign.cancelled:
        return CampaignStatus.CANCELLED
    if now is None:
        now = current_timestamp()
    if campaign.deadline > now:
        return CampaignStatus.ACTIVE
    return CampaignStatus.COMPLETED


def classify(
    campaigns: Iterable[Campaign], now: Optional[int] = None
) -> CampaignBuckets:
    """Partition campaigns into active/completed/cancelled.

    Input order is preserved inside each bucket.
    """
    if now is None:
        now = current_timestamp()

    buckets = CampaignBuckets()
    for campaign in campaigns:
        status = lifecycle_status(campaign, now)
        if status is CampaignStatus.CANCELLED:
            buckets.cancelled.append(campaign)
        elif status is CampaignStatus.ACTIVE:
            buckets.active.append(campaign)
        else:
            buckets.completed.append(campaign)
    return buckets
