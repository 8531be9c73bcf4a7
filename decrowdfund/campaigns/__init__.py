"""Campaign synchronization and view-model derivation."""

from .lifecycle import classify, lifecycle_status
from .models import (
    Campaign,
    CampaignBuckets,
    CampaignSet,
    CampaignStatus,
    DonorEntry,
    EditableField,
)
from .ranking import rank_donors
from .service import CampaignService

__all__ = [
    "Campaign",
    "CampaignBuckets",
    "CampaignService",
    "CampaignSet",
    "CampaignStatus",
    "DonorEntry",
    "EditableField",
    "classify",
    "lifecycle_status",
    "rank_donors",
]
