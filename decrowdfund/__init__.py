"""DeCrowdFund - Python client for the CrowdFunding campaign contract."""

__version__ = "0.3.0"

from .actions import ActionDispatcher, DraftState
from .campaigns import Campaign, CampaignService, CampaignSet, CampaignStatus

__all__ = [
    "ActionDispatcher",
    "Campaign",
    "CampaignService",
    "CampaignSet",
    "CampaignStatus",
    "DraftState",
]
