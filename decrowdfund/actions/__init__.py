"""User intents and their pending input."""

from .dispatcher import ActionDispatcher
from .drafts import CampaignForm, DraftState, EditTarget

__all__ = ["ActionDispatcher", "CampaignForm", "DraftState", "EditTarget"]
