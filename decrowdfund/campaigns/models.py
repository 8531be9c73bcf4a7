"""
Type definitions for DeCrowdFund campaigns.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, TypedDict

from eth_utils.address import is_address, to_checksum_address

from decrowdfund.shared.constants import DEFAULT_TOP_DONORS
from decrowdfund.utils.units import from_base_units, rating_from_scaled

# Output order of getCampaign(id), matching the bundled artifact
CAMPAIGN_FIELDS = (
    "owner",
    "title",
    "description",
    "goal",
    "deadline",
    "amountCollected",
    "cancelled",
)

# =============================================================================
# ENUMS
# =============================================================================


class CampaignStatus(Enum):
    """Lifecycle bucket of a campaign."""

    ACTIVE = "active"  # Not cancelled, deadline in the future
    COMPLETED = "completed"  # Not cancelled, deadline reached
    CANCELLED = "cancelled"  # Cancelled by its owner, regardless of deadline


class EditableField(Enum):
    """Campaign fields the owner can change after creation."""

    TITLE = "title"
    DESCRIPTION = "description"
    GOAL = "goal"
    DEADLINE = "deadline"


# =============================================================================
# TYPED DICTS (for JSON serialization)
# =============================================================================


class DonorDict(TypedDict):
    donor: str
    amount: str  # Decimal ether, as string


class CampaignDict(TypedDict):
    """Campaign dictionary for JSON export."""

    id: int
    owner: str
    title: str
    description: str
    goal: int  # wei
    amount_collected: int  # wei
    deadline: int
    cancelled: bool
    avg_rating: int  # x100
    donors: List[DonorDict]


# =============================================================================
# DATACLASSES
# =============================================================================


@dataclass(frozen=True)
class DonorEntry:
    """One contribution as reported by getDonors, scaled to ether."""

    donor: str  # Donor address
    amount: Decimal  # Contribution in ether


@dataclass
class Campaign:
    """
    A campaign as mirrored from the contract.

    Monetary fields stay in wei; the *_ether properties are for display only.
    The lifecycle bucket is not stored here, see campaigns.lifecycle.
    """

    id: int  # Campaign ID, sequential from 1
    owner: str  # Owner address (checksummed)
    title: str
    description: str
    goal: int  # Funding goal (wei)
    amount_collected: int  # Raised so far (wei)
    deadline: int  # Unix timestamp (seconds)
    cancelled: bool
    avg_rating: int = 0  # Average rating x100
    donors: List[DonorEntry] = field(default_factory=list)  # Ranked

    @classmethod
    def from_contract(
        cls,
        campaign_id: int,
        record: Any,
        donors: Optional[List[DonorEntry]] = None,
        avg_rating: Any = 0,
    ) -> "Campaign":
        """Build a campaign from a getCampaign() return value.

        ``record`` is either a mapping keyed by the ABI output names or a
        sequence in CAMPAIGN_FIELDS order (what web3.py returns for a
        multi-output call).
        """
        if isinstance(record, Mapping):
            values = {name: record[name] for name in CAMPAIGN_FIELDS}
        elif isinstance(record, Sequence) and not isinstance(record, str):
            if len(record) < len(CAMPAIGN_FIELDS):
                raise ValueError(
                    f"getCampaign({campaign_id}) returned "
                    f"{len(record)} fields, expected {len(CAMPAIGN_FIELDS)}"
                )
            values = dict(zip(CAMPAIGN_FIELDS, record))
        else:
            raise TypeError(
                f"Unexpected getCampaign({campaign_id}) payload: {type(record)}"
            )

        owner = values["owner"]
        if not is_address(owner):
            raise ValueError(f"Invalid owner address: {owner!r}")

        amount_collected = int(values["amountCollected"])
        if amount_collected < 0:
            raise ValueError("amountCollected cannot be negative")

        return cls(
            id=int(campaign_id),
            owner=to_checksum_address(owner),
            title=str(values["title"]),
            description=str(values["description"]),
            goal=int(values["goal"]),
            amount_collected=amount_collected,
            deadline=int(values["deadline"]),
            cancelled=bool(values["cancelled"]),
            avg_rating=int(avg_rating or 0),
            donors=list(donors or []),
        )

    @property
    def goal_ether(self) -> Decimal:
        return from_base_units(self.goal)

    @property
    def amount_collected_ether(self) -> Decimal:
        return from_base_units(self.amount_collected)

    @property
    def rating(self) -> Decimal:
        """Average rating on the 0-5 scale, two decimals."""
        return rating_from_scaled(self.avg_rating)

    @property
    def progress(self) -> Decimal:
        """Fraction of the goal raised (0 when the goal is 0)."""
        if self.goal <= 0:
            return Decimal(0)
        return Decimal(self.amount_collected) / Decimal(self.goal)

    def top_donors(self, limit: int = DEFAULT_TOP_DONORS) -> List[DonorEntry]:
        return self.donors[:limit]

    def is_owned_by(self, address: Optional[str]) -> bool:
        if not address or not is_address(address):
            return False
        return to_checksum_address(address) == self.owner

    def to_dict(self) -> CampaignDict:
        return {
            "id": self.id,
            "owner": self.owner,
            "title": self.title,
            "description": self.description,
            "goal": self.goal,
            "amount_collected": self.amount_collected,
            "deadline": self.deadline,
            "cancelled": self.cancelled,
            "avg_rating": self.avg_rating,
            "donors": [
                {"donor": d.donor, "amount": str(d.amount)}
                for d in self.donors
            ],
        }


@dataclass
class CampaignBuckets:
    """Campaigns partitioned by lifecycle, each list in ascending id order."""

    active: List[Campaign] = field(default_factory=list)
    completed: List[Campaign] = field(default_factory=list)
    cancelled: List[Campaign] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.active) + len(self.completed) + len(self.cancelled)

    def to_dict(self) -> Dict[str, List[CampaignDict]]:
        return {
            "active": [c.to_dict() for c in self.active],
            "completed": [c.to_dict() for c in self.completed],
            "cancelled": [c.to_dict() for c in self.cancelled],
        }


@dataclass
class CampaignSet:
    """
    The view model: every campaign from the last full resync.

    Replaced wholesale on each resync, never patched. Buckets are derived
    on every call because a campaign moves from Active to Completed by the
    clock alone.
    """

    campaigns: List[Campaign] = field(default_factory=list)
    synced_at: Optional[int] = None

    def __len__(self) -> int:
        return len(self.campaigns)

    def __iter__(self):
        return iter(self.campaigns)

    def get(self, campaign_id: int) -> Optional[Campaign]:
        for campaign in self.campaigns:
            if campaign.id == campaign_id:
                return campaign
        return None

    def buckets(self, now: Optional[int] = None) -> CampaignBuckets:
        from decrowdfund.campaigns.lifecycle import classify

        return classify(self.campaigns, now)
