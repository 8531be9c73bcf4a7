"""
Unit tests for campaign models.
"""

from decimal import Decimal

import pytest

from decrowdfund.campaigns.models import (
    Campaign,
    CampaignSet,
    DonorEntry,
)
from tests.fakes import DONOR, ONE_ETHER, OTHER_DONOR, OWNER


class TestCampaignFromContract:
    """Tests for building a Campaign from getCampaign output."""

    def test_from_tuple(self, campaign_record):
        campaign = Campaign.from_contract(4, campaign_record, avg_rating=437)

        assert campaign.id == 4
        assert campaign.owner == OWNER
        assert campaign.title == "Community garden"
        assert campaign.goal == 2 * ONE_ETHER
        assert campaign.amount_collected == ONE_ETHER // 2
        assert campaign.deadline == 1764806400
        assert campaign.cancelled is False
        assert campaign.rating == Decimal("4.37")

    def test_from_mapping(self, campaign_record):
        """Test the named-output form web3 can return."""
        names = (
            "owner",
            "title",
            "description",
            "goal",
            "deadline",
            "amountCollected",
            "cancelled",
        )
        campaign = Campaign.from_contract(1, dict(zip(names, campaign_record)))
        assert campaign.amount_collected == ONE_ETHER // 2

    def test_owner_is_checksummed(self, campaign_record):
        record = (OWNER.lower(),) + tuple(campaign_record[1:])
        assert Campaign.from_contract(1, record).owner == OWNER

    def test_short_record_rejected(self, campaign_record):
        with pytest.raises(ValueError, match="expected 7"):
            Campaign.from_contract(1, campaign_record[:5])

    def test_bad_owner_rejected(self, campaign_record):
        record = ("not-an-address",) + tuple(campaign_record[1:])
        with pytest.raises(ValueError, match="Invalid owner"):
            Campaign.from_contract(1, record)

    def test_negative_amount_rejected(self, campaign_record):
        record = list(campaign_record)
        record[5] = -1
        with pytest.raises(ValueError, match="negative"):
            Campaign.from_contract(1, record)

    def test_unexpected_payload(self):
        with pytest.raises(TypeError):
            Campaign.from_contract(1, 42)


class TestCampaignProperties:
    def test_ether_views(self, campaign_record):
        campaign = Campaign.from_contract(1, campaign_record)
        assert campaign.goal_ether == Decimal(2)
        assert campaign.amount_collected_ether == Decimal("0.5")
        assert campaign.progress == Decimal("0.25")

    def test_progress_zero_goal(self, campaign_record):
        campaign = Campaign.from_contract(1, campaign_record)
        campaign.goal = 0
        assert campaign.progress == Decimal(0)

    def test_top_donors(self, campaign_record):
        donors = [
            DonorEntry(DONOR, Decimal(3)),
            DonorEntry(OTHER_DONOR, Decimal(2)),
            DonorEntry(OWNER, Decimal(1)),
            DonorEntry(DONOR, Decimal("0.5")),
        ]
        campaign = Campaign.from_contract(1, campaign_record, donors=donors)

        assert campaign.top_donors() == donors[:3]
        assert campaign.top_donors(1) == donors[:1]

    @pytest.mark.parametrize(
        "address, expected",
        [(OWNER, True), (OWNER.lower(), True), (DONOR, False), (None, False)],
    )
    def test_is_owned_by(self, campaign_record, address, expected):
        campaign = Campaign.from_contract(1, campaign_record)
        assert campaign.is_owned_by(address) is expected

    def test_to_dict(self, campaign_record):
        campaign = Campaign.from_contract(
            2, campaign_record, donors=[DonorEntry(DONOR, Decimal("0.5"))]
        )
        data = campaign.to_dict()

        assert data["id"] == 2
        assert data["amount_collected"] == ONE_ETHER // 2
        assert data["donors"] == [{"donor": DONOR, "amount": "0.5"}]


class TestCampaignSet:
    def test_get(self, campaign_record):
        view = CampaignSet(
            campaigns=[
                Campaign.from_contract(1, campaign_record),
                Campaign.from_contract(3, campaign_record),
            ]
        )
        assert view.get(3).id == 3
        assert view.get(2) is None
        assert len(view) == 2
        assert [c.id for c in view] == [1, 3]

    def test_empty_by_default(self):
        view = CampaignSet()
        assert len(view) == 0
        assert len(view.buckets()) == 0
