"""
Unit tests for CampaignService synchronization and its failure policy.
"""

from decimal import Decimal

import pytest
from web3.exceptions import ContractLogicError

from decrowdfund.campaigns.service import CampaignService
from decrowdfund.shared.exceptions import ChainReadException
from tests.fakes import DONOR, ONE_ETHER, OTHER_DONOR, OWNER


def record_for(campaign_id):
    return (
        OWNER,
        f"Campaign {campaign_id}",
        "",
        ONE_ETHER,
        2_000_000_000,
        0,
        False,
    )


def chain_reads(count=5, failing=(), no_rating=(), donors=None):
    """Build an AsyncMock side effect emulating the contract's views."""

    async def read(method, *args):
        if method == "campaignCount":
            return count
        campaign_id = args[0]
        if method == "getCampaign":
            if campaign_id in failing:
                raise ContractLogicError("execution reverted")
            return record_for(campaign_id)
        if method == "getDonors":
            return (donors or {}).get(campaign_id, ([], []))
        if method == "getAverageRating":
            if campaign_id in no_rating:
                raise ContractLogicError("execution reverted: No ratings yet")
            return 400
        raise AssertionError(f"unexpected read {method}")

    return read


class TestSyncAll:
    """Tests for CampaignService.sync_all."""

    @pytest.mark.asyncio
    async def test_loads_every_campaign_in_id_order(self, mock_chain_client):
        mock_chain_client.read.side_effect = chain_reads(count=3)
        service = CampaignService(mock_chain_client)

        result = await service.sync_all()

        assert result.success
        assert [c.id for c in result.data] == [1, 2, 3]
        assert not result.has_warnings()
        assert result.data.synced_at is not None

    @pytest.mark.asyncio
    async def test_failing_campaign_is_dropped(self, mock_chain_client):
        """Test one bad record never aborts the rest of the sync."""
        mock_chain_client.read.side_effect = chain_reads(count=5, failing={3})
        service = CampaignService(mock_chain_client)

        result = await service.sync_all()

        assert result.success
        assert [c.id for c in result.data] == [1, 2, 4, 5]
        assert result.has_warnings()
        assert not result.has_errors()
        assert result.errors[0].context == {"campaign_id": 3}
        assert service.last_summary.skipped_ids == [3]
        assert service.last_summary.campaigns_loaded == 4

    @pytest.mark.asyncio
    async def test_zero_campaigns(self, mock_chain_client):
        mock_chain_client.read.side_effect = chain_reads(count=0)

        result = await CampaignService(mock_chain_client).sync_all()

        assert result.success
        assert len(result.data) == 0
        assert mock_chain_client.read.await_count == 1

    @pytest.mark.asyncio
    async def test_count_failure_returns_error_and_empty_set(
        self, mock_chain_client
    ):
        mock_chain_client.read.side_effect = ChainReadException(
            "campaignCount", "connection refused"
        )

        result = await CampaignService(mock_chain_client).sync_all()

        assert not result.success
        assert result.has_errors()
        assert len(result.data) == 0

    @pytest.mark.asyncio
    async def test_missing_rating_defaults_to_zero(self, mock_chain_client):
        mock_chain_client.read.side_effect = chain_reads(count=2, no_rating={2})
        service = CampaignService(mock_chain_client)

        result = await service.sync_all()

        first, second = result.data.campaigns
        assert first.rating == Decimal(4)
        assert second.avg_rating == 0
        assert second.rating == Decimal(0)
        assert service.last_summary.ratings_defaulted == 1
        # a missing rating is not a skipped campaign
        assert not result.has_warnings()

    @pytest.mark.asyncio
    async def test_donors_are_ranked(self, mock_chain_client):
        mock_chain_client.read.side_effect = chain_reads(
            count=1,
            donors={1: ([DONOR, OTHER_DONOR], [ONE_ETHER, 3 * ONE_ETHER])},
        )

        result = await CampaignService(mock_chain_client).sync_all()

        campaign = result.data.campaigns[0]
        assert [d.donor for d in campaign.donors] == [OTHER_DONOR, DONOR]

    @pytest.mark.asyncio
    async def test_malformed_donor_payload_gives_no_donors(self, mock_chain_client):
        mock_chain_client.read.side_effect = chain_reads(
            count=1, donors={1: "garbage"}
        )

        result = await CampaignService(mock_chain_client).sync_all()

        assert result.data.campaigns[0].donors == []

    @pytest.mark.asyncio
    async def test_reads_are_sequential(self, mock_chain_client):
        """Test each campaign is fully read before the next one starts."""
        mock_chain_client.read.side_effect = chain_reads(count=2)

        await CampaignService(mock_chain_client).sync_all()

        calls = [c.args for c in mock_chain_client.read.await_args_list]
        assert calls == [
            ("campaignCount",),
            ("getCampaign", 1),
            ("getDonors", 1),
            ("getAverageRating", 1),
            ("getCampaign", 2),
            ("getDonors", 2),
            ("getAverageRating", 2),
        ]


class TestGetCampaign:
    @pytest.mark.asyncio
    async def test_single_campaign(self, mock_chain_client):
        mock_chain_client.read.side_effect = chain_reads()

        campaign = await CampaignService(mock_chain_client).get_campaign(2)

        assert campaign.id == 2
        assert campaign.title == "Campaign 2"

    @pytest.mark.asyncio
    async def test_errors_propagate(self, mock_chain_client):
        mock_chain_client.read.side_effect = chain_reads(failing={2})

        with pytest.raises(ContractLogicError):
            await CampaignService(mock_chain_client).get_campaign(2)
