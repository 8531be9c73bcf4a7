"""
Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests.
"""

from typing import Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from decrowdfund.contracts.client import ChainClient
from decrowdfund.shared.services.web3_service import Web3Service
from tests.fakes import (
    DONOR,
    ONE_ETHER,
    OTHER_DONOR,
    OWNER,
    FakeCrowdFunding,
    FakeWeb3,
    deployed_artifact,
)


@pytest.fixture
def fake_web3() -> FakeWeb3:
    return FakeWeb3([OWNER, DONOR, OTHER_DONOR])


@pytest.fixture
def session(fake_web3) -> Web3Service:
    return Web3Service(fake_web3, deployed_artifact())


@pytest.fixture
def fake_contract(session) -> FakeCrowdFunding:
    return session.contract


@pytest.fixture
def chain_client(session) -> ChainClient:
    return ChainClient(session)


@pytest.fixture
def mock_chain_client():
    """ChainClient double with AsyncMock read/write and a static session."""
    client = MagicMock(spec=ChainClient)
    client.read = AsyncMock()
    client.write = AsyncMock(return_value={"status": 1, "blockNumber": 1})
    client.session = MagicMock()
    client.session.account = OWNER
    client.session.reconcile.return_value = False
    return client


@pytest.fixture
def campaign_record() -> Tuple:
    """getCampaign() output for an active, uncancelled campaign."""
    return (
        OWNER,
        "Community garden",
        "Raised beds for the school",
        2 * ONE_ETHER,
        1764806400,
        ONE_ETHER // 2,
        False,
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow-running")
