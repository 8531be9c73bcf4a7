"""All constants and environment settings for the client"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class ContractConstants:
    """Constants tied to the CrowdFunding contract interface"""

    ARTIFACT_NAME = "CrowdFunding"

    # Ledger amounts are 18-decimal base units, ratings are stored x100
    AMOUNT_UNIT = "ether"
    RATING_SCALE = 100
    MIN_RATING = 1
    MAX_RATING = 5

    # Field name on the edit form -> contract update method
    UPDATE_METHODS = {
        "title": "updateTitle",
        "description": "updateDescription",
        "goal": "updateGoal",
        "deadline": "extendDeadline",
    }


class WalletConstants:
    """EIP-1193 provider error codes"""

    USER_REJECTED_CODE = 4001
    REVERT_MARKER = "revert"


DEFAULT_RPC_URL = "http://127.0.0.1:7545"
DEFAULT_RECEIPT_POLL_SECONDS = 120.0
DEFAULT_TOP_DONORS = 3


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return int(raw)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return float(raw)


@dataclass
class Settings:
    """Runtime settings, read from the environment (and .env)."""

    rpc_url: str = DEFAULT_RPC_URL
    artifact_path: Optional[Path] = None
    account_index: int = 0
    read_attempts: int = 1
    receipt_poll_seconds: float = DEFAULT_RECEIPT_POLL_SECONDS

    @classmethod
    def from_env(cls) -> "Settings":
        artifact = os.getenv("DCF_ARTIFACT")
        return cls(
            rpc_url=os.getenv("DCF_RPC_URL", DEFAULT_RPC_URL),
            artifact_path=Path(artifact) if artifact else None,
            account_index=_int_env("DCF_ACCOUNT_INDEX", 0),
            read_attempts=_int_env("DCF_READ_ATTEMPTS", 1),
            receipt_poll_seconds=_float_env(
                "DCF_RECEIPT_POLL", DEFAULT_RECEIPT_POLL_SECONDS
            ),
        )
