"""
Classification of failed transactions.

The transport reports three different situations through the same error
shape:

- the user declined the transaction in their wallet (EIP-1193 code 4001)
- the contract rejected it (revert, on-chain or during gas estimation)
- anything else (node down, bad nonce, ...)

classify_error() maps a raw exception onto a closed set of categories so the
rest of the client never inspects transport errors itself.
"""

from enum import Enum
from typing import Any, Optional

from web3.exceptions import ContractLogicError

from decrowdfund.shared.constants import WalletConstants
from decrowdfund.shared.notifications import Notification, NotificationLevel


class FailureCategory(Enum):
    """What went wrong with a write, from the user's point of view."""

    USER_REJECTED = "user_rejected"
    REVERTED = "reverted"
    UNKNOWN = "unknown"


class ReceiptReverted(Exception):
    """A transaction was mined but its receipt reports status 0."""

    def __init__(self, tx_hash: str):
        super().__init__(f"Transaction {tx_hash} has been reverted by the EVM")
        self.tx_hash = tx_hash


def _code_from(payload: Any) -> Optional[int]:
    if isinstance(payload, dict):
        code = payload.get("code")
        if isinstance(code, int):
            return code
        # {"error": {"code": ..., "message": ...}} as in a raw RPC response
        return _code_from(payload.get("error"))
    return None


def error_code(error: BaseException) -> Optional[int]:
    """Find a provider error code on an exception, if it carries one."""
    code = getattr(error, "code", None)
    if isinstance(code, int):
        return code

    code = _code_from(getattr(error, "rpc_response", None))
    if code is not None:
        return code

    for arg in getattr(error, "args", ()):
        code = _code_from(arg)
        if code is not None:
            return code
    return None


def error_message(error: BaseException) -> str:
    """Best-effort human readable message for an exception."""
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    for arg in getattr(error, "args", ()):
        if isinstance(arg, dict) and isinstance(arg.get("message"), str):
            return arg["message"]
    return str(error)


def classify_error(error: BaseException) -> FailureCategory:
    """
    Map a raw write failure onto a FailureCategory.

    Priority order: wallet rejection code, then revert, then unknown.
    """
    if error_code(error) == WalletConstants.USER_REJECTED_CODE:
        return FailureCategory.USER_REJECTED

    if isinstance(error, (ContractLogicError, ReceiptReverted)):
        return FailureCategory.REVERTED

    if WalletConstants.REVERT_MARKER in error_message(error).lower():
        return FailureCategory.REVERTED

    return FailureCategory.UNKNOWN


def failure_notification(
    category: FailureCategory, context: str = "Transaction failed"
) -> Notification:
    """Notification the UI shows for a failed write."""
    if category is FailureCategory.USER_REJECTED:
        return Notification(
            NotificationLevel.INFO, "Transaction rejected by user."
        )
    if category is FailureCategory.REVERTED:
        return Notification(
            NotificationLevel.ERROR, f"{context}: Transaction reverted."
        )
    return Notification(NotificationLevel.ERROR, f"{context}.")
