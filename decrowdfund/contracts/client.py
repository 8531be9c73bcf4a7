"""
Typed read/write access to the CrowdFunding contract.

Reads are view calls and return the decoded value. Writes submit a
transaction from the session account and wait until it is mined; every
failure is classified here and re-raised as TransactionFailed so callers
only ever see one of the FailureCategory values.

web3.py is synchronous, so both run on the default executor to keep the
event loop free while the node answers.
"""

import asyncio
from functools import partial
from typing import Any, Optional

from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted

from decrowdfund.shared.constants import DEFAULT_RECEIPT_POLL_SECONDS
from decrowdfund.shared.exceptions import ChainReadException, TransactionFailed
from decrowdfund.shared.logging import get_logger
from decrowdfund.shared.retry import RetryConfig, retry_async_operation
from decrowdfund.shared.services.web3_service import Web3Service
from decrowdfund.transactions.errors import (
    FailureCategory,
    ReceiptReverted,
    classify_error,
    error_message,
)

logger = get_logger(__name__)


class ChainClient:
    """
    Adapter between the client and the deployed contract.

    All monetary arguments and return values are integers in wei; unit
    conversion is the caller's business.

    Attributes:
        session: Connected Web3Service
        retry_config: Retry policy for view calls
        receipt_poll_seconds: How long one receipt poll blocks before
            polling again (there is no overall mining timeout)
    """

    def __init__(
        self,
        session: Web3Service,
        retry_config: Optional[RetryConfig] = None,
        receipt_poll_seconds: float = DEFAULT_RECEIPT_POLL_SECONDS,
    ):
        self.session = session
        self.retry_config = retry_config or RetryConfig()
        self.receipt_poll_seconds = receipt_poll_seconds

    def _function(self, method_name: str, *args: Any):
        return getattr(self.session.contract.functions, method_name)(*args)

    async def _call(self, method_name: str, *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(
                None, self._function(method_name, *args).call
            )
        except ContractLogicError:
            raise
        except OSError as e:
            # requests' connection errors are OSError subclasses
            raise ChainReadException(method_name, str(e)) from e

    async def read(self, method_name: str, *args: Any) -> Any:
        """Call a view method and return its decoded output."""
        return await retry_async_operation(
            self._call,
            method_name,
            *args,
            config=self.retry_config,
            operation_name=method_name,
        )

    async def _wait_for_receipt(self, tx_hash: Any) -> Any:
        loop = asyncio.get_running_loop()
        tx_hex = Web3.to_hex(tx_hash)
        while True:
            try:
                receipt = await loop.run_in_executor(
                    None,
                    partial(
                        self.session.w3.eth.wait_for_transaction_receipt,
                        tx_hash,
                        timeout=self.receipt_poll_seconds,
                    ),
                )
            except TimeExhausted:
                logger.info(f"Transaction {tx_hex} still pending")
                continue

            if receipt.get("status", 1) == 0:
                raise ReceiptReverted(tx_hex)
            return receipt

    async def write(
        self,
        method_name: str,
        *args: Any,
        sender: Optional[str] = None,
        value: int = 0,
    ) -> Any:
        """
        Submit a state-changing call and wait for it to be mined.

        Args:
            method_name: Contract method, e.g. "donate"
            *args: Method arguments (wei for amounts)
            sender: Sending account, defaults to the session account
            value: Ether to attach, in wei

        Returns:
            The transaction receipt

        Raises:
            TransactionFailed: Rejected by the wallet, reverted, or failed
                for any other reason
        """
        tx_params = {"from": sender or self.session.account}
        if value:
            tx_params["value"] = value

        loop = asyncio.get_running_loop()
        try:
            tx_hash = await loop.run_in_executor(
                None, self._function(method_name, *args).transact, tx_params
            )
            logger.info(
                f"Submitted {method_name} from {tx_params['from']}: "
                f"{Web3.to_hex(tx_hash)}"
            )
            receipt = await self._wait_for_receipt(tx_hash)
        except Exception as e:
            category = classify_error(e)
            message = error_message(e)
            if category is FailureCategory.USER_REJECTED:
                logger.info(f"{method_name} rejected by user")
            else:
                logger.warning(
                    f"{method_name} failed ({category.value}): {message}"
                )
            raise TransactionFailed(category, message, cause=e) from e

        logger.info(
            f"{method_name} mined in block {receipt.get('blockNumber')}"
        )
        return receipt
