"""
ActionDispatcher - turns user intents into contract transactions

Each intent is validated locally first so obviously bad input never costs a
failed transaction. A successful write invalidates the whole view model and
refetches it; a failed one is classified and reported, and the view model is
left as it was.

Only one write is in flight at a time: while a transaction (and the resync
that follows it) is pending, further intents are refused with a warning.
"""

import asyncio
from typing import Any, Callable, Optional, Union

from decrowdfund.actions.drafts import CampaignForm, DraftState, parse_field
from decrowdfund.campaigns.models import CampaignBuckets, CampaignSet, EditableField
from decrowdfund.campaigns.service import CampaignService
from decrowdfund.contracts.client import ChainClient
from decrowdfund.shared.constants import ContractConstants, Settings
from decrowdfund.shared.exceptions import (
    ConfigurationException,
    TransactionFailed,
    ValidationException,
)
from decrowdfund.shared.logging import get_logger
from decrowdfund.shared.notifications import NotificationLevel, Notifier
from decrowdfund.shared.retry import RetryConfig
from decrowdfund.shared.services.web3_service import Web3Service
from decrowdfund.transactions.errors import failure_notification
from decrowdfund.utils.units import parse_decimal, parse_int, to_base_units

logger = get_logger(__name__)


class ActionDispatcher:
    """
    Entry point for the presentation layer.

    Attributes:
        client: ChainClient used for writes
        service: CampaignService used for resyncs
        notifier: Where success/warning/info/error messages go
        drafts: Pending user input
        view: CampaignSet from the last successful resync
        busy: True while a write (and its resync) is pending
        session_error: Set once the session became unusable
    """

    def __init__(
        self,
        client: ChainClient,
        service: Optional[CampaignService] = None,
        notifier: Optional[Notifier] = None,
        drafts: Optional[DraftState] = None,
    ):
        self.client = client
        self.service = service or CampaignService(client)
        self.notifier = notifier or Notifier()
        self.drafts = drafts or DraftState()
        self.view = CampaignSet()
        self.busy = False
        self.session_error: Optional[ConfigurationException] = None

    @classmethod
    def connect(
        cls,
        settings: Optional[Settings] = None,
        notifier: Optional[Notifier] = None,
    ) -> "ActionDispatcher":
        """
        Open a session and build a dispatcher on it.

        Raises:
            ConfigurationException: After notifying the user once.
        """
        settings = settings or Settings.from_env()
        notifier = notifier or Notifier()
        try:
            session = Web3Service.connect(settings)
        except ConfigurationException as e:
            logger.error(f"Cannot start session: {e.message}")
            notifier.error(e.message)
            raise

        client = ChainClient(
            session,
            retry_config=RetryConfig(max_attempts=settings.read_attempts),
            receipt_poll_seconds=settings.receipt_poll_seconds,
        )
        return cls(client, notifier=notifier)

    @property
    def account(self) -> Optional[str]:
        return self.client.session.account

    def buckets(self, now: Optional[int] = None) -> CampaignBuckets:
        """Classify the current view model (recomputed on every call)."""
        return self.view.buckets(now)

    # -----------------------------
    # Synchronization
    # -----------------------------

    def _fail_session(self, error: ConfigurationException) -> None:
        if self.session_error is None:
            logger.error(f"Session unusable: {error.message}")
            self.notifier.error(error.message)
        self.session_error = error

    async def refresh(self) -> CampaignSet:
        """
        Invalidate the view model and refetch every campaign.

        The session is reconciled first so an account or network switch is
        picked up. If the campaign count cannot be read the previous view is
        kept; individual campaigns that fail to load are simply missing.
        """
        if self.session_error is not None:
            return self.view

        loop = asyncio.get_running_loop()
        try:
            changed = await loop.run_in_executor(
                None, self.client.session.reconcile
            )
        except ConfigurationException as e:
            self._fail_session(e)
            return self.view
        except Exception as e:
            # node hiccup: keep the current binding and sync anyway
            logger.warning(f"Could not check session for changes: {e}")
        else:
            if changed:
                self.notifier.info("Wallet account or network changed.")

        result = await self.service.sync_all()
        if result.has_errors():
            logger.warning(
                "Resync failed, keeping previous campaigns: "
                + "; ".join(result.get_error_messages())
            )
            return self.view

        self.view = result.data
        return self.view

    # -----------------------------
    # Submission helpers
    # -----------------------------

    def _reject(self, message: str) -> bool:
        self.notifier.warning(message)
        return False

    async def _submit(
        self,
        context: str,
        method_name: str,
        *args: Any,
        value: int = 0,
        success: str,
        success_level: NotificationLevel = NotificationLevel.SUCCESS,
        on_success: Optional[Callable[[], None]] = None,
    ) -> bool:
        if self.session_error is not None:
            return self._reject(self.session_error.message)
        if self.busy:
            return self._reject("Another transaction is still pending.")

        self.busy = True
        try:
            try:
                await self.client.write(method_name, *args, value=value)
            except TransactionFailed as e:
                self.notifier.publish(failure_notification(e.category, context))
                return False

            self.notifier.publish_level(success_level, success)
            if on_success:
                on_success()
            await self.refresh()
            return True
        finally:
            self.busy = False

    # -----------------------------
    # Intents
    # -----------------------------

    async def create_campaign(self, form: Optional[CampaignForm] = None) -> bool:
        form = form or self.drafts.form
        if not form.title or not form.goal or not form.duration:
            return self._reject("Please fill all campaign details!")
        try:
            goal_wei = to_base_units(form.goal, "goal")
            duration = parse_int(form.duration, "duration")
        except ValidationException as e:
            return self._reject(e.message)

        return await self._submit(
            "Failed to create campaign",
            "createCampaign",
            form.title,
            form.description,
            goal_wei,
            duration,
            success="Campaign created successfully!",
            on_success=self.drafts.clear_form,
        )

    async def donate(self, campaign_id: int, amount: Optional[str] = None) -> bool:
        if amount is None:
            amount = self.drafts.donation.get(campaign_id, "0")
        try:
            if parse_decimal(amount, "donation") <= 0:
                raise ValidationException("donation must be positive")
            value = to_base_units(amount, "donation")
        except ValidationException:
            return self._reject("Please enter a valid donation amount!")

        return await self._submit(
            "Donation failed",
            "donate",
            campaign_id,
            value=value,
            success=f"Donated {str(amount).strip()} ETH successfully!",
            on_success=lambda: self.drafts.clear_donation(campaign_id),
        )

    async def cancel_campaign(self, campaign_id: int) -> bool:
        return await self._submit(
            "Cancel failed",
            "cancelCampaign",
            campaign_id,
            success="Campaign cancelled and refunds issued!",
            success_level=NotificationLevel.WARNING,
        )

    async def edit_field(
        self,
        campaign_id: int,
        field_name: Union[str, EditableField],
        value: Optional[str],
    ) -> bool:
        if not value:
            return self._reject("Please enter a value!")
        try:
            edit_field = parse_field(field_name)
            if edit_field is EditableField.GOAL:
                arg: Any = to_base_units(value, "goal")
            elif edit_field is EditableField.DEADLINE:
                arg = parse_int(value, "deadline extension")
            else:
                arg = value
        except ValidationException as e:
            return self._reject(e.message)

        name = edit_field.value
        return await self._submit(
            f"Failed to update {name}",
            ContractConstants.UPDATE_METHODS[name],
            campaign_id,
            arg,
            success=f"{name} updated successfully!",
            on_success=self.drafts.cancel_edit,
        )

    async def save_edit(self) -> bool:
        """Submit the active edit target from the drafts."""
        target = self.drafts.edit
        if target is None:
            return self._reject("Nothing is being edited.")
        return await self.edit_field(target.campaign_id, target.field, target.value)

    async def rate(self, campaign_id: int) -> bool:
        stars = self.drafts.rating.get(campaign_id)
        if not stars:
            return self._reject("Please select a rating!")
        return await self._submit(
            "Rating failed",
            "rateCampaign",
            campaign_id,
            int(stars),
            success="Thanks for rating!",
            on_success=lambda: self.drafts.clear_rating(campaign_id),
        )

    async def withdraw_funds(self, campaign_id: int) -> bool:
        campaign = self.view.get(campaign_id)
        if campaign is None:
            return self._reject(f"Campaign {campaign_id} is not loaded.")
        if not campaign.is_owned_by(self.account):
            return self._reject("Only the campaign owner can withdraw funds!")
        if campaign.amount_collected <= 0:
            return self._reject("No funds to withdraw!")

        return await self._submit(
            "Withdraw failed",
            "withdrawFunds",
            campaign_id,
            success="Funds withdrawn successfully!",
        )

    async def claim_refund(self, campaign_id: int) -> bool:
        return await self._submit(
            "Refund failed",
            "claimRefund",
            campaign_id,
            success="Refund claimed successfully!",
        )
