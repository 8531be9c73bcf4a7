"""
Transient per-session user input.

Nothing here is persisted or sent anywhere until the dispatcher submits it;
drafts are cleared when the matching action succeeds or is cancelled.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Union

from decrowdfund.campaigns.models import EditableField
from decrowdfund.shared.constants import ContractConstants
from decrowdfund.shared.exceptions import ValidationException


@dataclass
class CampaignForm:
    """The create-campaign form, all fields as typed by the user."""

    title: str = ""
    description: str = ""
    goal: str = ""  # ether
    duration: str = ""  # seconds


@dataclass
class EditTarget:
    """The single field currently open for editing."""

    campaign_id: int
    field: EditableField
    value: str = ""


def parse_field(name: Union[str, EditableField]) -> EditableField:
    if isinstance(name, EditableField):
        return name
    try:
        return EditableField(str(name).lower())
    except ValueError:
        allowed = ", ".join(f.value for f in EditableField)
        raise ValidationException(
            f"Cannot edit field {name!r}; expected one of {allowed}"
        )


def _check_star(star: Any) -> int:
    if isinstance(star, bool) or not isinstance(star, int):
        raise ValidationException(f"Rating must be a whole number, got {star!r}")
    if not ContractConstants.MIN_RATING <= star <= ContractConstants.MAX_RATING:
        raise ValidationException(
            f"Rating must be between {ContractConstants.MIN_RATING} "
            f"and {ContractConstants.MAX_RATING}"
        )
    return star


@dataclass
class DraftState:
    form: CampaignForm = field(default_factory=CampaignForm)
    donation: Dict[int, str] = field(default_factory=dict)
    rating: Dict[int, int] = field(default_factory=dict)
    hover: Dict[int, int] = field(default_factory=dict)
    edit: Optional[EditTarget] = None

    # create form

    def update_form(self, **values: str) -> None:
        known = {f.name for f in fields(CampaignForm)}
        unknown = set(values) - known
        if unknown:
            raise ValidationException(f"Unknown form field(s): {sorted(unknown)}")
        for name, value in values.items():
            setattr(self.form, name, value)

    def clear_form(self) -> None:
        self.form = CampaignForm()

    # donations

    def set_donation(self, campaign_id: int, amount: str) -> None:
        self.donation[campaign_id] = amount

    def clear_donation(self, campaign_id: int) -> None:
        self.donation.pop(campaign_id, None)

    # ratings

    def select_rating(self, campaign_id: int, star: int) -> None:
        self.rating[campaign_id] = _check_star(star)

    def hover_rating(self, campaign_id: int, star: int) -> None:
        self.hover[campaign_id] = _check_star(star)

    def clear_hover(self, campaign_id: int) -> None:
        self.hover.pop(campaign_id, None)

    def clear_rating(self, campaign_id: int) -> None:
        self.rating.pop(campaign_id, None)
        self.hover.pop(campaign_id, None)

    def displayed_rating(self, campaign_id: int) -> int:
        """Stars to light up: the hover preview wins over the selection."""
        return self.hover.get(campaign_id) or self.rating.get(campaign_id, 0)

    # edit

    def open_edit(
        self, campaign_id: int, field_name: Union[str, EditableField]
    ) -> EditTarget:
        self.edit = EditTarget(campaign_id, parse_field(field_name))
        return self.edit

    def set_edit_value(self, value: str) -> None:
        if self.edit is None:
            raise ValidationException("No field is being edited")
        self.edit.value = value

    def cancel_edit(self) -> None:
        self.edit = None
