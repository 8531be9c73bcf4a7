"""Donor ranking for a campaign's getDonors() ledger."""

from typing import Any, List, Sequence

from decrowdfund.campaigns.models import DonorEntry
from decrowdfund.shared.logging import get_logger
from decrowdfund.utils.units import from_base_units

logger = get_logger(__name__)


def _is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(
        value, (str, bytes, bytearray)
    )


def rank_donors(raw_donors: Any, raw_amounts: Any) -> List[DonorEntry]:
    """
    Turn the parallel donor/amount arrays into a ranked donor list.

    Entries are not merged per address: an address that donated twice shows
    up twice. The sort is stable, so equal amounts keep the order the
    contract reported them in. A malformed response (either side not an
    array) yields an empty list rather than an error.

    Args:
        raw_donors: Donor addresses as returned by getDonors
        raw_amounts: Amounts in wei, parallel to raw_donors

    Returns:
        List[DonorEntry]: Amounts in ether, largest first
    """
    if not _is_array(raw_donors) or not _is_array(raw_amounts):
        logger.debug(
            f"Malformed donor ledger ({type(raw_donors).__name__}, "
            f"{type(raw_amounts).__name__}), treating as empty"
        )
        return []

    entries = [
        DonorEntry(
            donor=donor,
            # A donor without a matching amount counts as 0
            amount=from_base_units(
                raw_amounts[idx] if idx < len(raw_amounts) else 0
            ),
        )
        for idx, donor in enumerate(raw_donors)
    ]
    entries.sort(key=lambda entry: entry.amount, reverse=True)
    return entries
