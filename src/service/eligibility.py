"""Donation eligibility computed on the server from the last completed donation."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from config.config import ELIGIBILITY_INTERVAL_DAYS


@dataclass(frozen=True)
class Eligibility:
    last_donation: Optional[date]
    next_eligible: Optional[date]
    days_until_eligible: Optional[int]
    is_eligible: bool


def next_eligible_date(
    last_donation: Optional[date],
    interval_days: int = ELIGIBILITY_INTERVAL_DAYS,
) -> Optional[date]:
    if last_donation is None:
        return None
    return last_donation + timedelta(days=interval_days)


def compute_eligibility(
    last_donation: Optional[date],
    today: Optional[date] = None,
    interval_days: int = ELIGIBILITY_INTERVAL_DAYS,
) -> Eligibility:
    """Return the eligibility facts for a donor.

    A donor who never donated is eligible and has no next date. Otherwise the
    donor becomes eligible on ``last_donation + interval_days``; on that day
    ``days_until_eligible`` is 0 and ``is_eligible`` is True.
    """
    today = today or date.today()
    nxt = next_eligible_date(last_donation, interval_days)
    if nxt is None:
        return Eligibility(None, None, None, True)

    days = (nxt - today).days
    return Eligibility(
        last_donation=last_donation,
        next_eligible=nxt,
        days_until_eligible=max(days, 0),
        is_eligible=days <= 0,
    )
