"""Dashboard state records built from donor API responses."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# Profile approval statuses shown on the dashboard
STATUS_LOADING = "loading"
STATUS_NONE = "none"
STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
KNOWN_PROFILE_STATUSES = (STATUS_NONE, STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

# How the last profile lookup ended; both non-found outcomes display as "none"
OUTCOME_FOUND = "found"
OUTCOME_NOT_FOUND = "not_found"
OUTCOME_FAILED = "failed"


@dataclass(frozen=True)
class DonorInfo:
    """Blood type and eligibility, copied verbatim from the details endpoint."""
    blood_type: Optional[str] = None
    last_donation: Optional[str] = None
    next_eligible: Optional[str] = None
    days_until_eligible: Optional[int] = None
    is_eligible: bool = False

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "DonorInfo":
        days = data.get("daysUntilEligible")
        return cls(
            blood_type=data.get("bloodGroup"),
            last_donation=data.get("lastDonation"),
            next_eligible=data.get("nextEligible"),
            days_until_eligible=int(days) if days is not None else None,
            is_eligible=bool(data.get("isEligible", False)),
        )


@dataclass(frozen=True)
class DonationRecord:
    date: str
    location: str
    units: int
    blood_group: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DonationRecord":
        return cls(
            date=str(data.get("date", "")),
            location=str(data.get("location", "")),
            units=int(data.get("units", 0)),
            blood_group=data.get("bloodGroup"),
        )


@dataclass(frozen=True)
class DashboardState:
    """Everything the donor home screen renders.

    Instances are immutable; the controller swaps in a new one on every
    applied result, so a snapshot handed to the view never changes under it.
    """
    profile_status: str = STATUS_LOADING
    profile_remarks: str = ""
    profile_outcome: Optional[str] = None
    donated_count: int = 0
    donor_info: DonorInfo = field(default_factory=DonorInfo)
    recent_donations: Tuple[DonationRecord, ...] = ()
    loading_donations: bool = True
    available_requests_count: int = 0
    unread_count: int = 0
