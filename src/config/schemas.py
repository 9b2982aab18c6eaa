"""Schema definitions for the JSON payloads exchanged by backend and dashboard."""

from typing import List, Optional, TypedDict


class DonationRecord(TypedDict, total=False):
    date: str
    location: str
    units: int
    bloodGroup: Optional[str]


class DonorDetailsResponse(TypedDict):
    success: bool
    bloodGroup: Optional[str]
    lastDonation: Optional[str]     # YYYY-MM-DD
    nextEligible: Optional[str]     # YYYY-MM-DD
    daysUntilEligible: Optional[int]
    isEligible: bool


class RecentDonationsResponse(TypedDict):
    success: bool
    donations: List[DonationRecord]


class DonorProfile(TypedDict, total=False):
    approval_status: str            # pending | approved | rejected
    admin_remarks: Optional[str]


class DonorProfileResponse(TypedDict, total=False):
    success: bool
    profile: DonorProfile
    message: str


class DonorStatsResponse(TypedDict):
    success: bool
    donatedCount: int
    totalUnits: int


class AvailableRequest(TypedDict):
    id: int
    bloodGroup: str
    units: int
    hospital: str
    urgency: str
    createdAt: str


class AvailableRequestsResponse(TypedDict):
    success: bool
    requests: List[AvailableRequest]


class UnreadCountResponse(TypedDict):
    success: bool
    count: int
