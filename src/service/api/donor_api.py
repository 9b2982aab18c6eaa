"""API service backing the donor dashboard.

Provides REST API endpoints for:
- Liveness and health checks
- Donor details and eligibility
- Recent donation history
- Donor profile approval status
- Donation statistics and available blood requests
- Unread notification counts
"""

import sqlite3
from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from config.config import (
    LIVENESS_TEXT,
    RECENT_DONATIONS_LIMIT,
    RECENT_DONATIONS_MAX_LIMIT,
)
from service.eligibility import compute_eligibility
from service.matching import recipient_groups_for
from service.storage.database import DonorDatabase, get_database
from utils.logging import get_logger

logger = get_logger(__name__)


# Pydantic models for API responses
class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str


class DonorDetailsResponse(BaseModel):
    """Blood group and server-computed eligibility for a donor."""
    success: bool
    bloodGroup: Optional[str]
    lastDonation: Optional[str]
    nextEligible: Optional[str]
    daysUntilEligible: Optional[int]
    isEligible: bool


class DonationItem(BaseModel):
    date: str
    location: str
    units: int
    bloodGroup: Optional[str] = None


class RecentDonationsResponse(BaseModel):
    success: bool
    donations: List[DonationItem]


class ProfileItem(BaseModel):
    approval_status: str
    admin_remarks: Optional[str] = None


class DonorProfileResponse(BaseModel):
    success: bool
    profile: ProfileItem


class DonorStatsResponse(BaseModel):
    success: bool
    donatedCount: int
    totalUnits: int


class AvailableRequestItem(BaseModel):
    id: int
    bloodGroup: str
    units: int
    hospital: str
    urgency: str
    createdAt: str


class AvailableRequestsResponse(BaseModel):
    success: bool
    requests: List[AvailableRequestItem]


class UnreadCountResponse(BaseModel):
    success: bool
    count: int


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan."""
    logger.info("Starting donor API service...")
    yield
    logger.info("Shutting down donor API service...")


app = FastAPI(
    title="Blood Donation Donor API",
    description="Read API consumed by the donor dashboard",
    version="1.0.0",
    lifespan=lifespan
)


def get_db() -> DonorDatabase:
    """Dependency to get the donor database."""
    return get_database()


def _not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"success": False, "message": message})


def _storage_failure(what: str, error: Exception) -> HTTPException:
    logger.error(f"Error getting {what}: {error}")
    return HTTPException(status_code=500, detail=str(error))


@app.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness endpoint."""
    return LIVENESS_TEXT


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="OK")


@app.get("/api/donor/{donor_id}/details", response_model=DonorDetailsResponse)
def get_donor_details(donor_id: int, db: DonorDatabase = Depends(get_db)):
    """Blood group, last donation and eligibility for a donor."""
    try:
        donor = db.get_donor(donor_id)
        if donor is None:
            return _not_found(f"Donor {donor_id} not found")
        last = db.get_last_donation_date(donor_id)
    except sqlite3.Error as e:
        raise _storage_failure("donor details", e)

    eligibility = compute_eligibility(last, today=date.today())
    return DonorDetailsResponse(
        success=True,
        bloodGroup=donor.get("blood_group"),
        lastDonation=last.isoformat() if last else None,
        nextEligible=eligibility.next_eligible.isoformat() if eligibility.next_eligible else None,
        daysUntilEligible=eligibility.days_until_eligible,
        isEligible=eligibility.is_eligible,
    )


@app.get("/api/donor/{donor_id}/recent-donations", response_model=RecentDonationsResponse)
def get_recent_donations(
    donor_id: int,
    limit: int = Query(RECENT_DONATIONS_LIMIT, ge=1, le=RECENT_DONATIONS_MAX_LIMIT),
    db: DonorDatabase = Depends(get_db),
):
    """Most recent completed donations, newest first."""
    try:
        if db.get_donor(donor_id) is None:
            return _not_found(f"Donor {donor_id} not found")
        rows = db.get_recent_donations(donor_id, limit)
    except sqlite3.Error as e:
        raise _storage_failure("recent donations", e)

    return RecentDonationsResponse(
        success=True,
        donations=[
            DonationItem(
                date=row["donated_on"],
                location=row["location"],
                units=row["units"],
                bloodGroup=row.get("blood_group"),
            )
            for row in rows
        ],
    )


@app.get("/api/profile/donor/{donor_id}", response_model=DonorProfileResponse)
def get_donor_profile(donor_id: int, db: DonorDatabase = Depends(get_db)):
    """Approval status of the donor's submitted profile."""
    try:
        profile = db.get_profile(donor_id)
    except sqlite3.Error as e:
        raise _storage_failure("donor profile", e)

    if profile is None:
        return _not_found("Donor profile not found")
    return DonorProfileResponse(success=True, profile=ProfileItem(**profile))


@app.get("/api/blood-requests/donor/{donor_id}/stats", response_model=DonorStatsResponse)
def get_donor_stats(donor_id: int, db: DonorDatabase = Depends(get_db)):
    """Donation count and total units donated."""
    try:
        count, units = db.get_donation_stats(donor_id)
    except sqlite3.Error as e:
        raise _storage_failure("donor stats", e)
    return DonorStatsResponse(success=True, donatedCount=count, totalUnits=units)


@app.get("/api/blood-requests/available/{donor_id}", response_model=AvailableRequestsResponse)
def get_available_requests(donor_id: int, db: DonorDatabase = Depends(get_db)):
    """Open requests the donor's blood group can serve.

    Only donors with an approved profile and a known blood group see requests.
    """
    try:
        donor = db.get_donor(donor_id)
        profile = db.get_profile(donor_id)
        if donor is None or profile is None or profile["approval_status"] != "approved":
            return AvailableRequestsResponse(success=True, requests=[])
        rows = db.get_open_requests(recipient_groups_for(donor.get("blood_group")))
    except sqlite3.Error as e:
        raise _storage_failure("available requests", e)

    return AvailableRequestsResponse(
        success=True,
        requests=[
            AvailableRequestItem(
                id=row["id"],
                bloodGroup=row["blood_group"],
                units=row["units"],
                hospital=row["hospital"],
                urgency=row["urgency"],
                createdAt=row["created_at"],
            )
            for row in rows
        ],
    )


@app.get("/api/notifications/{user_id}/unread-count", response_model=UnreadCountResponse)
def get_unread_count(user_id: int, db: DonorDatabase = Depends(get_db)):
    try:
        count = db.count_unread_notifications(user_id)
    except sqlite3.Error as e:
        raise _storage_failure("unread notification count", e)
    return UnreadCountResponse(success=True, count=count)
