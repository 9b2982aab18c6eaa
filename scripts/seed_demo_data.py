#!/usr/bin/env python3
"""
Seed the donor database with demo donors, donations, requests and notifications.

Usage: python scripts/seed_demo_data.py [--db PATH]
"""

import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

# Add src to Python path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from config.config import DATABASE_PATH
from service.storage.database import DonorDatabase
from utils.logging import get_logger

logger = get_logger(__name__)


def seed(db: DonorDatabase, today: date) -> dict:
    """Insert one donor per profile state plus open requests."""
    approved = db.add_donor("Asha Karki", blood_group="O+", email="asha@example.org")
    db.upsert_profile(approved, "approved")
    for days_ago, location in ((30, "City Blood Bank"), (150, "Red Cross Center"), (260, "Teaching Hospital")):
        db.add_donation(approved, today - timedelta(days=days_ago), location, units=1, blood_group="O+")
    db.add_notification(approved, "New O+ request near you")
    db.add_notification(approved, "Thank you for your last donation", is_read=True)

    eligible = db.add_donor("Bikash Rai", blood_group="A-")
    db.upsert_profile(eligible, "approved")
    db.add_donation(eligible, today - timedelta(days=120), "Community Camp", blood_group="A-")

    pending = db.add_donor("Chandra Lama", blood_group="B+")
    db.upsert_profile(pending, "pending")

    rejected = db.add_donor("Deepa Shah", blood_group="AB-")
    db.upsert_profile(rejected, "rejected", admin_remarks="ID document is unreadable")

    no_profile = db.add_donor("Eshan Thapa")

    db.add_blood_request("O+", "City Hospital", units=2, urgency="urgent")
    db.add_blood_request("A+", "Teaching Hospital")
    db.add_blood_request("AB+", "Maternity Ward", urgency="critical")
    db.add_blood_request("B-", "Trauma Center")

    return {
        "approved": approved,
        "eligible": eligible,
        "pending": pending,
        "rejected": rejected,
        "no_profile": no_profile,
    }


def main():
    parser = argparse.ArgumentParser(description="Seed demo donor data")
    parser.add_argument("--db", default=str(DATABASE_PATH), help="SQLite database path")
    args = parser.parse_args()

    donors = seed(DonorDatabase(args.db), date.today())
    for label, donor_id in donors.items():
        logger.info(f"Seeded {label} donor with id {donor_id}")


if __name__ == "__main__":
    main()
