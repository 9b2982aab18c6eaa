"""Blood group compatibility used to list requests a donor can serve."""

from typing import Set

# Donor groups accepted by each recipient group
COMPATIBLE_DONORS = {
    "O-": {"O-"},
    "O+": {"O-", "O+"},
    "A-": {"O-", "A-"},
    "A+": {"O-", "O+", "A-", "A+"},
    "B-": {"O-", "B-"},
    "B+": {"O-", "O+", "B-", "B+"},
    "AB-": {"O-", "A-", "B-", "AB-"},
    "AB+": {"O-", "O+", "A-", "A+", "B-", "B+", "AB-", "AB+"},
}

BLOOD_GROUPS = tuple(COMPATIBLE_DONORS)


def normalize_blood_group(value: str | None) -> str:
    """Upper-case and strip a blood group; ``" ab+ "`` becomes ``"AB+"``."""
    return (value or "").strip().upper().replace(" ", "")


def recipient_groups_for(donor_group: str | None) -> Set[str]:
    """Recipient groups that can receive blood from ``donor_group``."""
    donor_group = normalize_blood_group(donor_group)
    return {
        recipient
        for recipient, donors in COMPATIBLE_DONORS.items()
        if donor_group in donors
    }


def can_donate_to(donor_group: str | None, recipient_group: str | None) -> bool:
    return normalize_blood_group(donor_group) in COMPATIBLE_DONORS.get(
        normalize_blood_group(recipient_group), set()
    )
