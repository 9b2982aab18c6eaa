"""
Donor home screen.

Turns a :class:`client.state.DashboardState` snapshot into the dashboard:
profile status card, blood type and donation count, eligibility, quick
actions, recent donations and the impact note. The ``*_view`` helpers decide
which branch is shown; `render_screen()` draws it with Streamlit.
"""

from typing import Any, Callable, Dict, List, Optional

import streamlit as st

from client.state import (
    STATUS_APPROVED,
    STATUS_NONE,
    STATUS_PENDING,
    STATUS_REJECTED,
    DashboardState,
    DonorInfo,
)
from config.config import UNREAD_BADGE_CAP
from dashboard.components.button import render_button
from dashboard.components.card import render_card
from dashboard.components.layout import (
    DANGER_COLOR,
    INFO_COLOR,
    MUTED_COLOR,
    SUCCESS_COLOR,
    WARNING_COLOR,
    colored_text,
    format_badge_count,
    pluralize,
)

LIVES_PER_DONATION = 3

# Navigation targets handed to ``on_navigate``
ROUTE_PROFILE_FORM = "DonorProfileForm"
ROUTE_AVAILABLE_REQUESTS = "AvailableRequests"
ROUTE_REQUEST_HISTORY = "RequestHistory"
ROUTE_NOTIFICATIONS = "Notifications"


def profile_status_view(status: str, remarks: str = "") -> Dict[str, Any]:
    """Pick the profile status card; any unrecognised status shows as loading."""
    if status == STATUS_NONE:
        return {
            "branch": "incomplete",
            "icon": "⚠️",
            "color": WARNING_COLOR,
            "title": "Complete Your Profile",
            "subtitle": "Complete your profile to start accepting blood requests",
            "action": ROUTE_PROFILE_FORM,
        }
    if status == STATUS_PENDING:
        return {
            "branch": "pending",
            "icon": "⏳",
            "color": INFO_COLOR,
            "title": "Profile Under Review",
            "subtitle": "Your profile is pending admin approval",
            "action": None,
        }
    if status == STATUS_REJECTED:
        return {
            "branch": "rejected",
            "icon": "❌",
            "color": DANGER_COLOR,
            "title": "Profile Rejected",
            "subtitle": remarks or "Please update your profile",
            "action": ROUTE_PROFILE_FORM,
        }
    if status == STATUS_APPROVED:
        return {
            "branch": "approved",
            "icon": "✅",
            "color": SUCCESS_COLOR,
            "title": "Profile Approved ✓",
            "subtitle": "You can now accept blood requests",
            "action": ROUTE_PROFILE_FORM,
        }
    return {
        "branch": "loading",
        "icon": "⏳",
        "color": MUTED_COLOR,
        "title": "Loading profile...",
        "subtitle": "",
        "action": None,
    }


def role_label(status: str) -> str:
    return {
        STATUS_APPROVED: "Approved Donor",
        STATUS_PENDING: "Pending Approval",
        STATUS_REJECTED: "Profile Rejected",
    }.get(status, "Donor")


def shows_countdown(info: DonorInfo) -> bool:
    """Countdown badge only while not eligible with a positive day count and a next date."""
    return (
        not info.is_eligible
        and info.days_until_eligible is not None
        and info.days_until_eligible > 0
        and bool(info.next_eligible)
    )


def eligibility_view(info: DonorInfo) -> Optional[Dict[str, Any]]:
    """
    Eligibility card contents, or None until a blood type is known.

    Eligibility is the server's ``is_eligible`` flag; the day count only
    feeds the countdown badge.
    """
    if not info.blood_type:
        return None

    if info.is_eligible:
        subtitle = "You can donate blood today"
    elif info.last_donation and info.next_eligible:
        subtitle = f"Last donated on {info.last_donation}"
    else:
        subtitle = "Complete your profile to start donating"

    countdown = None
    if shows_countdown(info):
        countdown = {
            "next_eligible": info.next_eligible,
            "text": f"{info.days_until_eligible} days remaining",
        }

    return {
        "eligible": info.is_eligible,
        "title": "Eligible to Donate!" if info.is_eligible else "Not Eligible Yet",
        "subtitle": subtitle,
        "color": SUCCESS_COLOR if info.is_eligible else WARNING_COLOR,
        "countdown": countdown,
    }


def recent_donations_view(state: DashboardState) -> Dict[str, Any]:
    """Exactly one of loading, list or empty."""
    if state.loading_donations:
        return {"mode": "loading", "items": []}
    if state.recent_donations:
        items = [
            {
                "location": d.location,
                "date": d.date,
                "units": f"{d.units} unit",
                "blood_group": d.blood_group,
            }
            for d in state.recent_donations
        ]
        return {"mode": "list", "items": items}
    return {"mode": "empty", "items": []}


def available_requests_text(count: int) -> str:
    if count > 0:
        noun = "request" if count == 1 else "requests"
        return f"{count} {noun} need your help"
    return "No active requests available"


def impact_text(donated_count: int) -> str:
    lives = donated_count * LIVES_PER_DONATION
    return (
        f"Thank you for your {pluralize(donated_count, 'donation')}! "
        f"You've potentially saved up to {lives} lives."
    )


def _render_profile_status(state: DashboardState, on_navigate: Callable[[str], None]) -> Dict[str, Any]:
    view = profile_status_view(state.profile_status, state.profile_remarks)
    with st.container(border=True, key="profile-status"):
        if view["branch"] == "loading":
            with st.spinner(view["title"]):
                st.caption(view["title"])
        else:
            st.markdown(f"{view['icon']} {colored_text(view['title'], view['color'], bold=True)}")
            st.caption(view["subtitle"])
            if view["action"]:
                label = "Edit profile" if view["branch"] == "approved" else "Open profile form"
                render_button(label, lambda: on_navigate(view["action"]),
                              variant="secondary", key="profile-status-action")
    return view


def _render_donor_card(state: DashboardState) -> None:
    info = state.donor_info
    if not info.blood_type:
        return
    col_type, col_count = st.columns(2)
    with col_type:
        st.markdown(f"<span class='blood-type-circle'>{info.blood_type}</span>", unsafe_allow_html=True)
        st.caption("Blood Type")
    with col_count:
        st.metric("Donations", state.donated_count)


def _render_eligibility(info: DonorInfo) -> None:
    view = eligibility_view(info)
    if view is None:
        return
    with st.container(border=True, key="eligibility"):
        icon = "✅" if view["eligible"] else "🕐"
        st.markdown(f"{icon} {colored_text(view['title'], view['color'], bold=True)}")
        st.caption(view["subtitle"])
        if view["countdown"]:
            st.write(f"📅 Next Eligible: **{view['countdown']['next_eligible']}**")
            st.markdown(
                f"<span class='countdown-badge'>{view['countdown']['text']}</span>",
                unsafe_allow_html=True,
            )


def _render_quick_actions(state: DashboardState, on_navigate: Callable[[str], None]) -> None:
    st.subheader("Quick Actions")

    def requests_body():
        st.caption(available_requests_text(state.available_requests_count))
        badge = format_badge_count(state.available_requests_count)
        label = f"🩸 Browse Blood Requests ({badge})" if badge else "🩸 Browse Blood Requests"
        render_button(label, lambda: on_navigate(ROUTE_AVAILABLE_REQUESTS), key="action-requests")

    render_card("Browse Blood Requests", requests_body, key="card-requests")
    render_button("📋 Donation History", lambda: on_navigate(ROUTE_REQUEST_HISTORY),
                  variant="secondary", key="action-history")
    render_button("👤 Update Profile", lambda: on_navigate(ROUTE_PROFILE_FORM),
                  variant="secondary", key="action-profile")


def _render_recent_donations(state: DashboardState) -> Dict[str, Any]:
    view = recent_donations_view(state)

    def body():
        if view["mode"] == "loading":
            st.caption("Loading donations...")
        elif view["mode"] == "list":
            for item in view["items"]:
                col_loc, col_units = st.columns([3, 1])
                with col_loc:
                    st.write(f"🩸 **{item['location']}**")
                    st.caption(item["date"])
                with col_units:
                    st.write(item["units"])
        else:
            st.write("No donations yet")
            st.caption("Complete your first donation to see it here")

    render_card("Recent Donations", body, key="card-donations")
    return view


def render_screen(
    state: DashboardState,
    on_navigate: Callable[[str], None],
    user_name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Render the donor home screen for one state snapshot.

    Returns:
        Dict describing which branches were rendered.
    """
    header_left, header_right = st.columns([4, 1])
    with header_left:
        st.caption("DONOR")
        st.title("Donor Dashboard")
        if user_name:
            st.caption(f"{user_name} · {role_label(state.profile_status)}")
    with header_right:
        badge = format_badge_count(state.unread_count, UNREAD_BADGE_CAP)
        render_button(f"🔔 {badge}" if badge else "🔔",
                      lambda: on_navigate(ROUTE_NOTIFICATIONS),
                      variant="secondary", key="header-notifications")

    profile_view = _render_profile_status(state, on_navigate)
    _render_donor_card(state)
    _render_eligibility(state.donor_info)
    _render_quick_actions(state, on_navigate)
    donations_view = _render_recent_donations(state)

    def impact_body():
        st.write(impact_text(state.donated_count))
        st.caption("One blood donation can save up to 3 lives. Keep donating to make a difference!")

    render_card("Your Impact 💝", impact_body, key="card-impact")

    st.caption("Blood Donation Management System · Donor Portal v1.0")

    sections: List[str] = ["profile_status", "quick_actions", "recent_donations", "impact"]
    if state.donor_info.blood_type:
        sections[1:1] = ["donor_card", "eligibility"]
    return {
        "profile_branch": profile_view["branch"],
        "donations_mode": donations_view["mode"],
        "sections": sections,
    }
