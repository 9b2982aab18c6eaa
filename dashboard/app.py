"""
Donor Dashboard - Streamlit Application

Shows a donor's profile status, eligibility and recent donations, kept
current by a polling controller that lives in the Streamlit session.

Usage: streamlit run dashboard/app.py
"""

import os
import sys
import time
from dataclasses import replace
from pathlib import Path

import streamlit as st

# Make src/ and the repository root importable when run from a checkout
repo_root = Path(__file__).resolve().parent.parent
for path in (repo_root / "src", repo_root):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from client.controller import DashboardConfig, DonorDashboardController
from dashboard.components import AlertAction, render_alert
from dashboard.components.donor_home import render_screen
from dashboard.components.layout import apply_custom_css
from utils.logging import get_logger

logger = get_logger(__name__)

CONTROLLER_KEY = "_donor_dashboard_controller"
ALERT_KEY = "_donor_dashboard_alert"
SIGNED_OUT_KEY = "_donor_dashboard_signed_out"
LIVE_UPDATES_KEY = "live_updates"


def get_controller() -> DonorDashboardController:
    """Return the session's controller, creating it on first run.

    Streamlit gives no signal when a browser session ends, so the controller
    runs without its own timer thread and the script polls it on each rerun.
    """
    if CONTROLLER_KEY not in st.session_state:
        config = DashboardConfig.from_yaml(os.getenv("BLOODLINK_DASHBOARD_CONFIG"))
        st.session_state[CONTROLLER_KEY] = DonorDashboardController(
            replace(config, enable_polling=False)
        )
    return st.session_state[CONTROLLER_KEY]


def show_alert(title: str, message: str, alert_type: str = "info", actions=None) -> None:
    st.session_state[ALERT_KEY] = {
        "title": title,
        "message": message,
        "alert_type": alert_type,
        "actions": actions,
    }


def dismiss_alert() -> None:
    st.session_state.pop(ALERT_KEY, None)


def navigate(route: str) -> None:
    """Navigation is handled by the host app; here it shows a placeholder."""
    show_alert(
        route,
        f"{route} feature will be implemented here. This is a placeholder for the full implementation.",
    )


def confirm_logout(controller: DonorDashboardController) -> None:
    def logout():
        controller.unmount()
        st.session_state[SIGNED_OUT_KEY] = True

    show_alert(
        "Logout",
        "Are you sure you want to logout?",
        alert_type="warning",
        actions=[
            AlertAction("Cancel", style="cancel"),
            AlertAction("Logout", on_press=logout, style="destructive"),
        ],
    )


def main():
    """Main dashboard application."""
    st.set_page_config(
        page_title="Donor Dashboard",
        page_icon="🩸",
        layout="centered",
    )
    apply_custom_css()

    controller = get_controller()

    st.sidebar.title("🩸 Donor")
    user_id = st.sidebar.number_input(
        "Donor ID", min_value=1, step=1,
        value=controller.user_id or 1,
    )
    if user_id != controller.user_id:
        controller.set_user(int(user_id))

    if not controller.mounted:
        if st.session_state.get(SIGNED_OUT_KEY):
            if st.sidebar.button("Sign in"):
                st.session_state[SIGNED_OUT_KEY] = False
                st.rerun()
            st.info("Signed out. Use the sidebar to open the dashboard.")
            return
        controller.mount()

    st.session_state.setdefault(LIVE_UPDATES_KEY, True)
    auto_refresh = st.sidebar.checkbox(
        f"🔄 Live updates ({controller.config.poll_interval_sec:g}s)",
        key=LIVE_UPDATES_KEY,
    )
    if auto_refresh:
        controller.poll_once()
    if st.sidebar.button("🔄 Refresh Now"):
        controller.focus()
    st.sidebar.button("Logout", on_click=confirm_logout, args=(controller,))

    alert = st.session_state.get(ALERT_KEY)
    if alert:
        render_alert(True, on_dismiss=dismiss_alert, **alert)

    render_screen(controller.snapshot(), navigate, user_name=f"Donor #{controller.user_id}")

    if auto_refresh and alert is None:
        # Next rerun polls again and picks up results that landed meanwhile
        time.sleep(controller.config.poll_interval_sec)
        st.rerun()


if __name__ == "__main__":
    main()
