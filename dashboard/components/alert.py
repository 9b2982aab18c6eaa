"""
Alert dialog component.

Shows an icon, title, message and a row of action buttons. Pressing an
action runs that action's callback and then the shared dismissal callback.
Use `render_alert()` inside a Streamlit page; the layout and press logic are
plain functions so they can be exercised without a running app.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import streamlit as st

from dashboard.components.layout import PRIMARY_COLOR, WARNING_COLOR

ACTION_STYLES = ("default", "cancel", "destructive")
ALERT_TYPES = ("success", "error", "warning", "info")


@dataclass(frozen=True)
class AlertAction:
    text: str
    on_press: Optional[Callable[[], None]] = None
    style: str = "default"


DEFAULT_ACTIONS: Tuple[AlertAction, ...] = (AlertAction("OK"),)


def alert_icon(alert_type: str) -> Tuple[str, str]:
    """Return ``(icon, colour)`` for an alert type; unknown types render as info."""
    if alert_type == "success":
        return "✓", PRIMARY_COLOR
    if alert_type == "error":
        return "!", PRIMARY_COLOR
    if alert_type == "warning":
        return "⚠", WARNING_COLOR
    return "ℹ", PRIMARY_COLOR


def action_layout(actions: Sequence[AlertAction]) -> List[Dict[str, Any]]:
    """
    Lay out the action row.

    One action gets a single full-width button; N actions share the row in
    equal parts. An empty sequence yields no buttons.
    """
    count = len(actions)
    if count == 0:
        return []
    width = 1.0 / count
    return [
        {
            "text": action.text,
            "style": action.style if action.style in ACTION_STYLES else "default",
            "width": width,
            "full_width": count == 1,
        }
        for action in actions
    ]


def press_action(action: AlertAction, on_dismiss: Optional[Callable[[], None]] = None) -> None:
    """Run the action callback, then dismiss."""
    if action.on_press is not None:
        action.on_press()
    if on_dismiss is not None:
        on_dismiss()


def _button_type(style: str) -> str:
    return "secondary" if style == "cancel" else "primary"


def render_alert(
    visible: bool,
    title: str,
    message: str,
    actions: Optional[Sequence[AlertAction]] = None,
    alert_type: str = "info",
    on_dismiss: Optional[Callable[[], None]] = None,
    key: str = "alert",
) -> Dict[str, Any]:
    """
    Render the alert when ``visible``.

    Returns:
        Dict with the rendered state, for callers that want to log or test it.
    """
    if not visible:
        return {"visible": False, "buttons": 0}

    if actions is None:
        actions = DEFAULT_ACTIONS
    icon, color = alert_icon(alert_type)
    layout = action_layout(actions)

    with st.container(border=True, key=f"{key}-container"):
        st.markdown(
            f"<div style='text-align:center;font-size:2rem;color:{color}'>{icon}</div>",
            unsafe_allow_html=True,
        )
        st.markdown(f"<h4 style='text-align:center'>{title}</h4>", unsafe_allow_html=True)
        st.markdown(f"<p style='text-align:center;color:#666'>{message}</p>", unsafe_allow_html=True)

        if layout:
            columns = st.columns([item["width"] for item in layout])
            for index, (column, item, action) in enumerate(zip(columns, layout, actions)):
                with column:
                    label = item["text"]
                    if item["style"] == "destructive":
                        label = f":red[{label}]"
                    st.button(
                        label,
                        key=f"{key}-action-{index}",
                        on_click=press_action,
                        args=(action, on_dismiss),
                        type=_button_type(item["style"]),
                        width="stretch",
                    )

    return {"visible": True, "buttons": len(layout), "type": alert_type, "color": color}
