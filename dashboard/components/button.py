"""Reusable button with primary and secondary variants."""

from typing import Any, Callable, Dict, Optional

import streamlit as st

VARIANTS = ("primary", "secondary")


def button_view(title: str, variant: str = "primary") -> Dict[str, Any]:
    """Describe how a button is drawn; unknown variants fall back to primary."""
    if variant not in VARIANTS:
        variant = "primary"
    return {"label": title, "type": variant, "full_width": True}


def render_button(
    title: str,
    on_press: Optional[Callable[[], None]] = None,
    variant: str = "primary",
    key: Optional[str] = None,
) -> bool:
    """Draw the button; ``on_press`` runs once per click before the rerun."""
    view = button_view(title, variant)
    return st.button(
        view["label"],
        key=key,
        on_click=on_press,
        type=view["type"],
        width="stretch",
    )
