"""
Shared layout helpers for dashboard components.

Provides the colour palette, small formatting helpers and custom CSS.
"""

from typing import Optional

import streamlit as st

PRIMARY_COLOR = "#DC143C"
WARNING_COLOR = "#FF9800"
INFO_COLOR = "#2196F3"
SUCCESS_COLOR = "#4CAF50"
DANGER_COLOR = "#F44336"
MUTED_COLOR = "#999999"


def format_badge_count(count: int, cap: int = 99) -> Optional[str]:
    """
    Format a counter for a badge.

    Returns None when there is nothing to show, and ``"99+"`` style text
    above ``cap``.
    """
    if count <= 0:
        return None
    return f"{cap}+" if count > cap else str(count)


def pluralize(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def colored_text(text: str, color: str, bold: bool = False) -> str:
    """Markdown snippet rendering ``text`` in ``color``."""
    body = f"**{text}**" if bold else text
    return f":{_streamlit_color(color)}[{body}]"


def _streamlit_color(color: str) -> str:
    # Streamlit markdown only supports named colours
    return {
        PRIMARY_COLOR: "red",
        DANGER_COLOR: "red",
        WARNING_COLOR: "orange",
        INFO_COLOR: "blue",
        SUCCESS_COLOR: "green",
        MUTED_COLOR: "gray",
    }.get(color, "gray")


def apply_custom_css() -> None:
    """Apply custom CSS styling for the mobile-width layout."""
    st.markdown("""
    <style>
    .block-container {
        max-width: 480px;
        padding-top: 1rem;
    }

    .blood-type-circle {
        display: inline-block;
        width: 64px;
        height: 64px;
        line-height: 64px;
        border-radius: 32px;
        background-color: #DC143C;
        color: #fff;
        font-size: 1.4rem;
        font-weight: bold;
        text-align: center;
    }

    .countdown-badge {
        display: inline-block;
        padding: 0.2rem 0.6rem;
        border-radius: 1rem;
        background-color: #FFF3E0;
        color: #E65100;
        font-weight: 600;
    }
    </style>
    """, unsafe_allow_html=True)
