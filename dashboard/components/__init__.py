"""Reusable dashboard components."""

from dashboard.components.alert import AlertAction, render_alert
from dashboard.components.button import render_button
from dashboard.components.card import render_card

__all__ = ["AlertAction", "render_alert", "render_button", "render_card"]
