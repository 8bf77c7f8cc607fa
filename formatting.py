"""Display formatting for amounts and percentage changes."""

from __future__ import annotations

DISPLAY_CAP_PCT = 100.0


def format_amount(value: float, currency: str | None = None) -> str:
    """Format an amount with thousands separators, prefixed by the currency code."""
    text = f"{float(value):,.2f}"
    return f"{currency} {text}" if currency else text


def exceeds_display_cap(value: float) -> bool:
    return abs(value) > DISPLAY_CAP_PCT


def format_percentage_change(value: float) -> str:
    """Signed percentage for display; changes beyond 100% show as '+100%+'/'-100%+'."""
    if exceeds_display_cap(value):
        return "+100%+" if value > 0 else "-100%+"
    if value == 0:
        return "0.0%"
    if value > 0:
        return f"+{value:,.1f}%"
    return f"{value:,.1f}%"
