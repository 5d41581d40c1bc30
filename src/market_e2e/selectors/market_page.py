"""Role-based locators for the market index page."""
from __future__ import annotations


class MarketSelectors:
    """Accessibility roles and keys used by the market search flow."""

    search_input_role = "textbox"
    results_role = "main"
    submit_key = "Enter"
