"""Playwright smoke tests for the market web app."""
