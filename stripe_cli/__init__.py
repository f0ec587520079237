"""Stripe CLI."""

__version__ = "1.19.4"
