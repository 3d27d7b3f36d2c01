"""Shared helpers for address handling."""
