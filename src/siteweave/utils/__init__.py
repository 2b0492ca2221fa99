"""Utility helpers for siteweave."""
