"""Outbound adapters (driven side)."""
