"""Composition root for wiring dependencies."""
