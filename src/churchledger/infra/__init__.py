"""Persistence wiring."""
