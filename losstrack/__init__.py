"""Inventory loss tracking: fixed-width product import and per-reason loss export."""

__version__ = "1.0.0"
