"""Freight Tracker domain core: weather impact, ETA, shipment lifecycle and reports."""

__version__ = "1.0.0"
