"""Storefront data access layer and Backend Aggregation Service."""

__version__ = "0.1.0"
