"""Competitor product/price resolution over live retailer search pages."""

__version__ = "1.0.0"
