"""Example backend client for the Promoted Delivery API."""

__version__ = "0.1.0"
