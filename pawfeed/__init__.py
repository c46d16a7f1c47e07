"""Notification feed cache for the pet-sitting marketplace client."""

__version__ = "0.1.0"
