"""Scheduling and record keeping for a social transport service."""

__version__ = "0.1.0"
