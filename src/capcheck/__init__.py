"""Capcheck - rule-driven validation of capability applications."""

__version__ = "0.3.0"
