"""Blocker Insights: blocker tracking and synthesized manager reports."""

__version__ = "0.1.0"
