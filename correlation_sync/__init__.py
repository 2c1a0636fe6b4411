"""Sync correlation rule definitions to a SIEM manager API."""

__version__ = "0.1.0"
