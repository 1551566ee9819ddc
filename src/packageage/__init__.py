"""packageage: package freshness advisories for install commands."""

__version__ = "0.1.0"
