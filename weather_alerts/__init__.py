"""Weather threshold alerting service."""

__version__ = "0.1.0"
