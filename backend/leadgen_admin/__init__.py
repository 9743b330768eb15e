"""Lead generation admin API: integrations, setup wizard and leads."""

__version__ = "1.0.0"
