"""Job application tracker: query, analytics and export over local records."""

__version__ = "0.1.0"
