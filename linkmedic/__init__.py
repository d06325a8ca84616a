"""LinkMedic — prioritised, explained broken-link reports."""

__version__ = "0.1.0"
