"""Exception hierarchy shared by every LinkMedic layer."""

from __future__ import annotations


class LinkMedicError(Exception):
    """Base class for all errors raised by LinkMedic."""


class ConfigurationError(LinkMedicError):
    """A required setting (e.g. an AI provider credential) is missing."""


class TransportError(LinkMedicError):
    """A network or provider call failed before a usable answer came back."""


class ValidationError(LinkMedicError):
    """An AI response could not be parsed into a JSON object."""


class PersistenceError(LinkMedicError):
    """A storage read or write failed."""
