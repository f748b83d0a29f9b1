"""
Error taxonomy for the advisory engine.

Per-candidate input problems raise InvalidInputError; the rankers catch it and
score that candidate 0 so a single bad catalog entry cannot abort a batch.
Configuration and catalog problems propagate to the caller.
"""


class AdvisoryError(Exception):
    """Base class for advisory engine errors."""


class InvalidInputError(AdvisoryError, ValueError):
    """Non-numeric, missing, or out-of-domain input (NaN, pH 15, negative rainfall)."""


class EmptyCatalogError(AdvisoryError):
    """
    Reserved name for "ranking called with zero candidates".
    The rankers return an empty list instead of raising it.
    """


class WeightConfigError(AdvisoryError, ValueError):
    """Scoring weights are negative, sum to zero, or name an unknown component."""


class CatalogError(AdvisoryError, RuntimeError):
    """Reference catalog is missing or contains no valid records."""


class MissingOptionalDataWarning(UserWarning):
    """Optional input (soil data) absent; weights were renormalized."""
