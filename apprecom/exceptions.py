"""
Exception types raised by AppRecom.
"""


class AppRecomError(Exception):
    """Base class for all AppRecom errors."""


class InvalidInputError(AppRecomError, ValueError):
    """
    Raised for inputs the miner cannot work with: an empty dataset, missing or
    null category fields, or thresholds outside their valid range.
    """


class RuleStoreError(AppRecomError, OSError):
    """Raised when the rule store cannot be read or written."""


class RulesNotFoundError(RuleStoreError):
    """Raised when the rule store holds no trained rules yet."""
