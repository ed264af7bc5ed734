"""
Base types and interfaces for location/app category rule mining.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple, Any, NamedTuple, Optional
import logging
import math
import numbers

import pandas as pd

from apprecom.exceptions import InvalidInputError

# Canonical column names of a prepared observation frame
LOCATION_COL = 'location_category'
APP_COL = 'app_category'

RuleTable = Dict[str, List[str]]


@dataclass(frozen=True)
class Observation:
    """
    A single (location category, app category) observation.

    Display names are carried along but never read by the miner.
    """
    location_category: str
    app_category: str
    location_name: Optional[str] = None
    app_name: Optional[str] = None


class Itemset(NamedTuple):
    """An observed (hypothesis, conclusion) category pair."""
    hypothesis: str
    conclusion: str


@dataclass(frozen=True)
class Rule:
    """
    A directed rule hypothesis -> conclusion.

    ``count`` is the co-occurrence count of the itemset that produced the rule
    and drives ranking. ``confidence`` and ``support`` are kept for reporting.
    """
    hypothesis: str
    conclusion: str
    count: int
    confidence: float = 0.0
    support: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hypothesis': self.hypothesis,
            'conclusion': self.conclusion,
            'count': self.count,
            'confidence': self.confidence,
            'support': self.support
        }


class Direction(str, Enum):
    """
    Which rule directions are tested for an itemset (location, app).

    LOCATION_TO_APP: only location -> app is tested.
    FIRST_MATCH: location -> app is tested first; app -> location is tested
        only when the first direction fails. At most one rule per itemset.

    LOCATION_TO_APP is the default: on 5x (cafe, maps), 3x (cafe, weather) and
    2x (gym, fitness) with min_support 0.2 and min_confidence 0.6 it gives
    {cafe: [maps], gym: [fitness]}. FIRST_MATCH also emits weather -> cafe
    there (confidence 8/3), because cafe -> weather (3/8) fails first.
    """
    LOCATION_TO_APP = 'location_to_app'
    FIRST_MATCH = 'first_match'

    @classmethod
    def parse(cls, value) -> 'Direction':
        try:
            return cls(value)
        except ValueError:
            valid = [d.value for d in cls]
            raise InvalidInputError(f"Direction must be one of {valid}, got '{value}'")


def is_real(value: Any) -> bool:
    """True for real, non-NaN numbers. Booleans do not count."""
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


def check_threshold(name: str, value: float):
    """Reject thresholds that are not real numbers within [0, 1]."""
    if not is_real(value):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    if not 0.0 <= value <= 1.0:
        raise InvalidInputError(f"{name} must be within [0, 1], got {value}")


class AssociationRuleMiner(ABC):
    """
    Base class for association rule miners over observation frames.

    Miners return ``(result, stats)`` tuples where ``stats`` is a dict of
    mining statistics (counts, execution time, algorithm name).
    """

    def __init__(
        self,
        min_support: float = 0.02,
        min_confidence: float = 0.8,
        logger: Optional[logging.Logger] = None,
        **kwargs
    ):
        check_threshold('min_support', min_support)
        check_threshold('min_confidence', min_confidence)
        self.min_support = min_support
        self.min_confidence = min_confidence
        self.logger = logger or logging.getLogger(__name__)
        self.config = kwargs

    @abstractmethod
    def mine_itemsets(self, data: pd.DataFrame) -> Tuple[Dict[Itemset, int], Dict[str, Any]]:
        """
        Count and prune itemsets.

        Args:
            data: Prepared observation frame

        Returns:
            Tuple of (itemset_counts, stats) where itemset_counts maps each
            retained itemset to its occurrence count, in first-seen order.
        """
        pass

    @abstractmethod
    def mine_rules(self, data: pd.DataFrame) -> Tuple[List[Rule], Dict[str, Any]]:
        """
        Mine directed rules.

        Args:
            data: Prepared observation frame

        Returns:
            Tuple of (rules, stats)
        """
        pass
