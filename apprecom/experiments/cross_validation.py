"""
Cross-validation of the category rule miner.

Repeatedly splits the observations at random into training and testing parts,
mines a rule table from the training part and measures how many testing
observations the table fails to explain. The estimate is informational; it
never feeds back into the committed rule table.
"""
import math
import numbers
from dataclasses import dataclass
from typing import Dict, List, Tuple, Any, Callable, Optional, Union
import logging

import numpy as np
import pandas as pd
from tqdm.auto import tqdm

from apprecom.exceptions import InvalidInputError
from apprecom.rule_mining.base import Direction, RuleTable, LOCATION_COL, APP_COL, check_threshold, is_real

from .base import run_rule_mining
from .config import MiningConfig


def round_half_up(value: float, digits: int = 2) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


@dataclass(frozen=True)
class RoundResult:
    round: int
    train_size: int
    test_size: int
    considered: int
    unexplained: int
    error_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'round': self.round,
            'train_size': self.train_size,
            'test_size': self.test_size,
            'considered': self.considered,
            'unexplained': self.unexplained,
            'error_rate': self.error_rate
        }


@dataclass(frozen=True)
class ValidationReport:
    rounds: Tuple[RoundResult, ...]
    mean_error_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rounds': [r.to_dict() for r in self.rounds],
            'mean_error_rate': self.mean_error_rate
        }


def evaluate_rule_table(rule_table: RuleTable, test_data: pd.DataFrame) -> Tuple[int, int]:
    """
    Count testing observations covered by the rule table and those it misses.

    Observations whose location category has no entry are skipped.

    Returns:
        Tuple of (considered, unexplained)
    """
    considered = 0
    unexplained = 0
    for location, app in zip(test_data[LOCATION_COL], test_data[APP_COL]):
        conclusions = rule_table.get(location)
        if not conclusions:
            continue
        considered += 1
        if app not in conclusions:
            unexplained += 1
    return considered, unexplained


def error_rate(considered: int, unexplained: int) -> float:
    if considered == 0:
        return 0.0
    return round_half_up(unexplained / considered)


class CrossValidator:
    """
    Random train/test split validation of the category rule miner.

    Args:
        min_support: Minimum itemset support (0.0 - 1.0)
        min_confidence: Minimum rule confidence (0.0 - 1.0)
        direction: Rule direction policy, see Direction
        test_ratio: Share of observations used for training, in (0, 1)
        rounds: Number of random splits
        random_state: Seed or numpy Generator for the default shuffle
        shuffle: Optional callable taking an index array and returning a
            permutation of it; replaces the default shuffle
        logger: Logger for per-round results
        show_progress: Show a tqdm progress bar over rounds
    """

    def __init__(
        self,
        min_support: float = 0.02,
        min_confidence: float = 0.8,
        direction: str = 'location_to_app',
        test_ratio: float = 0.8,
        rounds: int = 5,
        random_state: Union[int, np.random.Generator, None] = None,
        shuffle: Optional[Callable[[np.ndarray], np.ndarray]] = None,
        logger: Optional[logging.Logger] = None,
        show_progress: bool = False
    ):
        check_threshold('min_support', min_support)
        check_threshold('min_confidence', min_confidence)
        if not is_real(test_ratio) or not 0.0 < test_ratio < 1.0:
            raise InvalidInputError(f"test_ratio must be within (0, 1), got {test_ratio!r}")
        if not isinstance(rounds, numbers.Integral) or isinstance(rounds, bool) or rounds < 1:
            raise InvalidInputError(f"rounds must be an integer of at least 1, got {rounds!r}")

        self.mining_config = MiningConfig(
            min_support=min_support,
            min_confidence=min_confidence,
            direction=Direction.parse(direction).value
        )
        self.test_ratio = test_ratio
        self.rounds = rounds
        self.logger = logger or logging.getLogger(__name__)
        self.show_progress = show_progress

        rng = np.random.default_rng(random_state)
        self.shuffle = shuffle or rng.permutation

    def training_size(self, length: int) -> int:
        # One more than the rounded share, never more than the data holds
        return min(math.floor(length * self.test_ratio + 0.5) + 1, length)

    def split(self, data: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
        order = np.asarray(self.shuffle(np.arange(len(data))))
        num_training = self.training_size(len(data))

        train = data.iloc[order[:num_training]].reset_index(drop=True)
        test = data.iloc[order[num_training:]].reset_index(drop=True)
        return train, test

    def run_round(self, data: pd.DataFrame, round_idx: int) -> RoundResult:
        train, test = self.split(data)
        rule_table, _, _ = run_rule_mining(train, self.mining_config, self.logger)
        considered, unexplained = evaluate_rule_table(rule_table, test)

        return RoundResult(
            round=round_idx,
            train_size=len(train),
            test_size=len(test),
            considered=considered,
            unexplained=unexplained,
            error_rate=error_rate(considered, unexplained)
        )

    def run(self, data: pd.DataFrame) -> ValidationReport:
        """
        Run all rounds over the prepared observations.

        Returns:
            ValidationReport with per-round results and the mean error rate
        """
        if len(data) == 0:
            raise InvalidInputError("Cannot cross-validate an empty dataset")

        round_iter = range(1, self.rounds + 1)
        if self.show_progress:
            round_iter = tqdm(round_iter, desc="Cross-validation", unit="round")

        results: List[RoundResult] = []
        for round_idx in round_iter:
            result = self.run_round(data, round_idx)
            self.logger.info(
                "Round %d: train=%d test=%d considered=%d unexplained=%d error=%.2f",
                result.round, result.train_size, result.test_size,
                result.considered, result.unexplained, result.error_rate
            )
            results.append(result)

        mean_error = round_half_up(float(np.mean([r.error_rate for r in results])))
        self.logger.info("Average unexplained rate over %d rounds: %.2f", self.rounds, mean_error)

        return ValidationReport(rounds=tuple(results), mean_error_rate=mean_error)

    def __repr__(self):
        return (f"CrossValidator(test_ratio={self.test_ratio}, rounds={self.rounds}, "
                f"min_support={self.mining_config.min_support}, "
                f"min_confidence={self.mining_config.min_confidence})")
