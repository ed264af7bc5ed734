"""
AppRecom: app category recommendations for a location category.

``train`` mines rules over the full set of observations, optionally estimates
the error rate by cross-validation, and persists the resulting rule table.
``recommend`` reads the persisted table back and returns the ranked app
categories for a location category.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Tuple, Any, Optional, Iterable, Callable
import logging

import numpy as np

from apprecom.exceptions import InvalidInputError
from apprecom.rule_mining.base import Rule, check_threshold
from apprecom.experiments.base import Observations, prepare_observations, run_rule_mining
from apprecom.experiments.config import AppRecomConfig, MiningConfig
from apprecom.experiments.cross_validation import CrossValidator, ValidationReport
from apprecom.storage.rule_store import RuleStore, JsonRuleStore


@dataclass(frozen=True)
class TrainingResult:
    """
    Outcome of a train call. The rule table is what was persisted.

    The result is read-only: the rule table, stats and parameters are copied
    into read-only mappings and conclusion lists become tuples.
    """
    rule_table: Mapping[str, Tuple[str, ...]]
    rules: Tuple[Rule, ...]
    validation: Optional[ValidationReport]
    stats: Mapping[str, Any] = field(default_factory=dict)
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        rule_table = {hyp: tuple(conclusions) for hyp, conclusions in self.rule_table.items()}
        object.__setattr__(self, 'rule_table', MappingProxyType(rule_table))
        object.__setattr__(self, 'rules', tuple(self.rules))
        object.__setattr__(self, 'stats', MappingProxyType(dict(self.stats)))
        object.__setattr__(self, 'parameters', MappingProxyType(dict(self.parameters)))

    @property
    def mean_error_rate(self) -> Optional[float]:
        return self.validation.mean_error_rate if self.validation else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rule_table': {hyp: list(conclusions) for hyp, conclusions in self.rule_table.items()},
            'rules': [r.to_dict() for r in self.rules],
            'validation': self.validation.to_dict() if self.validation else None,
            'stats': dict(self.stats),
            'parameters': dict(self.parameters)
        }


class AppRecom:
    """
    Train association rules between location and app categories and serve
    recommendations from them.

    Example:
        >>> recom = AppRecom(JsonRuleStore("./rules"))
        >>> result = await recom.train(observations, min_support=0.02, min_confidence=0.8)
        >>> await recom.recommend("cafe")
        ['maps', 'music']
    """

    def __init__(
        self,
        store: Optional[RuleStore] = None,
        config: Optional[AppRecomConfig] = None,
        logger: Optional[logging.Logger] = None,
        shuffle: Optional[Callable[[np.ndarray], np.ndarray]] = None
    ):
        """
        Args:
            store: Where rule tables are persisted. Defaults to a JSON file
                at the location given by ``config.store``.
            config: Default thresholds, validation and store settings
            logger: Logger called at mining and validation checkpoints
            shuffle: Optional shuffle used by cross-validation
        """
        self.config = config or AppRecomConfig.default()
        self.store = store or JsonRuleStore.from_config(self.config.store, logger=logger)
        self.logger = logger or logging.getLogger(__name__)
        self.shuffle = shuffle

    async def train(
        self,
        observations: Observations,
        min_support: Optional[float] = None,
        min_confidence: Optional[float] = None,
        test_ratio: Optional[float] = None,
        location_col: str = 'pcat',
        app_col: str = 'acat'
    ) -> TrainingResult:
        """
        Mine and persist the rule table for a set of observations.

        Args:
            observations: DataFrame, Observation objects or mappings with
                location and app category fields
            min_support: Minimum itemset support (0.0 - 1.0)
            min_confidence: Minimum rule confidence (0.0 - 1.0)
            test_ratio: Share of observations used for training in each
                cross-validation round (0.0 - 1.0, exclusive)
            location_col: Field holding the location category
            app_col: Field holding the app category

        Returns:
            TrainingResult holding the persisted rule table

        Raises:
            InvalidInputError: empty observations or out-of-range thresholds
            RuleStoreError: the rule table could not be saved
        """
        mining = MiningConfig(
            min_support=self.config.mining.min_support if min_support is None else min_support,
            min_confidence=self.config.mining.min_confidence if min_confidence is None else min_confidence,
            direction=self.config.mining.direction
        )
        validation_config = self.config.validation
        test_ratio = validation_config.test_ratio if test_ratio is None else test_ratio

        check_threshold('min_support', mining.min_support)
        check_threshold('min_confidence', mining.min_confidence)

        data = prepare_observations(observations, location_col, app_col)
        if len(data) == 0:
            raise InvalidInputError("Cannot train on an empty set of observations")

        validation = None
        if validation_config.enabled:
            validator = CrossValidator(
                min_support=mining.min_support,
                min_confidence=mining.min_confidence,
                direction=mining.direction,
                test_ratio=test_ratio,
                rounds=validation_config.rounds,
                random_state=validation_config.random_state,
                shuffle=self.shuffle,
                logger=self.logger
            )
            validation = validator.run(data)

        rule_table, rules, stats = run_rule_mining(data, mining, self.logger)
        self.logger.info(
            "Trained %d rules for %d location categories from %d observations",
            len(rules), len(rule_table), len(data)
        )

        await self.store.save(rule_table)

        parameters = {
            **mining.to_dict(),
            'test_ratio': test_ratio,
            'rounds': validation_config.rounds if validation_config.enabled else 0
        }
        return TrainingResult(
            rule_table=rule_table,
            rules=tuple(rules),
            validation=validation,
            stats=stats,
            parameters=parameters
        )

    async def recommend(self, location_category: str) -> List[str]:
        """
        Ranked app categories for a location category.

        Unknown categories give an empty list.

        Raises:
            RuleStoreError: the stored rules cannot be read (including when
                nothing has been trained yet)
        """
        rule_table = await self.store.load()
        return list(rule_table.get(location_category, []))

    async def recommend_many(self, location_categories: Iterable[str]) -> Dict[str, List[str]]:
        """Recommendations for several location categories from one store read."""
        rule_table = await self.store.load()
        return {
            category: list(rule_table.get(category, []))
            for category in location_categories
        }

    def __repr__(self):
        return f"AppRecom(store={self.store!r}, mining={self.config.mining!r})"
