"""
Two-attribute rule miner for location and app categories.

Counts (location, app) itemsets, prunes them by support and derives directed
rules by confidence, where confidence compares the frequencies of the two
categories in a pool shared by both roles.
"""
import time
from typing import Dict, List, Tuple, Any, Optional
import logging

import pandas as pd

from apprecom.rule_mining.base import (
    AssociationRuleMiner, Direction, Itemset, Rule, RuleTable, check_threshold
)
from apprecom.rule_mining.itemsets import count_itemsets, prune_itemsets, category_frequencies
from apprecom.postprocessing.rule import aggregate_rules, to_rule_table, summarize_rules


def generate_rules(
    data: pd.DataFrame,
    itemset_counts: Dict[Itemset, int],
    min_confidence: float,
    direction: Direction = Direction.LOCATION_TO_APP
) -> List[Rule]:
    """
    Derive directed rules from pruned itemsets.

    Confidence of hyp -> con is freq(con) / freq(hyp), with frequencies taken
    over the whole of ``data``, not only the pruned itemsets.

    Args:
        data: Observation frame the frequencies are computed over
        itemset_counts: Pruned itemset counts
        min_confidence: Minimum confidence (inclusive)
        direction: Which rule directions to test

    Returns:
        Rules in itemset order, at most one per itemset
    """
    check_threshold('min_confidence', min_confidence)
    direction = Direction.parse(direction)

    frequencies = category_frequencies(data)
    length = len(data)

    rules = []
    for itemset, count in itemset_counts.items():
        hyp, con = itemset
        hyp_freq = frequencies[hyp]
        con_freq = frequencies[con]
        support = count / length

        confidence = con_freq / hyp_freq
        if confidence >= min_confidence:
            rules.append(Rule(hyp, con, count, confidence=confidence, support=support))
        elif direction is Direction.FIRST_MATCH:
            reverse_confidence = hyp_freq / con_freq
            if reverse_confidence >= min_confidence:
                rules.append(Rule(con, hyp, count, confidence=reverse_confidence, support=support))

    return rules


class CategoryRuleMiner(AssociationRuleMiner):
    """
    Support/confidence miner over (location category, app category) pairs.

    Every call recomputes from the data it is given; the miner keeps no
    results between calls.
    """

    def __init__(
        self,
        min_support: float = 0.02,
        min_confidence: float = 0.8,
        direction: str = Direction.LOCATION_TO_APP,
        logger: Optional[logging.Logger] = None,
        **kwargs
    ):
        """
        Initialize the miner.

        Args:
            min_support: Minimum itemset support (0.0 - 1.0)
            min_confidence: Minimum rule confidence (0.0 - 1.0)
            direction: 'location_to_app' or 'first_match'
            logger: Logger notified after counting, pruning and aggregation
        """
        super().__init__(min_support, min_confidence, logger=logger, **kwargs)
        self.direction = Direction.parse(direction)

    def mine_itemsets(self, data: pd.DataFrame) -> Tuple[Dict[Itemset, int], Dict[str, Any]]:
        start_time = time.time()

        counts = count_itemsets(data)
        self.logger.debug("Counted %d distinct itemsets over %d observations", len(counts), len(data))

        frequent = prune_itemsets(counts, len(data), self.min_support)
        self.logger.debug(
            "Kept %d/%d itemsets with support >= %s", len(frequent), len(counts), self.min_support
        )

        stats = {
            'num_observations': len(data),
            'num_itemsets': len(counts),
            'num_frequent_itemsets': len(frequent),
            'execution_time': time.time() - start_time,
            'algorithm': 'CategoryApriori',
            'mode': 'itemsets'
        }

        return frequent, stats

    def mine_rules(self, data: pd.DataFrame) -> Tuple[List[Rule], Dict[str, Any]]:
        start_time = time.time()

        frequent, itemset_stats = self.mine_itemsets(data)
        rules = generate_rules(data, frequent, self.min_confidence, self.direction)
        self.logger.debug(
            "Derived %d rules with confidence >= %s (%s)",
            len(rules), self.min_confidence, self.direction.value
        )

        stats = {
            'num_observations': itemset_stats['num_observations'],
            'num_itemsets': itemset_stats['num_itemsets'],
            'num_frequent_itemsets': itemset_stats['num_frequent_itemsets'],
            **summarize_rules(rules),
            'execution_time': time.time() - start_time,
            'algorithm': 'CategoryApriori',
            'direction': self.direction.value,
            'mode': 'rules'
        }

        return rules, stats

    def mine_rule_table(self, data: pd.DataFrame) -> Tuple[RuleTable, List[Rule], Dict[str, Any]]:
        """
        Mine rules and aggregate them into a ranked rule table.

        Returns:
            Tuple of (rule_table, rules, stats)
        """
        rules, stats = self.mine_rules(data)
        rule_table = to_rule_table(aggregate_rules(rules))
        self.logger.debug("Aggregated rules for %d hypothesis categories", len(rule_table))

        stats['num_hypotheses'] = len(rule_table)
        return rule_table, rules, stats

    def __repr__(self):
        return (f"CategoryRuleMiner(min_support={self.min_support}, "
                f"min_confidence={self.min_confidence}, direction='{self.direction.value}')")
