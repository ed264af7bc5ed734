"""
Itemset counting, support pruning and category frequencies.
"""
from typing import Dict

import pandas as pd

from apprecom.exceptions import InvalidInputError
from apprecom.rule_mining.base import Itemset, LOCATION_COL, APP_COL, check_threshold


def count_itemsets(data: pd.DataFrame) -> Dict[Itemset, int]:
    """
    Count each (location, app) pair in the data.

    Args:
        data: Prepared observation frame

    Returns:
        Itemset counts in the order each itemset is first observed.
        Empty data gives an empty dict.
    """
    if len(data) == 0:
        return {}

    # sort=False keeps groups in order of first appearance
    sizes = data.groupby([LOCATION_COL, APP_COL], sort=False).size()
    return {Itemset(loc, app): int(count) for (loc, app), count in sizes.items()}


def prune_itemsets(
    itemset_counts: Dict[Itemset, int],
    length: int,
    min_support: float
) -> Dict[Itemset, int]:
    """
    Keep the itemsets whose support (count / length) is at least min_support.

    Args:
        itemset_counts: Itemset counts from count_itemsets
        length: Number of observations the counts were taken over
        min_support: Minimum support (inclusive)

    Returns:
        Retained itemsets with their counts, original order preserved
    """
    if length <= 0:
        raise InvalidInputError(f"Cannot compute support over {length} observations")
    check_threshold('min_support', min_support)

    return {
        itemset: count
        for itemset, count in itemset_counts.items()
        if count / length >= min_support
    }


def category_frequencies(data: pd.DataFrame) -> Dict[str, int]:
    """
    Count, for every category value, the observations it appears in.

    Location and app categories share one pool: a value counts once per
    observation in which it is either the location or the app category.
    """
    locations = data[LOCATION_COL]
    apps = data[APP_COL]
    pooled = pd.concat([locations, apps[apps != locations]], ignore_index=True)
    return {value: int(count) for value, count in pooled.value_counts(sort=False).items()}
