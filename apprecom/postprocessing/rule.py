from typing import Dict, List, Any

from apprecom.rule_mining.base import Rule, RuleTable


def aggregate_rules(rules: List[Rule]) -> Dict[str, List[Rule]]:
    """
    Groups rules by hypothesis and ranks each group by count.

    Groups appear in the order their hypothesis is first emitted. Within a
    group, rules are sorted descending by count; equal counts keep emission
    order (sorted() is stable with reverse=True).

    Args:
        rules: Rules in emission order

    Returns:
        Dict mapping hypothesis category to its ranked rules
    """
    grouped: Dict[str, List[Rule]] = {}
    for rule in rules:
        grouped.setdefault(rule.hypothesis, []).append(rule)

    return {
        hypothesis: sorted(group, key=lambda r: r.count, reverse=True)
        for hypothesis, group in grouped.items()
    }


def to_rule_table(grouped: Dict[str, List[Rule]]) -> RuleTable:
    """Strips counts, leaving only the ranked conclusion categories."""
    return {
        hypothesis: [rule.conclusion for rule in group]
        for hypothesis, group in grouped.items()
    }


def summarize_rules(rules: List[Rule]) -> Dict[str, Any]:
    """
    Average statistics over a list of rules.

    Returns:
        Dict with num_rules, average_support and average_confidence
    """
    count = len(rules)
    if count == 0:
        return {
            'num_rules': 0,
            'average_support': 0.0,
            'average_confidence': 0.0
        }

    return {
        'num_rules': count,
        'average_support': round(sum(r.support for r in rules) / count, 3),
        'average_confidence': round(sum(r.confidence for r in rules) / count, 3)
    }
