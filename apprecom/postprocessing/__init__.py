from .rule import aggregate_rules, to_rule_table, summarize_rules

__all__ = [
    'aggregate_rules',
    'to_rule_table',
    'summarize_rules'
]
