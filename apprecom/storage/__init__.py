from .rule_store import (
    RuleStore,
    JsonRuleStore,
    InMemoryRuleStore,
    encode_rule_table,
    decode_rule_table
)

__all__ = [
    'RuleStore',
    'JsonRuleStore',
    'InMemoryRuleStore',
    'encode_rule_table',
    'decode_rule_table'
]
