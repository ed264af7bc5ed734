"""
AppRecom: recommends app categories for a location category from mined
location/app co-occurrence rules.
"""
from .exceptions import AppRecomError, InvalidInputError, RuleStoreError, RulesNotFoundError
from .rule_mining.base import Observation, Itemset, Rule, Direction
from .rule_mining.category_miner import CategoryRuleMiner
from .experiments.config import AppRecomConfig, MiningConfig, ValidationConfig, StoreConfig
from .experiments.cross_validation import CrossValidator, ValidationReport
from .storage.rule_store import RuleStore, JsonRuleStore, InMemoryRuleStore
from .recommender import AppRecom, TrainingResult

__version__ = "0.1.0"

__all__ = [
    'AppRecom',
    'TrainingResult',
    'AppRecomConfig',
    'MiningConfig',
    'ValidationConfig',
    'StoreConfig',
    'Observation',
    'Itemset',
    'Rule',
    'Direction',
    'CategoryRuleMiner',
    'CrossValidator',
    'ValidationReport',
    'RuleStore',
    'JsonRuleStore',
    'InMemoryRuleStore',
    'AppRecomError',
    'InvalidInputError',
    'RuleStoreError',
    'RulesNotFoundError'
]
