from .config import (
    DataConfig,
    MiningConfig,
    ValidationConfig,
    StoreConfig,
    AppRecomConfig
)
from .base import (
    load_data,
    load_observations,
    prepare_observations,
    run_rule_mining,
    create_miner
)
from .cross_validation import (
    CrossValidator,
    RoundResult,
    ValidationReport
)

__all__ = [
    'DataConfig',
    'MiningConfig',
    'ValidationConfig',
    'StoreConfig',
    'AppRecomConfig',
    'load_data',
    'load_observations',
    'prepare_observations',
    'run_rule_mining',
    'create_miner',
    'CrossValidator',
    'RoundResult',
    'ValidationReport'
]
