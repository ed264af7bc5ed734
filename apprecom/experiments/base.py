from collections.abc import Mapping
from pathlib import Path
from typing import List, Dict, Any, Tuple, Optional, Iterable, Union
import logging

import pandas as pd

from apprecom.exceptions import InvalidInputError
from apprecom.rule_mining.base import Observation, Rule, RuleTable, LOCATION_COL, APP_COL
from apprecom.rule_mining.category_miner import CategoryRuleMiner

from .config import DataConfig, MiningConfig

Observations = Union[pd.DataFrame, Iterable[Union[Observation, Mapping]]]


def load_data(config: DataConfig) -> pd.DataFrame:
    path = Path(config.path)
    if path.suffix == '.csv':
        return pd.read_csv(path)
    elif path.suffix in ['.xlsx', '.xls']:
        return pd.read_excel(path)
    elif path.suffix == '.parquet':
        return pd.read_parquet(path)
    elif path.suffix == '.json':
        return pd.read_json(path)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")


def prepare_observations(
    observations: Observations,
    location_col: str = 'pcat',
    app_col: str = 'acat'
) -> pd.DataFrame:
    """
    Normalize observations into a frame with the two category columns.

    Accepts a DataFrame, or an iterable of Observation objects and/or mappings
    such as ``{"pname": ..., "pcat": ..., "aname": ..., "acat": ...}``.
    Display name fields are dropped.

    Args:
        observations: Raw observations
        location_col: Column/key holding the location category
        app_col: Column/key holding the app category

    Returns:
        DataFrame with LOCATION_COL and APP_COL string columns
    """
    if isinstance(observations, pd.DataFrame):
        frame = observations
    else:
        records = []
        for obs in observations:
            if isinstance(obs, Observation):
                records.append({location_col: obs.location_category, app_col: obs.app_category})
            elif isinstance(obs, Mapping):
                records.append(obs)
            else:
                raise InvalidInputError(f"Unsupported observation type: {type(obs).__name__}")
        frame = pd.DataFrame(records)

    if len(frame) == 0:
        return pd.DataFrame({
            LOCATION_COL: pd.Series(dtype=object),
            APP_COL: pd.Series(dtype=object)
        })

    missing = [c for c in (location_col, app_col) if c not in frame.columns]
    if missing:
        raise InvalidInputError(f"Observations are missing category columns: {missing}")

    prepared = pd.DataFrame({
        LOCATION_COL: frame[location_col],
        APP_COL: frame[app_col]
    }).reset_index(drop=True)

    if prepared.isna().any().any():
        raise InvalidInputError("Observations with a missing location or app category")

    return prepared.astype(str)


def load_observations(config: DataConfig) -> pd.DataFrame:
    return prepare_observations(load_data(config), *config.get_category_cols())


def create_miner(config: MiningConfig, logger: Optional[logging.Logger] = None) -> CategoryRuleMiner:
    return CategoryRuleMiner(
        min_support=config.min_support,
        min_confidence=config.min_confidence,
        direction=config.direction,
        logger=logger
    )


def run_rule_mining(
    data: pd.DataFrame,
    config: MiningConfig,
    logger: Optional[logging.Logger] = None
) -> Tuple[RuleTable, List[Rule], Dict[str, Any]]:
    miner = create_miner(config, logger)
    return miner.mine_rule_table(data)
