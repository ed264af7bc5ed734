import json
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from pathlib import Path


@dataclass
class DataConfig:
    path: str
    name: str
    location_col: str = "pcat"
    app_col: str = "acat"

    def get_category_cols(self) -> List[str]:
        return [self.location_col, self.app_col]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'name': self.name,
            'location_col': self.location_col,
            'app_col': self.app_col
        }


@dataclass
class MiningConfig:
    min_support: float = 0.02
    min_confidence: float = 0.8
    # 'location_to_app' or 'first_match'
    direction: str = 'location_to_app'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'min_support': self.min_support,
            'min_confidence': self.min_confidence,
            'direction': self.direction
        }


@dataclass
class ValidationConfig:
    test_ratio: float = 0.8
    rounds: int = 5
    random_state: Optional[int] = None
    enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'test_ratio': self.test_ratio,
            'rounds': self.rounds,
            'random_state': self.random_state,
            'enabled': self.enabled
        }


@dataclass
class StoreConfig:
    directory: str = "."
    filename: str = "apprecom_rules.json"

    def get_path(self) -> Path:
        return Path(self.directory) / self.filename

    def to_dict(self) -> Dict[str, Any]:
        return {'directory': self.directory, 'filename': self.filename}


@dataclass
class AppRecomConfig:
    mining: MiningConfig = field(default_factory=MiningConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    store: StoreConfig = field(default_factory=StoreConfig)

    @classmethod
    def default(cls) -> 'AppRecomConfig':
        return cls()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'AppRecomConfig':
        return cls(
            mining=MiningConfig(**config.get('mining', {})),
            validation=ValidationConfig(**config.get('validation', {})),
            store=StoreConfig(**config.get('store', {}))
        )

    @classmethod
    def load(cls, path: str) -> 'AppRecomConfig':
        with open(path) as f:
            return cls.from_dict(json.load(f))

    def save(self, path: str):
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'mining': self.mining.to_dict(),
            'validation': self.validation.to_dict(),
            'store': self.store.to_dict()
        }
