"""
Persistence of trained rule tables.

Stores are awaited by callers; file I/O runs in a worker thread so it never
blocks the event loop. Concurrent saves to one store are last-write-wins.
"""
import asyncio
import copy
import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

from apprecom.exceptions import RuleStoreError, RulesNotFoundError
from apprecom.experiments.config import StoreConfig
from apprecom.rule_mining.base import RuleTable

FORMAT_VERSION = 1
RULES_ENCODING = "utf-8"


def encode_rule_table(rule_table: RuleTable) -> Dict[str, Any]:
    return {'version': FORMAT_VERSION, 'rules': rule_table}


def decode_rule_table(payload: Any) -> RuleTable:
    """
    Decode a stored payload into a rule table.

    Accepts the versioned format ``{"version": 1, "rules": {...}}`` and the
    legacy flat ``{category: [categories]}`` mapping.
    """
    if not isinstance(payload, dict):
        raise RuleStoreError(f"Stored rules must be a JSON object, got {type(payload).__name__}")

    if 'version' in payload:
        if payload['version'] != FORMAT_VERSION:
            raise RuleStoreError(f"Unsupported rule format version: {payload['version']}")
        rules = payload.get('rules')
    else:
        rules = payload

    if not isinstance(rules, dict) or not all(
        isinstance(conclusions, list) and all(isinstance(c, str) for c in conclusions)
        for conclusions in rules.values()
    ):
        raise RuleStoreError("Stored rules must map categories to lists of categories")

    return {str(hyp): list(conclusions) for hyp, conclusions in rules.items()}


class RuleStore(ABC):
    """Key-value store for a rule table keyed by hypothesis category."""

    @abstractmethod
    async def save(self, rule_table: RuleTable) -> None:
        """Persist the rule table, replacing any stored one."""
        pass

    @abstractmethod
    async def load(self) -> RuleTable:
        """
        Load the stored rule table.

        Raises:
            RulesNotFoundError: nothing has been saved yet
            RuleStoreError: the store cannot be read
        """
        pass


class JsonRuleStore(RuleStore):
    """Rule table kept as a UTF-8 JSON file."""

    def __init__(
        self,
        directory: Union[str, Path] = ".",
        filename: str = "apprecom_rules.json",
        logger: Optional[logging.Logger] = None
    ):
        self.path = Path(directory) / filename
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: StoreConfig, logger: Optional[logging.Logger] = None) -> 'JsonRuleStore':
        path = config.get_path()
        return cls(path.parent, path.name, logger=logger)

    def _write(self, rule_table: RuleTable):
        payload = json.dumps(encode_rule_table(rule_table))
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Readers only ever see a complete file: write aside, then swap in
            with tempfile.NamedTemporaryFile(
                'w',
                encoding=RULES_ENCODING,
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix='.tmp',
                delete=False
            ) as f:
                tmp_path = f.name
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise RuleStoreError(f"Could not write rules to {self.path}: {e}") from e

    def _read(self) -> RuleTable:
        try:
            text = self.path.read_text(encoding=RULES_ENCODING)
        except FileNotFoundError as e:
            raise RulesNotFoundError(f"No rules found at {self.path}; train first") from e
        except OSError as e:
            raise RuleStoreError(f"Could not read rules from {self.path}: {e}") from e

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise RuleStoreError(f"Malformed rules file {self.path}: {e}") from e
        return decode_rule_table(payload)

    async def save(self, rule_table: RuleTable) -> None:
        await asyncio.to_thread(self._write, rule_table)
        self.logger.info("Saved rules for %d categories to %s", len(rule_table), self.path)

    async def load(self) -> RuleTable:
        rule_table = await asyncio.to_thread(self._read)
        self.logger.debug("Loaded rules for %d categories from %s", len(rule_table), self.path)
        return rule_table

    def __repr__(self):
        return f"JsonRuleStore(path='{self.path}')"


class InMemoryRuleStore(RuleStore):
    """Rule table held in process memory."""

    def __init__(self, rule_table: Optional[RuleTable] = None):
        self._rule_table = copy.deepcopy(rule_table)

    async def save(self, rule_table: RuleTable) -> None:
        self._rule_table = copy.deepcopy(rule_table)

    async def load(self) -> RuleTable:
        if self._rule_table is None:
            raise RulesNotFoundError("No rules have been saved to this store")
        return copy.deepcopy(self._rule_table)
