"""
File Problem Store: Infrastructure adapter for a single on-disk blob.

The blob holds two keys, ``problems`` and ``settings``, as the browser host
kept them. JSON by default; ``.yaml`` / ``.yml`` paths are read and written
as YAML.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cadence.domain.constants import PROBLEMS_KEY, SETTINGS_KEY
from cadence.domain.errors import StoreError
from cadence.domain.models import Problem
from cadence.domain.ports import ProblemStore

from .records import ProblemRecord

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}
SUPPORTED_SUFFIXES = YAML_SUFFIXES | {".json"}


class FileProblemStore(ProblemStore):
    """
    Reads and writes the problem blob at ``path``.

    A missing file is an empty store; it is created on first save.
    """

    def __init__(self, path: Path):
        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise StoreError(f"Unsupported store format '{path.suffix}' for {path}")
        self.path = path

    @property
    def is_yaml(self) -> bool:
        return self.path.suffix.lower() in YAML_SUFFIXES

    def load_problems(self) -> list[Problem]:
        raw = self._read().get(PROBLEMS_KEY) or []
        if not isinstance(raw, list):
            raise StoreError(f"'{PROBLEMS_KEY}' in {self.path} is not a list")

        try:
            problems = [ProblemRecord.model_validate(item).to_domain() for item in raw]
        except ValidationError as e:
            raise StoreError(f"Malformed problem in {self.path}: {e}") from e

        logger.debug(f"Loaded {len(problems)} problems from {self.path}")
        return problems

    def save_problems(self, problems: list[Problem]) -> None:
        blob = self._read()
        blob[PROBLEMS_KEY] = [ProblemRecord.from_domain(p).dump() for p in problems]
        self._write(blob)
        logger.debug(f"Saved {len(problems)} problems to {self.path}")

    def load_settings(self) -> dict[str, Any] | None:
        settings = self._read().get(SETTINGS_KEY)
        if settings is not None and not isinstance(settings, dict):
            raise StoreError(f"'{SETTINGS_KEY}' in {self.path} is not an object")
        return settings

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return {}

        try:
            blob = yaml.safe_load(text) if self.is_yaml else json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise StoreError(f"Could not parse {self.path}: {e}") from e

        if not isinstance(blob, dict):
            raise StoreError(f"{self.path} does not contain an object")
        return blob

    def _write(self, blob: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.is_yaml:
            text = yaml.safe_dump(blob, sort_keys=False, allow_unicode=True)
        else:
            text = json.dumps(blob, indent=2, ensure_ascii=False)
        # The old blob stays intact until the new one is fully written
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(self.path)
