from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .collector import DIR_ORDER, PathCollector
from .evaluators import Evaluator, TemplateEvaluator, evaluate_python
from .fragments import FragmentSyntax

CONFIG_ENV = "CASCADE_INCLUDER_CONFIG"
DEFAULT_CONFIG = Path("configs/cascade_includer.yml")


class CollectorConfig(BaseModel):
    dirs: List[str] = Field(default_factory=list, description="Directories searched, in order.")
    files: List[str] = Field(default_factory=list, description="File names looked up in each directory.")
    vars: Dict[str, Any] = Field(default_factory=dict)
    cache_file: Optional[str] = None
    order: Literal["dir_order", "file_order"] = DIR_ORDER
    evaluator: Literal["python", "template"] = "python"

    @field_validator("dirs", "files", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value


class AppConfig(BaseModel):
    base_dir: Path = Path(".")
    collector: CollectorConfig = CollectorConfig()
    syntax: FragmentSyntax = FragmentSyntax()
    output: Optional[Path] = None

    def resolve(self, value: str | Path) -> Path:
        path = Path(value)
        return path if path.is_absolute() else (self.base_dir / path)

    def build_evaluator(self) -> Evaluator:
        if self.collector.evaluator == "template":
            return TemplateEvaluator()
        return evaluate_python

    def build_collector(self) -> PathCollector:
        cfg = self.collector
        cache_file = str(self.resolve(cfg.cache_file)) if cfg.cache_file else None
        return PathCollector(
            dirs=[str(self.resolve(directory)) for directory in cfg.dirs],
            files=cfg.files,
            vars=dict(cfg.vars),
            cache_file=cache_file,
            evaluator=self.build_evaluator(),
            syntax=self.syntax,
        )


def _load_from_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".json":
        data = json.loads(text)
    elif suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(text) or {}
    else:
        raise ValueError(f"Unsupported config extension: {path}")
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {path}")
    return data


def load_config(explicit_path: Optional[Path] = None) -> AppConfig:
    """Load configuration from file or environment."""

    candidate: Optional[Path] = explicit_path
    if candidate is None:
        env_path = os.environ.get(CONFIG_ENV)
        if env_path:
            candidate = Path(env_path)
    if candidate is None:
        candidate = DEFAULT_CONFIG
    data = _load_from_file(candidate) if candidate.exists() else {}
    base_path = Path(data.get("base_dir") or ".")
    if not base_path.is_absolute():
        base_path = candidate.parent / base_path if candidate.exists() else Path.cwd() / base_path
    data["base_dir"] = str(base_path.resolve())
    return AppConfig(**data)


__all__ = ["AppConfig", "CollectorConfig", "load_config"]
