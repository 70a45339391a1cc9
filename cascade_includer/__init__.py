"""Locate files across ordered directories, then load or concatenate them."""

from __future__ import annotations

from .collector import DIR_ORDER, FILE_ORDER, InvalidOrder, PathCollector  # noqa: F401
from .config import AppConfig, load_config  # noqa: F401
from .evaluators import TemplateEvaluator, evaluate_python  # noqa: F401
from .fragments import FragmentSyntax  # noqa: F401
