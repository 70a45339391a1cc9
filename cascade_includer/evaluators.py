"""Fragment evaluators used by :meth:`PathCollector.load`.

An evaluator is any callable ``evaluator(path, bindings)``. It executes the
fragment at ``path`` with each binding exposed by name, without access to the
caller's locals. The identity names ``__file__`` and ``__dirname__`` always
describe the fragment itself and are never taken from ``bindings``.
"""

from __future__ import annotations

import os
import runpy
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from jinja2.sandbox import SandboxedEnvironment

RESERVED_NAMES = ("__file__", "__dirname__")

Evaluator = Callable[[str, Mapping[str, Any]], Any]


def scoped_bindings(path: str, bindings: Mapping[str, Any]) -> Dict[str, Any]:
    scope = {name: value for name, value in bindings.items() if name not in RESERVED_NAMES}
    scope["__file__"] = path
    scope["__dirname__"] = os.path.dirname(path)
    return scope


def evaluate_python(path: str, bindings: Mapping[str, Any]) -> Dict[str, Any]:
    """Run ``path`` as a Python script and return its resulting globals."""

    return runpy.run_path(str(path), init_globals=scoped_bindings(path, bindings))


class TemplateEvaluator:
    """Render fragments as Jinja2 templates inside a sandbox."""

    def __init__(self, environment: Optional[SandboxedEnvironment] = None) -> None:
        self.environment = environment or SandboxedEnvironment(keep_trailing_newline=True)

    def __call__(self, path: str, bindings: Mapping[str, Any]) -> str:
        source = Path(path).read_text(encoding="utf-8")
        template = self.environment.from_string(source)
        return template.render(scoped_bindings(path, bindings))
