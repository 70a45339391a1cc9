from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from .evaluators import Evaluator, evaluate_python
from .fragments import FragmentSyntax, concat_fragments
from .paths import ensure_dir, is_readable_file, is_within, normalize_dir, normalize_file

logger = logging.getLogger("cascade_includer.collector")

DIR_ORDER = "dir_order"
FILE_ORDER = "file_order"


class InvalidOrder(ValueError):
    def __init__(self, order: object) -> None:
        super().__init__(f"Unknown path order {order!r}; expected {DIR_ORDER!r} or {FILE_ORDER!r}.")
        self.order = order


class PathCollector:
    """Collect files by name across an ordered list of directories.

    Resolved paths are either evaluated one by one with a shared set of
    bindings (:meth:`load`) or concatenated into one text (:meth:`read`).
    """

    DIR_ORDER = DIR_ORDER
    FILE_ORDER = FILE_ORDER

    def __init__(
        self,
        dirs: Iterable[str] = (),
        files: Iterable[str] = (),
        vars: Optional[Mapping[str, Any]] = None,
        cache_file: Optional[str] = None,
        evaluator: Optional[Evaluator] = None,
        syntax: Optional[FragmentSyntax] = None,
    ) -> None:
        self._dirs: List[str] = []
        self._files: List[str] = []
        self._vars: Mapping[str, Any] = vars if vars is not None else {}
        self._cache_file = cache_file
        self._evaluator: Evaluator = evaluator or evaluate_python
        self._syntax = syntax or FragmentSyntax()
        self.add_dirs(dirs)
        self.add_files(files)

    def set_dirs(self, dirs: Iterable[str]) -> None:
        self._dirs = []
        self.add_dirs(dirs)

    def add_dirs(self, dirs: Iterable[str]) -> None:
        for directory in dirs:
            self.add_dir(directory)

    def add_dir(self, directory: str) -> None:
        self._dirs.append(normalize_dir(directory))

    def get_dirs(self) -> List[str]:
        return list(self._dirs)

    def set_files(self, files: Iterable[str]) -> None:
        self._files = []
        self.add_files(files)

    def add_files(self, files: Iterable[str]) -> None:
        for name in files:
            self.add_file(name)

    def add_file(self, name: str) -> None:
        self._files.append(normalize_file(name))

    def get_files(self) -> List[str]:
        return list(self._files)

    def set_vars(self, vars: Mapping[str, Any]) -> None:
        self._vars = vars

    def get_vars(self) -> Mapping[str, Any]:
        return self._vars

    def set_cache_file(self, cache_file: Optional[str]) -> None:
        self._cache_file = cache_file

    def get_cache_file(self) -> Optional[str]:
        return self._cache_file

    def set_evaluator(self, evaluator: Evaluator) -> None:
        self._evaluator = evaluator

    def get_evaluator(self) -> Evaluator:
        return self._evaluator

    def set_syntax(self, syntax: FragmentSyntax) -> None:
        self._syntax = syntax

    def get_syntax(self) -> FragmentSyntax:
        return self._syntax

    def get_paths(self, order: str = DIR_ORDER) -> List[str]:
        """Return the existing, readable, in-directory paths in ``order``.

        ``DIR_ORDER`` lists every file of the first directory before moving on
        to the next directory; ``FILE_ORDER`` lists the first file from every
        directory before moving on to the next file. Candidates that are
        missing, unreadable or outside their directory are left out.
        """

        if order == DIR_ORDER:
            pairs = ((directory, name) for directory in self._dirs for name in self._files)
        elif order == FILE_ORDER:
            pairs = ((directory, name) for name in self._files for directory in self._dirs)
        else:
            raise InvalidOrder(order)
        paths: List[str] = []
        for directory, name in pairs:
            path = self._resolve(directory, name)
            if path is not None:
                paths.append(path)
        return paths

    def _resolve(self, directory: str, name: str) -> Optional[str]:
        path = os.path.realpath(directory + name)
        if not is_readable_file(path):
            logger.debug("Skip %s%s (missing or unreadable)", directory, name)
            return None
        if not is_within(path, directory):
            logger.debug("Skip %s%s (resolves outside %s)", directory, name, directory)
            return None
        return path

    def load(self, order: str = DIR_ORDER) -> List[Any]:
        """Evaluate the cache file, or else every resolved path in order.

        All evaluations receive the same bindings mapping, so objects in it
        can collect results across fragments.
        """

        evaluator = self._evaluator
        if self._cache_file:
            logger.debug("Loading cache file %s", self._cache_file)
            return [evaluator(str(self._cache_file), self._vars)]
        results: List[Any] = []
        for path in self.get_paths(order):
            logger.debug("Loading %s", path)
            results.append(evaluator(path, self._vars))
        return results

    def read(self, order: str = DIR_ORDER) -> str:
        """Concatenate the resolved paths into one text.

        The cache file is not consulted here, only the directories and files.
        """

        return concat_fragments(self.get_paths(order), self._syntax)

    def write(self, target: Path | str, order: str = DIR_ORDER) -> Path:
        text = self.read(order)
        target = Path(target)
        ensure_dir(target.parent)
        target.write_text(text, encoding="utf-8")
        logger.debug("Wrote %d characters to %s", len(text), target)
        return target


__all__ = ["DIR_ORDER", "FILE_ORDER", "InvalidOrder", "PathCollector"]
