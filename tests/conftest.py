from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from cascade_includer import PathCollector

FRAGMENT = (
    "#!/usr/bin/env python\n"
    "import os\n"
    "\n"
    "track.files.append(os.path.basename(__dirname__) + ':' + os.path.basename(__file__))\n"
)

CACHE_FRAGMENT = "track.files.append('cache file')\n"


@pytest.fixture
def fakefs(tmp_path: Path) -> Path:
    """dir1..dir3 each hold file1..file3; cache_file.py sits beside them."""

    root = tmp_path.resolve() / "fakefs"
    for dirname in ("dir1", "dir2", "dir3"):
        directory = root / dirname
        directory.mkdir(parents=True)
        for filename in ("file1.py", "file2.py", "file3.py"):
            (directory / filename).write_text(FRAGMENT, encoding="utf-8")
    (root / "cache_file.py").write_text(CACHE_FRAGMENT, encoding="utf-8")
    return root


@pytest.fixture
def track() -> SimpleNamespace:
    return SimpleNamespace(files=[])


@pytest.fixture
def collector(fakefs: Path, track: SimpleNamespace) -> PathCollector:
    collector = PathCollector()
    collector.set_dirs([
        str(fakefs / "dir1"),
        str(fakefs / "dir2"),
        str(fakefs / "dirX"),
        str(fakefs / "dir3"),
    ])
    collector.set_files([
        "file1.py",
        "file2.py",
        "fileX.py",  # missing everywhere
        "../cache_file.py",  # exists, but outside each directory
        "file3.py",
    ])
    collector.set_vars({"track": track})
    return collector
