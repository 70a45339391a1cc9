from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from cascade_includer import FILE_ORDER, InvalidOrder, PathCollector, TemplateEvaluator, evaluate_python

DIR_ORDER_LOADS = [
    "dir1:file1.py", "dir1:file2.py", "dir1:file3.py",
    "dir2:file1.py", "dir2:file2.py", "dir2:file3.py",
    "dir3:file1.py", "dir3:file2.py", "dir3:file3.py",
]


def test_load_runs_each_path_once_in_order(collector: PathCollector, track: SimpleNamespace):
    collector.load()
    assert track.files == DIR_ORDER_LOADS


def test_load_file_order(collector: PathCollector, track: SimpleNamespace):
    collector.load(FILE_ORDER)
    assert track.files == [
        "dir1:file1.py", "dir2:file1.py", "dir3:file1.py",
        "dir1:file2.py", "dir2:file2.py", "dir3:file2.py",
        "dir1:file3.py", "dir2:file3.py", "dir3:file3.py",
    ]


def test_load_uses_cache_file_only(collector: PathCollector, track: SimpleNamespace, fakefs: Path):
    collector.set_cache_file(str(fakefs / "cache_file.py"))
    collector.load()
    assert track.files == ["cache file"]


def test_load_with_cache_file_ignores_order(collector: PathCollector, track: SimpleNamespace, fakefs: Path):
    collector.set_cache_file(str(fakefs / "cache_file.py"))
    collector.load("bad-order")
    assert track.files == ["cache file"]


def test_load_rejects_unknown_order(collector: PathCollector):
    with pytest.raises(InvalidOrder):
        collector.load("bad-order")


def test_load_passes_same_bindings_to_every_fragment(collector: PathCollector):
    seen = []

    def evaluator(path, bindings):
        seen.append(bindings)
        return path

    collector.set_evaluator(evaluator)
    results = collector.load()
    assert len(results) == 9
    assert all(bindings is collector.get_vars() for bindings in seen)


def test_fragments_see_earlier_mutations(tmp_path: Path):
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.mkdir()
    second.mkdir()
    (first / "step.py").write_text("state['count'] = state.get('count', 0) + 1\n", encoding="utf-8")
    (second / "step.py").write_text("state['seen'] = state['count']\nstate['count'] += 1\n", encoding="utf-8")
    state: dict = {}
    collector = PathCollector(dirs=[str(first), str(second)], files=["step.py"], vars={"state": state})
    collector.load()
    assert state == {"count": 2, "seen": 1}


def test_load_propagates_fragment_errors(tmp_path: Path):
    (tmp_path / "broken.py").write_text("raise RuntimeError('boom')\n", encoding="utf-8")
    collector = PathCollector(dirs=[str(tmp_path)], files=["broken.py"])
    with pytest.raises(RuntimeError, match="boom"):
        collector.load()


def test_python_evaluator_hides_caller_locals(tmp_path: Path):
    fragment = tmp_path / "peek.py"
    fragment.write_text("result = secret\n", encoding="utf-8")
    secret = "caller-only"  # noqa: F841
    with pytest.raises(NameError):
        evaluate_python(str(fragment), {})


def test_python_evaluator_keeps_identity_names(tmp_path: Path):
    fragment = tmp_path / "who.py"
    fragment.write_text("me = __file__\nhere = __dirname__\n", encoding="utf-8")
    scope = evaluate_python(str(fragment), {"__file__": "spoofed", "__dirname__": "spoofed", "x": 1})
    assert scope["me"] == str(fragment)
    assert scope["here"] == str(tmp_path)
    assert scope["x"] == 1


def test_template_evaluator_renders_with_bindings(tmp_path: Path):
    (tmp_path / "greeting.txt").write_text("Hello {{ name }} from {{ __file__ }}\n", encoding="utf-8")
    collector = PathCollector(
        dirs=[str(tmp_path)],
        files=["greeting.txt"],
        vars={"name": "world"},
        evaluator=TemplateEvaluator(),
    )
    path = str(tmp_path / "greeting.txt")
    assert collector.load() == [f"Hello world from {path}\n"]


def test_template_evaluator_is_sandboxed(tmp_path: Path):
    from jinja2.exceptions import SecurityError

    (tmp_path / "escape.txt").write_text("{{ name.__class__.__mro__ }}", encoding="utf-8")
    with pytest.raises(SecurityError):
        TemplateEvaluator()(str(tmp_path / "escape.txt"), {"name": "x"})
