"""Text preparation for concatenating fragments into one unit."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, Field


class FragmentSyntax(BaseModel):
    shebang: bool = Field(default=True, description="Drop a leading \"#!\" line.")
    open_tag: Optional[str] = Field(default=None, description="Stripped when the text starts with it.")
    close_tag: Optional[str] = Field(default=None, description="Stripped when the text ends with it.")
    file_token: str = "__file__"
    dir_token: str = "__dirname__"
    comment_prefix: str = "#"


def _strip_markers(text: str, syntax: FragmentSyntax) -> str:
    if syntax.shebang and text.startswith("#!"):
        _, _, text = text.partition("\n")
    if syntax.open_tag and text.startswith(syntax.open_tag):
        text = text[len(syntax.open_tag):]
    if syntax.close_tag and text.endswith(syntax.close_tag):
        text = text[: -len(syntax.close_tag)]
    return text


def render_fragment(path: str, syntax: Optional[FragmentSyntax] = None) -> str:
    """Read one fragment and rewrite it for inclusion in a merged file.

    A leading shebang line and the open/close markers are removed, and the
    file and directory tokens are replaced by quoted literals of ``path``
    and its parent. The replacement is plain text substitution, so tokens
    inside strings or comments are replaced as well.
    """

    syntax = syntax or FragmentSyntax()
    text = Path(path).read_text(encoding="utf-8").strip()
    text = _strip_markers(text, syntax)
    text = text.replace(syntax.file_token, repr(path))
    text = text.replace(syntax.dir_token, repr(os.path.dirname(path)))
    prefix = syntax.comment_prefix
    return f"{prefix}\n{prefix} {path}\n{prefix}\n{text.strip()}\n\n"


def concat_fragments(paths: Iterable[str], syntax: Optional[FragmentSyntax] = None) -> str:
    return "".join(render_fragment(path, syntax) for path in paths)
