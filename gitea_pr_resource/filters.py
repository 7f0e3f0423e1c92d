"""Skip-CI markers and changed-file path filters.

Path patterns are single-level shell globs: ``*`` and ``?`` never match
the ``/`` separator, ``[...]`` is a character class (``^`` negates), and
``\\`` escapes the next character. A pattern also matches every file
inside it when read as a directory, so ``docs`` matches ``docs/index.md``.
"""

import re
from functools import lru_cache
from typing import List, Tuple

from gitea_pr_resource.errors import ResourceError

SEPARATOR = "/"

_SKIP_CI_RE = re.compile(r"\[(ci skip|skip ci|no ci)\]", re.IGNORECASE)


class PatternError(ResourceError):
    """Raised when a path pattern is malformed."""

    pass


def contains_skip_ci(text: str) -> bool:
    """Return True if text contains [ci skip], [skip ci] or [no ci]."""
    return bool(_SKIP_CI_RE.search(text or ""))


def is_inside_path(parent: str, child: str) -> bool:
    """Check whether the child path is inside the parent path.

    /foo/bar is inside /foo, but /foobar is not inside /foo.
    /foo is inside /foo, but /foo is not inside /foo/
    """
    if parent == child:
        return True
    # only prefix matches on a directory separator
    prefix = parent if parent.endswith(SEPARATOR) else parent + SEPARATOR
    return child.startswith(prefix)


def _class_char(pattern: str, i: int) -> Tuple[str, int]:
    if i >= len(pattern):
        raise PatternError(f"syntax error in pattern: {pattern!r}")
    c = pattern[i]
    if c in "-]":
        raise PatternError(f"syntax error in pattern: {pattern!r}")
    if c == "\\":
        i += 1
        if i >= len(pattern):
            raise PatternError(f"syntax error in pattern: {pattern!r}")
        c = pattern[i]
    return c, i + 1


def _translate_class(pattern: str, i: int) -> Tuple[str, int]:
    """Translate the class starting after ``[`` at index i."""
    negate = i < len(pattern) and pattern[i] == "^"
    if negate:
        i += 1
    items: List[str] = []
    while True:
        if i >= len(pattern):
            raise PatternError(f"syntax error in pattern: {pattern!r}")
        if pattern[i] == "]" and items:
            i += 1
            break
        lo, i = _class_char(pattern, i)
        hi = lo
        if i < len(pattern) and pattern[i] == "-":
            hi, i = _class_char(pattern, i + 1)
            if hi < lo:
                raise PatternError(f"syntax error in pattern: {pattern!r}")
        items.append(re.escape(lo) if lo == hi else f"{re.escape(lo)}-{re.escape(hi)}")
    body = "".join(items)
    return (f"[^{body}]" if negate else f"[{body}]"), i


@lru_cache(maxsize=256)
def _compile(pattern: str) -> "re.Pattern[str]":
    """Translate a glob into an anchored regular expression.

    Raises:
        PatternError: If the pattern is malformed.
    """
    out: List[str] = []
    sep = re.escape(SEPARATOR)
    i = 0
    while i < len(pattern):
        c = pattern[i]
        i += 1
        if c == "*":
            out.append(f"[^{sep}]*")
        elif c == "?":
            out.append(f"[^{sep}]")
        elif c == "[":
            cls, i = _translate_class(pattern, i)
            out.append(cls)
        elif c == "\\":
            if i >= len(pattern):
                raise PatternError(f"syntax error in pattern: {pattern!r}")
            out.append(re.escape(pattern[i]))
            i += 1
        else:
            out.append(re.escape(c))
    return re.compile("(?s:" + "".join(out) + r")\Z")


def match(pattern: str, name: str) -> bool:
    """Return True if name matches the shell glob pattern."""
    return _compile(pattern).match(name) is not None


def filter_path(files: List[str], pattern: str) -> List[str]:
    """Return the files matching pattern, as a glob or as a directory."""
    regex = _compile(pattern)
    return [f for f in files if regex.match(f) is not None or is_inside_path(pattern, f)]


def filter_ignore_path(files: List[str], pattern: str) -> List[str]:
    """Return the files matching pattern neither as a glob nor as a
    directory."""
    regex = _compile(pattern)
    return [f for f in files if regex.match(f) is None and not is_inside_path(pattern, f)]
