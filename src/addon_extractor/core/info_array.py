"""Legacy info array parsing.

Older addons declare their metadata as a PHP array assignment in one of
their source files:

    $PluginInfo['myplugin'] = array(
        'Name' => 'My Plugin',
        'Version' => '1.0',
        'RequiredApplications' => array('Vanilla' => '2.0'),
    );

The declaration is read with a small literal parser; nothing in the file
is ever executed. Only literal values (strings, numbers, booleans, null,
nested arrays, string concatenation and ``t('...')`` wrappers) are
understood. Anything else makes the declaration unparsable.
"""

import logging
import re
from pathlib import Path
from typing import Any

from .types import AddonInfo

logger = logging.getLogger(__name__)

INFO_DECL_RE = re.compile(
    r"\$(?P<variable>[A-Za-z_]\w*Info)\s*\[\s*(?P<quote>['\"])(?P<key>.*?)(?P=quote)\s*\]\s*=(?!=)",
    re.S,
)

CORE_VERSION_RE = re.compile(
    r"""define\s*\(\s*(['"])APPLICATION_VERSION\1\s*,\s*(['"])(?P<version>[^'"]+)\2\s*\)"""
    r"""|const\s+APPLICATION_VERSION\s*=\s*(['"])(?P<const_version>[^'"]+)\4""",
)

_TOKEN_RE = re.compile(
    r"""
    (?P<skip>\s+|//[^\n]*|\#[^\n]*|/\*.*?\*/)
    |(?P<sq>'(?:[^'\\]|\\.)*')
    |(?P<dq>"(?:[^"\\]|\\.)*")
    |(?P<num>-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?)
    |(?P<arrow>=>)
    |(?P<punct>[\[\](),;.])
    |(?P<ident>[A-Za-z_\\][\w\\]*)
    """,
    re.S | re.X,
)

_DQ_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "v": "\v", "f": "\f", "0": "\0", "$": "$", '"': '"', "\\": "\\"}

# Function calls whose single string argument stands in for the call
_PASSTHROUGH_CALLS = {"t", "translatecontent"}


class InfoArrayError(ValueError):
    """Raised when an info array declaration cannot be parsed."""


def _unquote_single(raw: str) -> str:
    return re.sub(r"\\([\\'])", r"\1", raw[1:-1])


def _unquote_double(raw: str) -> str:
    return re.sub(
        r"\\(.)",
        lambda m: _DQ_ESCAPES.get(m.group(1), "\\" + m.group(1)),
        raw[1:-1],
        flags=re.S,
    )


class _LiteralParser:
    """Recursive descent parser for PHP array literals."""

    def __init__(self, text: str, pos: int):
        self.text = text
        self.pos = pos
        self._peeked: tuple[str, str] | None = None

    def _scan(self) -> tuple[str, str]:
        while self.pos < len(self.text):
            match = _TOKEN_RE.match(self.text, self.pos)
            if not match:
                raise InfoArrayError(f"Unexpected character {self.text[self.pos]!r} at offset {self.pos}")
            self.pos = match.end()
            kind = match.lastgroup or ""
            if kind != "skip":
                return kind, match.group(kind)
        return "eof", ""

    def peek(self) -> tuple[str, str]:
        if self._peeked is None:
            self._peeked = self._scan()
        return self._peeked

    def next(self) -> tuple[str, str]:
        token = self.peek()
        self._peeked = None
        return token

    def expect(self, value: str) -> None:
        kind, text = self.next()
        if text != value or kind in ("sq", "dq"):
            raise InfoArrayError(f"Expected {value!r}, found {text!r}")

    def parse_statement(self) -> Any:
        value = self.parse_value()
        self.expect(";")
        return value

    def parse_value(self) -> Any:
        value = self._parse_term()
        while self.peek() == ("punct", "."):
            self.next()
            right = self._parse_term()
            value = f"{_to_text(value)}{_to_text(right)}"
        return value

    def _parse_term(self) -> Any:
        kind, text = self.next()

        if kind == "sq":
            return _unquote_single(text)
        if kind == "dq":
            return _unquote_double(text)
        if kind == "num":
            return float(text) if any(c in text for c in ".eE") else int(text)
        if kind == "punct" and text == "[":
            return self._parse_items("]")
        if kind == "ident":
            lowered = text.lower()
            if lowered == "true":
                return True
            if lowered == "false":
                return False
            if lowered == "null":
                return None
            if self.peek() == ("punct", "("):
                self.next()
                if lowered == "array":
                    return self._parse_items(")")
                return self._parse_call(lowered.lstrip("\\"))
            raise InfoArrayError(f"Unsupported constant {text!r}")

        raise InfoArrayError(f"Unexpected token {text!r}")

    def _parse_call(self, name: str) -> Any:
        if name not in _PASSTHROUGH_CALLS:
            raise InfoArrayError(f"Unsupported function call {name!r}")
        args = self._parse_items(")")
        if not isinstance(args, list) or not args or not isinstance(args[0], str):
            raise InfoArrayError(f"Unsupported arguments to {name!r}")
        # t('Code', 'Default') reads better as its default
        return args[-1] if len(args) > 1 else args[0]

    def _parse_items(self, closer: str) -> list[Any] | dict[Any, Any]:
        items: dict[Any, Any] = {}
        next_index = 0

        while True:
            if self.peek() == ("punct", closer):
                self.next()
                break

            value = self.parse_value()
            if self.peek()[0] == "arrow":
                self.next()
                key = value
                if isinstance(key, bool) or not isinstance(key, (str, int, float)):
                    raise InfoArrayError(f"Unsupported array key {key!r}")
                if isinstance(key, float):
                    key = int(key)
                value = self.parse_value()
            else:
                key = next_index

            items[key] = value
            if isinstance(key, int) and key >= next_index:
                next_index = key + 1

            kind, text = self.next()
            if text == closer and kind == "punct":
                break
            if text != "," or kind != "punct":
                raise InfoArrayError(f"Expected ',' or {closer!r}, found {text!r}")

        if list(items.keys()) == list(range(len(items))):
            return list(items.values())
        return items


def _to_text(value: Any) -> str:
    if value is True:
        return "1"
    if value is False or value is None:
        return ""
    if isinstance(value, (list, dict)):
        raise InfoArrayError("Cannot concatenate an array")
    return str(value)


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Could not read %s: %s", path, e)
        return None


def parse_info_array(path: Path) -> AddonInfo | None:
    """Parse the legacy info array declared in a source file.

    Args:
        path: Extracted source file, e.g. a plugin's class file

    Returns:
        ``{addon-key: info}`` where info carries a ``Variable`` tag naming
        the declaring variable (e.g. "PluginInfo"), or None if the file has
        no parsable declaration
    """
    text = _read_text(path)
    if text is None:
        return None

    for match in INFO_DECL_RE.finditer(text):
        try:
            value = _LiteralParser(text, match.end()).parse_statement()
        except InfoArrayError as e:
            logger.debug("Skipping $%s declaration in %s: %s", match["variable"], path.name, e)
            continue

        if not isinstance(value, dict):
            continue

        info = {str(key): item for key, item in value.items()}
        info["Variable"] = match["variable"]
        return {match["key"]: info}

    return None


def parse_core_version(path: Path) -> str | None:
    """Find the platform version a core source file declares.

    Looks for ``define('APPLICATION_VERSION', '...')`` or
    ``const APPLICATION_VERSION = '...'``.

    Args:
        path: Extracted source file

    Returns:
        The version string, or None if the file declares none
    """
    text = _read_text(path)
    if text is None:
        return None

    match = CORE_VERSION_RE.search(text)
    if not match:
        return None

    version = (match["version"] or match["const_version"] or "").strip()
    return version or None
