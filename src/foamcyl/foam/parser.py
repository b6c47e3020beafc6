"""
OpenFOAM ASCII file parser

This module reads the text format shared by OpenFOAM dictionaries, polyMesh
files and field files into plain Python containers:

- dictionaries become ``dict``
- numeric lists become ``numpy`` arrays (1D for scalars/labels, 2D for
  lists of fixed-size tuples such as vectors)
- face lists (``N(4(a b c d) 3(...))``) become a ``list`` of label arrays
- dimension sets (``[0 1 -1 0 0 0 0]``) become a ``tuple``
- everything else becomes ``int``, ``float`` or ``str``

An entry whose value has several items (``value uniform (0 0 0);``) is
returned as a list of those items.

Supported directives: ``#include``, ``#includeIfPresent``/``#sinclude``
(resolved relative to the including file) and ``#inputMode`` (ignored).
Binary-format files are rejected.
"""

import gzip
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np

from ..errors import FoamFormatError

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.S)
_TOKEN_RE = re.compile(r'\s*(?:("(?:\\.|[^"\\])*")|([{}()\[\];])|([^\s{}()\[\];"]+))')
_PAREN_RE = re.compile(r'[()]')
_NUMERIC_BLOCK_RE = re.compile(r'[\s0-9eE.+\-()]*')
_FLOAT_CHARS_RE = re.compile(r'[.eE]')
_INT_RE = re.compile(r'[-+]?\d+')
_COUNTED_SUBLIST_RE = re.compile(r'\d\s*\(')
_SUBLIST_RE = re.compile(r'\(([^()]*)\)')
_BINARY_RE = re.compile(r'\bformat\s+binary\s*;')

_PUNCTUATION = set('{}()[];')


@dataclass
class FoamFile:
    """
    Parsed content of one OpenFOAM file.

    Attributes
    ----------
    header : dict
        The ``FoamFile`` sub-dictionary (empty if the file has none)
    entries : dict
        Top-level keyword entries
    lists : list
        Top-level lists without a keyword (polyMesh files carry one, a
        ``faceCompactList`` carries two)
    """
    header: Dict[str, Any] = field(default_factory=dict)
    entries: Dict[str, Any] = field(default_factory=dict)
    lists: List[Any] = field(default_factory=list)

    @property
    def content(self) -> Any:
        """The first top-level list."""
        if not self.lists:
            raise FoamFormatError("File has no top-level list")
        return self.lists[0]


def _unquote(token: str) -> str:
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return token[1:-1]
    return token


def _convert_word(word: str) -> Union[int, float, str]:
    if _INT_RE.fullmatch(word):
        return int(word)
    try:
        return float(word)
    except ValueError:
        return word


def _numeric_list(inner: str) -> Union[np.ndarray, List[np.ndarray]]:
    """Convert the text between a list's parentheses when it is all numbers."""
    try:
        if '(' not in inner:
            words = inner.split()
            if _FLOAT_CHARS_RE.search(inner):
                return np.array(words, dtype=float)
            return np.array(words, dtype=np.int64)

        # Sub-lists with a size prefix: faces
        if _COUNTED_SUBLIST_RE.search(inner):
            return [np.array(group.split(), dtype=np.int64)
                    for group in _SUBLIST_RE.findall(inner)]

        count = inner.count('(')
        values = np.array(inner.replace('(', ' ').replace(')', ' ').split(), dtype=float)
    except ValueError as exc:
        raise FoamFormatError(f"Invalid numeric list: {exc}") from exc

    if values.size % count:
        raise FoamFormatError(
            f"List of {count} tuples holds {values.size} values; tuples must have equal size"
        )
    return values.reshape(count, -1)


def _list_length(values: Any) -> int:
    """Number of entries of a parsed list; a keyword and its dictionary count once."""
    if not isinstance(values, list):
        return len(values)
    n = len(values)
    for previous, item in zip(values, values[1:]):
        if isinstance(item, dict) and isinstance(previous, str):
            n -= 1
    return n


class _Parser:
    """Recursive-descent parser over comment-free OpenFOAM text."""

    def __init__(self, text: str, source: str = "<string>", base_dir: Optional[Path] = None):
        self.text = _COMMENT_RE.sub(lambda m: m.group(1) or ' ', text)
        self.pos = 0
        self.source = source
        self.base_dir = base_dir

    def _error(self, message: str) -> FoamFormatError:
        return FoamFormatError(f"{self.source}: {message} (offset {self.pos})")

    def _match(self, pos: int):
        m = _TOKEN_RE.match(self.text, pos)
        if m is None and self.text[pos:].strip():
            raise self._error(f"unexpected input {self.text[pos:pos + 20].strip()!r}")
        return m

    def peek(self) -> Optional[str]:
        m = self._match(self.pos)
        return None if m is None else m.group(m.lastindex)

    def next(self) -> str:
        m = self._match(self.pos)
        if m is None:
            raise self._error("unexpected end of file")
        self.pos = m.end()
        return m.group(m.lastindex)

    def parse_file(self) -> FoamFile:
        result = FoamFile()
        while True:
            token = self.peek()
            if token is None:
                return result
            if token == '(' or _INT_RE.fullmatch(token):
                result.lists.append(self.parse_item())
            else:
                self.parse_entry(result.entries)

    def parse_entry(self, target: Dict[str, Any]) -> None:
        key = self.next()
        if key in _PUNCTUATION:
            raise self._error(f"expected a keyword, found {key!r}")
        if key.startswith('#'):
            self._directive(key, target)
            return
        key = _unquote(key)
        if self.peek() == '{':
            self.next()
            target[key] = self.parse_dict()
        else:
            target[key] = self.parse_value()

    def parse_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        while True:
            token = self.peek()
            if token is None:
                raise self._error("unterminated dictionary")
            if token == '}':
                self.next()
                return result
            self.parse_entry(result)

    def parse_value(self) -> Any:
        items = []
        while True:
            token = self.peek()
            if token is None:
                raise self._error("missing ';'")
            if token == ';':
                self.next()
                break
            items.append(self.parse_item())
        if not items:
            return None
        return items[0] if len(items) == 1 else items

    def parse_item(self) -> Any:
        token = self.next()
        if token == '(':
            return self._parse_list()
        if token == '[':
            return self._parse_dimensions()
        if token == '{':
            return self.parse_dict()
        if token in _PUNCTUATION:
            raise self._error(f"unexpected {token!r}")
        if token.startswith('"'):
            return _unquote(token)

        if _INT_RE.fullmatch(token):
            size = int(token)
            following = self.peek()
            if following == '(':
                self.next()
                values = self._parse_list()
                if _list_length(values) != size:
                    raise self._error(f"list declares {size} items but holds {_list_length(values)}")
                return values
            if following == '{':
                # Uniform list: N{value}
                self.next()
                item = self.parse_item()
                if self.next() != '}':
                    raise self._error("expected '}' after uniform list value")
                return np.array([item] * size)
            return size

        return _convert_word(token)

    def _matching_paren(self, start: int) -> int:
        depth = 1
        for m in _PAREN_RE.finditer(self.text, start):
            depth += 1 if m.group() == '(' else -1
            if depth == 0:
                return m.start()
        raise self._error("unbalanced parentheses")

    def _parse_list(self) -> Any:
        start = self.pos
        end = self._matching_paren(start)
        inner = self.text[start:end]
        if _NUMERIC_BLOCK_RE.fullmatch(inner):
            self.pos = end + 1
            try:
                return _numeric_list(inner)
            except FoamFormatError as exc:
                raise self._error(str(exc)) from exc

        items = []
        while True:
            token = self.peek()
            if token is None:
                raise self._error("unterminated list")
            if token == ')':
                self.next()
                return items
            items.append(self.parse_item())

    def _parse_dimensions(self) -> tuple:
        values = []
        while True:
            token = self.next()
            if token == ']':
                return tuple(values)
            if token in _PUNCTUATION:
                raise self._error(f"unexpected {token!r} in dimension set")
            values.append(_convert_word(token))

    def _directive(self, key: str, target: Dict[str, Any]) -> None:
        if key in ('#include', '#includeIfPresent', '#sinclude'):
            name = _unquote(self.next())
            path = (self.base_dir or Path('.')) / name
            if not path.exists():
                if key == '#include':
                    raise self._error(f"included file {path} not found")
                logger.debug(f"Optional include {path} not present")
                return
            target.update(read_foam_file(path).entries)
        elif key == '#inputMode':
            self.next()
        elif key in ('#includeEtc', '#includeFunc'):
            logger.warning(f"{self.source}: ignoring {key} {self.next()}")
        else:
            raise self._error(f"unsupported directive {key}")


def parse_foam(text: str, source: str = "<string>", base_dir: Optional[Path] = None) -> FoamFile:
    """
    Parse OpenFOAM ASCII text.

    Parameters
    ----------
    text : str
        File content
    source : str, optional
        Name used in error messages. Default: '<string>'
    base_dir : Path, optional
        Directory that ``#include`` paths are resolved against

    Returns
    -------
    FoamFile
        Header, keyword entries and bare lists

    Raises
    ------
    FoamFormatError
        If the text is malformed or declares binary format

    Examples
    --------
    >>> from foamcyl.foam.parser import parse_foam
    >>> f = parse_foam("rotatingMotionCoeffs { origin (0 0 0); axis (0 0 1); }")
    >>> f.entries['rotatingMotionCoeffs']['axis']
    array([0, 0, 1])
    """
    if _BINARY_RE.search(text[:4096]):
        raise FoamFormatError(f"{source}: binary format is not supported")

    parser = _Parser(text, source=source, base_dir=base_dir)
    result = parser.parse_file()
    header = result.entries.pop('FoamFile', None)
    if isinstance(header, dict):
        result.header = header
    return result


def read_foam_file(path: Union[str, Path]) -> FoamFile:
    """
    Read and parse an OpenFOAM file, transparently handling ``.gz``.

    Parameters
    ----------
    path : str or Path
        File to read

    Returns
    -------
    FoamFile
        Parsed content

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    FoamFormatError
        If the content is malformed
    """
    path = Path(path)
    opener = gzip.open if path.suffix == '.gz' else open
    with opener(path, 'rt', encoding='utf-8', errors='replace') as stream:
        text = stream.read()
    return parse_foam(text, source=str(path), base_dir=path.parent)


__all__ = [
    'FoamFile',
    'parse_foam',
    'read_foam_file',
]
