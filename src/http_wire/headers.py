"""
Header collection for http_wire.

This module defines HeaderCollection, the keyed store of header name/value
text pairs attached to a message, and the line-parsing rules used to fill it
from raw header lines.
"""

from typing import Dict, Iterator, List, Optional, Tuple, Union

from .exceptions import EmptyInputError, EncodingError, MalformedLineError


HeaderLine = Union[str, bytes, bytearray, memoryview]
HeaderPair = Tuple[str, str]

DEFAULT_VALUE_SEPARATOR = " "


def parse_header_line(
    raw: HeaderLine,
    value_separator: str = DEFAULT_VALUE_SEPARATOR,
) -> HeaderPair:
    """
    Split a single header line into a key and a value.

    The first colon is replaced by a space and the line is split on
    whitespace. The first token is the key; the remaining tokens are joined
    with value_separator to form the value. Passing an empty separator drops
    the internal whitespace of the value.

    Args:
        raw: The header line as text or UTF-8 bytes, without line terminator
        value_separator: String used to rejoin the value tokens

    Returns:
        A (key, value) tuple

    Raises:
        EmptyInputError: If the line is empty
        EncodingError: If bytes input is not valid UTF-8
        MalformedLineError: If the line does not yield a key and a value
    """
    if not raw:
        raise EmptyInputError("header line is empty")

    if isinstance(raw, str):
        line = raw
    else:
        try:
            line = bytes(raw).decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError("header line is not valid UTF-8", cause=e) from e

    tokens = line.replace(":", " ", 1).split()
    if len(tokens) < 2:
        raise MalformedLineError(f"header line {line!r} has no key and value")
    if ":" in tokens[0]:
        raise MalformedLineError(f"header name in {line!r} contains ':'")

    return tokens[0], value_separator.join(tokens[1:])


class HeaderCollection:
    """
    Mapping from header name to header value.

    Keys are unique and case-sensitive; inserting an existing key replaces
    its value. Iteration yields (key, value) pairs from a snapshot taken when
    the traversal starts, so traversals are independent of each other and
    of later mutation. Callers must not rely on the order of the pairs.
    """

    def __init__(self, pairs: Optional[Union[Dict[str, str], List[HeaderPair]]] = None) -> None:
        self._map: Dict[str, str] = {}
        if pairs:
            items = pairs.items() if isinstance(pairs, dict) else pairs
            for key, value in items:
                self.insert(key, value)

    def insert(self, key: str, value: str) -> Optional[str]:
        """
        Insert or replace a header.

        Returns:
            The previous value for key, or None

        Raises:
            ValueError: If the key is empty or contains ":" or whitespace, or
                the value contains a line break
        """
        if not isinstance(key, str) or not isinstance(value, str):
            raise ValueError("header names and values must be str")
        if not key:
            raise ValueError("header name must not be empty")
        if ":" in key or any(c.isspace() for c in key):
            raise ValueError(f"header name {key!r} must not contain ':' or whitespace")
        if "\r" in value or "\n" in value:
            raise ValueError(f"header value for {key!r} must not contain line breaks")

        previous = self._map.get(key)
        self._map[key] = value
        return previous

    def remove(self, key: str) -> Optional[str]:
        """Remove a header and return its value, or None if absent."""
        return self._map.pop(key, None)

    def try_insert_from_line(
        self,
        raw: HeaderLine,
        value_separator: str = DEFAULT_VALUE_SEPARATOR,
    ) -> Optional[str]:
        """
        Parse a raw header line and insert the result.

        Returns:
            The previous value for the parsed key, or None

        Raises:
            EmptyInputError, EncodingError, MalformedLineError: See parse_header_line
        """
        key, value = parse_header_line(raw, value_separator)
        return self.insert(key, value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a header value by exact name."""
        return self._map.get(key, default)

    def get_ignore_case(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a header value by name (case-insensitive)."""
        key_lower = key.lower()
        for name, value in self._map.items():
            if name.lower() == key_lower:
                return value
        return default

    def is_empty(self) -> bool:
        return not self._map

    def keys(self) -> List[str]:
        return list(self._map)

    def values(self) -> List[str]:
        return list(self._map.values())

    def items(self) -> List[HeaderPair]:
        return list(self._map.items())

    def copy(self) -> "HeaderCollection":
        """Create an independent collection with the same headers."""
        clone = HeaderCollection()
        clone._map = dict(self._map)
        return clone

    def __getitem__(self, key: str) -> str:
        return self._map[key]

    def __iter__(self) -> Iterator[HeaderPair]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderCollection):
            return NotImplemented
        return self._map == other._map

    def __repr__(self) -> str:
        return f"HeaderCollection({self._map!r})"
