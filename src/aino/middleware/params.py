"""
Key-path parser for query strings and form bodies.

Bracketed keys build nested structures::

    >>> parse_query_string("a[]=1&a[]=2&b[x]=3")
    {'a': ['1', '2'], 'b': {'x': '3'}}

Each raw key is split into a path of string segments, ``[]`` becoming the
``ARRAY`` marker, and every (path, value) pair is deep-merged into an
accumulator. Combinations such as ``key[][sub]`` are accepted but their
shape is not guaranteed.
"""

import re
from typing import Any, Dict, Iterable, List, Tuple, Union
from urllib.parse import parse_qsl


class _ArrayMarker:
    """Path element standing for ``[]``"""

    def __repr__(self) -> str:
        return "ARRAY"


ARRAY = _ArrayMarker()

KeyPath = List[Union[str, _ArrayMarker]]

_KEY_PATTERN = re.compile(r'([^\[\]]*)((?:\[[^\[\]]*\])*)')
_SEGMENT_PATTERN = re.compile(r'\[([^\[\]]*)\]')


def split_key(key: str) -> KeyPath:
    """
    Split a raw key into its path.

    >>> split_key("user[address][]")
    ['user', 'address', ARRAY]

    Keys that are not well-formed bracket expressions are kept whole.
    """
    match = _KEY_PATTERN.fullmatch(key)
    if not match or not match.group(1):
        return [key]

    path: KeyPath = [match.group(1)]
    for segment in _SEGMENT_PATTERN.findall(match.group(2)):
        path.append(ARRAY if segment == "" else segment)
    return path


def merge_pair(acc: Dict[str, Any], path: KeyPath, value: Any) -> Dict[str, Any]:
    """Deep-merge one (path, value) pair into ``acc``"""
    head, rest = path[0], path[1:]

    if not rest:
        acc[head] = value
        return acc

    if rest[0] is ARRAY:
        items = acc.get(head)
        if not isinstance(items, list):
            items = []
            acc[head] = items

        if len(rest) == 1:
            items.append(value)
        else:
            items.append(merge_pair({}, rest[1:], value))
        return acc

    child = acc.get(head)
    if not isinstance(child, dict):
        child = {}
        acc[head] = child
    merge_pair(child, rest, value)
    return acc


def parse_pairs(pairs: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """Build a nested mapping out of already-decoded key/value pairs"""
    params: Dict[str, Any] = {}
    for key, value in pairs:
        merge_pair(params, split_key(key), value)
    return params


def parse_query_string(query: str) -> Dict[str, Any]:
    """Decode a ``application/x-www-form-urlencoded`` string into nested params"""
    if not query:
        return {}
    return parse_pairs(parse_qsl(query, keep_blank_values=True))


__all__ = ['ARRAY', 'split_key', 'merge_pair', 'parse_pairs', 'parse_query_string']
