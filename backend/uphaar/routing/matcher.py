"""
Path matching for `:name` capture patterns.

Both paths and patterns are split on "/" with empty segments dropped, so
"/items/", "items" and "/items" are the same path. A pattern matches only a
path with the same number of segments; a segment starting with ":" captures
the request segment verbatim (no decoding, no coercion), every other segment
must be equal.
"""

from typing import Dict, List, NamedTuple


class PathMatch(NamedTuple):
    matched: bool
    params: Dict[str, str]


def split_path(path: str) -> List[str]:
    return [segment for segment in path.split("/") if segment]


def match_path(path: str, pattern: str) -> PathMatch:
    """
    Match a concrete request path against a route pattern.

    Pure and total: never raises for string input, and a failed match always
    carries an empty params dict.
    """
    path_segments = split_path(path)
    pattern_segments = split_path(pattern)

    if len(path_segments) != len(pattern_segments):
        return PathMatch(False, {})

    params: Dict[str, str] = {}
    for expected, actual in zip(pattern_segments, path_segments):
        if expected.startswith(":"):
            params[expected[1:]] = actual
        elif expected != actual:
            return PathMatch(False, {})

    return PathMatch(True, params)
