"""Wildcard key selection and removal over reading maps.

Patterns support any number of ``*`` wildcards, each matching zero or more
characters:

- ``"exact"`` matches only the key ``exact``
- ``"prefix*"`` matches keys starting with ``prefix``
- ``"*suffix"`` matches keys ending with ``suffix``
- ``"*contains*"`` matches keys containing ``contains``
- ``"a*b*c"`` matches ``aXbYc`` and ``abc``

Unlike fnmatch, ``?`` and ``[...]`` have no special meaning.
"""

from collections.abc import Iterable, Mapping

from nodefacts.core.models import Reading


def matches_pattern(key: str, pattern: str) -> bool:
    """Check whether key matches a wildcard pattern.

    Segments between wildcards are matched left to right. The first segment
    is anchored at the start unless the pattern starts with ``*``, the last at
    the end unless it ends with ``*``; interior segments match their first
    occurrence after the previous segment. Empty segments add no constraint.

    Args:
        key: The key to test.
        pattern: Pattern with zero or more ``*`` wildcards.

    Returns:
        True if the key matches.
    """
    if "*" not in pattern:
        return key == pattern

    segments = pattern.split("*")
    last = len(segments) - 1
    pos = 0
    for i, segment in enumerate(segments):
        if not segment:
            continue

        if i == 0:
            # pattern does not start with "*" here, otherwise segment is empty
            if not key.startswith(segment):
                return False
            pos = len(segment)
            continue

        if i == last:
            return key[pos:].endswith(segment)

        idx = key.find(segment, pos)
        if idx == -1:
            return False
        pos = idx + len(segment)

    return True


def _matches_any(key: str, patterns: list[str]) -> bool:
    return any(matches_pattern(key, pattern) for pattern in patterns)


def filter_out(
    readings: Mapping[str, Reading], patterns: Iterable[str]
) -> dict[str, Reading]:
    """Return a new dict without the keys matching any pattern.

    Args:
        readings: Source readings; never modified.
        patterns: Wildcard patterns. An empty list keeps every key.

    Returns:
        Newly allocated dict, even when nothing was removed.
    """
    pattern_list = list(patterns)
    return {
        key: value
        for key, value in readings.items()
        if not _matches_any(key, pattern_list)
    }


def filter_in(
    readings: Mapping[str, Reading], patterns: Iterable[str]
) -> dict[str, Reading]:
    """Return a new dict with only the keys matching at least one pattern.

    This is the complement of filter_out(). An empty pattern list keeps
    nothing.

    Args:
        readings: Source readings; never modified.
        patterns: Wildcard patterns.

    Returns:
        Newly allocated dict.
    """
    pattern_list = list(patterns)
    return {
        key: value for key, value in readings.items() if _matches_any(key, pattern_list)
    }
