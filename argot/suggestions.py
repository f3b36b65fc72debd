"""
Fuzzy “did you mean” matching for unknown option and command names.

- distance(a, b): classic Levenshtein edit distance (insert, delete and
  substitute each cost 1), dynamic programming over a (|a|+1) x (|b|+1) table.
- suggest(value, candidates): the closest candidate within MAX_SUGGESTION_DISTANCE.

Both are pure and deterministic for fixed inputs.
"""
import re

from .constants import MAX_SUGGESTION_DISTANCE, SHORT_PREFIX

_NORMALIZE_PATTERN = re.compile("^%s+" % re.escape(SHORT_PREFIX))


def distance(source, target, /):
    """
    Levenshtein distance between two strings.

    >>> distance("kitten", "sitting")
    3
    """
    if source == target:
        return 0
    if not source:
        return len(target)
    if not target:
        return len(source)

    matrix = [[0] * (len(target) + 1) for _ in range(len(source) + 1)]
    for row in range(len(source) + 1):
        matrix[row][0] = row
    for column in range(len(target) + 1):
        matrix[0][column] = column

    for row in range(1, len(source) + 1):
        for column in range(1, len(target) + 1):
            cost = 0 if source[row - 1] == target[column - 1] else 1
            matrix[row][column] = min(
                matrix[row - 1][column] + 1,
                matrix[row][column - 1] + 1,
                matrix[row - 1][column - 1] + cost,
            )

    return matrix[len(source)][len(target)]


def _normalize(value):
    return _NORMALIZE_PATTERN.sub("", value)


def suggest(value, candidates, /, *, threshold=MAX_SUGGESTION_DISTANCE):
    """
    return the candidate closest to value, or None when nothing is close enough.

    rules
    - leading '-' runs are stripped from value and candidates before comparing,
      so '--hep' is compared as 'hep'; the candidate is returned as spelled.
    - the candidate with the strictly smallest distance wins; on ties the first
      one in iteration order is kept (stable, not necessarily optimal).
    - the best distance must be <= threshold.
    """
    normalized = _normalize(value)

    best, minimum = None, None
    for candidate in candidates:
        current = distance(_normalize(candidate), normalized)
        if minimum is None or current < minimum:
            best, minimum = candidate, current

    if minimum is not None and minimum <= threshold:
        return best
    return None


__all__ = (
    "distance",
    "suggest",
)
