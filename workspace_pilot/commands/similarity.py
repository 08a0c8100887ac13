from __future__ import annotations

from typing import List


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance with unit cost for insert, delete and substitute."""

    m, n = len(a), len(b)
    table: List[List[int]] = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        table[i][0] = i
    for j in range(n + 1):
        table[0][j] = j
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,
                table[i][j - 1] + 1,
                table[i - 1][j - 1] + cost,
            )
    return table[m][n]


def similarity(a: str, b: str) -> float:
    """Return (maxLen - distance) / maxLen, in [0, 1]; two empty strings are identical."""

    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein(a, b)) / longest
