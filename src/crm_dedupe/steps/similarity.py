from __future__ import annotations


def levenshtein(left: str, right: str) -> int:
    """Edit distance between two strings using the full DP table.

    No case-folding or trimming happens here; callers normalize first.
    """
    rows = len(left) + 1
    cols = len(right) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            if left[i - 1] == right[j - 1]:
                table[i][j] = table[i - 1][j - 1]
            else:
                table[i][j] = 1 + min(
                    table[i - 1][j - 1],
                    table[i][j - 1],
                    table[i - 1][j],
                )
    return table[-1][-1]


def name_similarity(left: str, right: str) -> float:
    """Return ``1 - distance / longest length`` in [0, 1]."""
    if left == right:
        return 1.0
    if not left or not right:
        return 0.0
    longest = max(len(left), len(right))
    return 1.0 - levenshtein(left, right) / longest
