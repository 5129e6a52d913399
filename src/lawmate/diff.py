"""Word-level diff between two section bodies (longest common subsequence)."""
from __future__ import annotations

import re
from dataclasses import dataclass

# Horizontal whitespace runs and Thai/punctuation runs are kept as tokens so
# joining the parts reproduces the original text.
_TOKEN_SPLIT_RE = re.compile(r"([^\S\r\n]+|[.,;:?!\u0E00-\u0E7F]+)")


@dataclass(frozen=True, slots=True)
class DiffPart:
    kind: str  # "equal" | "insert" | "delete"
    value: str


def tokenize(text: str) -> list[str]:
    return [t for t in _TOKEN_SPLIT_RE.split(text) if t]


def compute_diff(old: str, new: str) -> list[DiffPart]:
    """Diff *old* into *new*; equal/delete parts rebuild old, equal/insert rebuild new."""
    a = tokenize(old)
    b = tokenize(new)

    dp = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]
    for i in range(1, len(a) + 1):
        for j in range(1, len(b) + 1):
            if a[i - 1] == b[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    parts: list[DiffPart] = []
    i, j = len(a), len(b)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and a[i - 1] == b[j - 1]:
            parts.append(DiffPart("equal", a[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            parts.append(DiffPart("insert", b[j - 1]))
            j -= 1
        else:
            parts.append(DiffPart("delete", a[i - 1]))
            i -= 1
    parts.reverse()
    return parts
