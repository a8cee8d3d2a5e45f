#!/usr/bin/env python3
"""
Tab completion for command names.

Candidates are built-in names plus executables found on PATH. The index
only answers questions; how a completion is shown is up to the line
editor.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List

from .search_path import SearchPath


class CompletionKind(Enum):
    """How a prefix relates to its candidate set."""
    NO_MATCH = 'no_match'     # nothing starts with the prefix
    UNIQUE = 'unique'         # exactly one candidate
    PARTIAL = 'partial'       # several, sharing more than the prefix
    AMBIGUOUS = 'ambiguous'   # several, nothing more to fill in


@dataclass
class Completion:
    """Result of completing a prefix."""
    kind: CompletionKind
    prefix: str
    text: str = ''
    candidates: List[str] = field(default_factory=list)


def longest_common_prefix(candidates: List[str]) -> str:
    """
    Longest string every candidate starts with.

    Only the lexicographically smallest and largest candidates need
    comparing: anything they share, everything between them shares.
    """
    if not candidates:
        return ''

    first, last = min(candidates), max(candidates)
    i = 0
    while i < len(first) and i < len(last) and first[i] == last[i]:
        i += 1
    return first[:i]


class CandidateIndex:
    """Answers "what could this prefix become?" for command names."""

    def __init__(self, builtin_names: Iterable[str], search_path: SearchPath):
        self.builtin_names = sorted(set(builtin_names))
        self.search_path = search_path

    def candidates(self, prefix: str) -> List[str]:
        """Sorted, deduplicated names starting with prefix."""
        if not prefix:
            return []

        matches = {name for name in self.builtin_names if name.startswith(prefix)}
        matches.update(self.search_path.executables(prefix))
        return sorted(matches)

    def complete(self, prefix: str) -> Completion:
        """Classify what a Tab press on prefix should do."""
        candidates = self.candidates(prefix)

        if not candidates:
            return Completion(CompletionKind.NO_MATCH, prefix)

        if len(candidates) == 1:
            return Completion(CompletionKind.UNIQUE, prefix,
                              text=candidates[0] + ' ', candidates=candidates)

        common = longest_common_prefix(candidates)
        if len(common) > len(prefix):
            return Completion(CompletionKind.PARTIAL, prefix,
                              text=common, candidates=candidates)

        return Completion(CompletionKind.AMBIGUOUS, prefix,
                          text=prefix, candidates=candidates)
