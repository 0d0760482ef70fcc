"""Regular-expression file name patterns.

This module provides:
- PatternSet: An immutable OR-set of compiled case-insensitive patterns
- compile_patterns: Parse a semicolon-separated pattern string
- PATTERN_SEPARATOR: Separator between patterns in a pattern string

Patterns are unanchored: a name matches if any pattern matches anywhere in it.
Only base names are matched, never directory components.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from filesync.core.types import InvalidPatternError

PATTERN_SEPARATOR = ";"


@dataclass(frozen=True)
class PatternSet:
    """Ordered set of compiled patterns combined with logical OR."""

    patterns: tuple[re.Pattern[str], ...]

    @property
    def sources(self) -> tuple[str, ...]:
        """The trimmed pattern strings, in input order."""
        return tuple(p.pattern for p in self.patterns)

    def matches(self, file_name: str) -> bool:
        """Check whether a file name matches any pattern.

        Args:
            file_name: Base name of the file (no directory components).

        Returns:
            True if at least one pattern matches anywhere in the name.
        """
        return any(p.search(file_name) for p in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


def split_patterns(pattern_string: str | None) -> list[str]:
    """Split a pattern string on ';', trimming and dropping empty segments."""
    if not pattern_string:
        return []
    segments = (s.strip() for s in pattern_string.split(PATTERN_SEPARATOR))
    return [s for s in segments if s]


def compile_patterns(pattern_string: str | None) -> PatternSet:
    """Compile a semicolon-separated pattern string.

    Args:
        pattern_string: Patterns such as ".*\\.txt;.*\\.log".

    Returns:
        PatternSet with at least one pattern.

    Raises:
        InvalidPatternError: If no non-empty pattern remains or a segment
            is not a valid regular expression.
    """
    segments = split_patterns(pattern_string)
    if not segments:
        raise InvalidPatternError("Pattern string contains no patterns")

    compiled: list[re.Pattern[str]] = []
    for segment in segments:
        try:
            compiled.append(re.compile(segment, re.IGNORECASE))
        except re.error as e:
            raise InvalidPatternError(f"Invalid pattern {segment!r}: {e}") from e

    return PatternSet(tuple(compiled))


def compile_optional_patterns(pattern_string: str | None) -> PatternSet | None:
    """Compile a pattern string that may legitimately be empty.

    Used for exclude patterns, where "nothing" means "exclude nothing".
    """
    if not split_patterns(pattern_string):
        return None
    return compile_patterns(pattern_string)
