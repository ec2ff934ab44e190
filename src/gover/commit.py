"""
Parsing of raw git commit objects saved alongside each snapshot.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from gover.errors import CommitParseError


TIMESTAMP_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class CommitInfo:
    """
    Metadata recovered from a commit object.

    Attributes:
        author_date: Author timestamp (UTC), or None when no author line was found
        summary: First line of the commit message, or "" when absent
    """

    author_date: Optional[datetime] = None
    summary: str = ""


def parse_commit(data: bytes) -> CommitInfo:
    """
    Extract author time and summary line from `git cat-file commit` output.

    Headers are scanned up to the first blank line. On the ``author`` line
    the second-to-last field is the Unix timestamp (the last one is the
    timezone offset). The summary is the line right after the blank line.

    Args:
        data: Raw commit object bytes

    Returns:
        CommitInfo for the commit

    Raises:
        CommitParseError: If the author timestamp is not a decimal integer
            or lies outside the range datetime can represent

    Example:
        >>> info = parse_commit(b"author A <a@x> 1577836800 +0000\\n\\nfix it\\n")
        >>> info.summary
        'fix it'
    """
    lines = data.decode("utf-8", errors="replace").split("\n")
    author_date = None
    summary = ""

    for i, line in enumerate(lines):
        if line.startswith("author "):
            fields = line.split()
            if len(fields) < 2 or not TIMESTAMP_PATTERN.fullmatch(fields[-2]):
                raise CommitParseError(f"malformed author in commit: {line!r}")
            try:
                author_date = datetime.fromtimestamp(int(fields[-2]), tz=timezone.utc)
            except (OverflowError, OSError, ValueError) as e:
                raise CommitParseError(f"author time out of range in commit: {line!r}") from e
        if not line:
            if i + 1 < len(lines):
                summary = lines[i + 1]
            break

    return CommitInfo(author_date=author_date, summary=summary)
