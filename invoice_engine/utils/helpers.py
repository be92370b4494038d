"""
Helper Utilities Module.

Small generic functions shared by the extractors, the orchestrator and
the CLI.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - generate_timestamp: Generate formatted timestamps
    - synthetic_reference: Time-derived placeholder reference
    - collapse_whitespace: Normalise runs of whitespace
    - first_group: First non-empty capture group of a regex match
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/reports")
        PosixPath('outputs/reports')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def generate_timestamp(format_str: str = "%Y%m%d_%H%M%S", now: Optional[datetime] = None) -> str:
    """
    Generate a formatted timestamp string.

    Args:
        format_str: strftime format string.
        now: Moment to format. Defaults to the current time.

    Returns:
        Formatted timestamp string.

    Example:
        >>> generate_timestamp(now=datetime(2024, 6, 15, 14, 30, 22))
        '20240615_143022'
    """
    return (now or datetime.now()).strftime(format_str)


def synthetic_reference(prefix: str, now: datetime) -> str:
    """
    Build a placeholder reference from the epoch milliseconds of ``now``.

    Example:
        >>> synthetic_reference("REF-", datetime(2024, 1, 1, tzinfo=timezone.utc))
        'REF-1704067200000'
    """
    return f"{prefix}{int(now.timestamp() * 1000)}"


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run (NBSP included) into one space and strip."""
    return re.sub(r"\s+", " ", text or "").strip()


def first_group(match: Optional[re.Match]) -> Optional[str]:
    """
    Return the first capture group that participated in a match.

    Alternation-heavy patterns such as ``Tel\\s*:(\\d+)|Mobile\\s*:(\\d+)``
    leave every branch but one unset.

    Example:
        >>> first_group(re.search(r"a(\\d)|b(\\d)", "b7"))
        '7'
    """
    if match is None:
        return None
    for group in match.groups():
        if group:
            return group
    return None
