"""
Repository identifier resolution.

Turns free-form user input (``owner/name`` or a repository URL) into a
canonical RepositoryRef. Pure functions only: no I/O and no logging of
user input beyond debug level.
"""

import re
from typing import List, Optional
from urllib.parse import urlsplit

from console import logger
from models import RepositoryRef

# Anything of the form "scheme://..." is treated as a URL
_SCHEME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*://')


def _segments(path: str) -> List[str]:
    return [segment for segment in path.split("/") if segment]


def _to_ref(owner: str, name: str) -> Optional[RepositoryRef]:
    if name.endswith(".git"):
        name = name[:-len(".git")]
    if not owner or not name:
        return None
    return RepositoryRef(owner=owner, name=name)


def looks_like_url(text: str) -> bool:
    return bool(_SCHEME_PATTERN.match(text))


def resolve(text: Optional[str]) -> Optional[RepositoryRef]:
    """
    Normalize user input into a repository reference.

    Args:
        text: ``owner/name``, or an absolute URL whose first two path
            segments are the owner and the repository name

    Returns:
        RepositoryRef, or None when the input cannot be read as exactly one repository
    """
    if text is None:
        return None

    trimmed = text.strip()
    if not trimmed:
        return None

    if looks_like_url(trimmed):
        try:
            parts = urlsplit(trimmed)
        except ValueError:
            logger.debug(f"Could not parse repository URL: {trimmed}")
            return None
        segments = _segments(parts.path)
        if len(segments) < 2:
            return None
        return _to_ref(segments[0], segments[1])

    segments = _segments(trimmed)
    if len(segments) != 2:
        return None
    return _to_ref(segments[0], segments[1])
