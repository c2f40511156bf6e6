"""Provider-independent path abstraction layer for bucketpath.

Example:
    >>> from bucketpath.core.io import PathBuilder
    >>> def to_strings(builder: PathBuilder, raw: list[str]) -> list[str]:
    ...     return [builder.build(s).path_as_string for s in raw]
"""

from .models import OpenOptions
from .protocols import Path, PathBuilder

__all__ = [
    "OpenOptions",
    "Path",
    "PathBuilder",
]
