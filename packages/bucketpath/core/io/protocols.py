"""Protocols for provider-independent paths.

Defines the path contract every filesystem provider implements, so callers
can handle resolved paths polymorphically, and the builder contract that
turns strings into such paths.
"""

from typing import Any, BinaryIO, Protocol, Self

from .models import OpenOptions


class Path(Protocol):
    """
    Protocol for an addressable path of some filesystem provider.

    Implementations are immutable: every operation that moves to another
    location returns a new path carrying the same provider context.
    """

    @property
    def path_as_string(self) -> str:
        """Canonical string form including the scheme (e.g. ``gs://b/o``)."""
        ...

    @property
    def path_without_scheme(self) -> str:
        """String form without the ``<scheme>://`` prefix."""
        ...

    def with_new_native_path(self, native_path: Any) -> Self:
        """
        Create a path for another native path of the same provider.

        Args:
            native_path: Provider-specific path object

        Returns:
            New path sharing this path's provider context
        """
        ...

    def read(self) -> BinaryIO:
        """
        Open the path for reading (blocking).

        Returns:
            Binary stream over the content

        Raises:
            IOError: On read failure
        """
        ...

    def write(
        self,
        content: str,
        open_options: OpenOptions | None = None,
        encoding: str | None = None,
    ) -> Self:
        """
        Write text content to the path (blocking).

        Args:
            content: Text to write
            open_options: Write options (provider defaults if None)
            encoding: Text encoding (provider default if None)

        Returns:
            Path representing the written target

        Raises:
            IOError: On write failure
        """
        ...


class PathBuilder(Protocol):
    """Protocol for turning user-supplied strings into provider paths."""

    @property
    def name(self) -> str:
        """Human readable provider name."""
        ...

    def build(self, string: str) -> Path:
        """
        Resolve a string into a path.

        Args:
            string: User-supplied path string

        Returns:
            Resolved path

        Raises:
            ValueError: If the string is not a valid path for this provider
        """
        ...
