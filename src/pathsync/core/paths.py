"""
PathSync path model.

Hierarchical addressing for synchronized stores: folders are ordered
segment tuples, files are a folder plus a terminal name.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

SEPARATOR = "/"


class PathError(ValueError):
    """Raised when a path cannot be constructed."""


class MissingFileName(PathError):
    """Raised when a file path is built from zero segments."""

    def __init__(self, message: str = "Cannot build a file path without a file name") -> None:
        super().__init__(message)


class Depth(Enum):
    """Listing scope relative to a folder."""

    SIMPLE = "simple"
    RECURSIVE = "recursive"

    @classmethod
    def from_string(cls, value: str) -> Depth:
        """Create Depth from string value."""
        value_lower = value.lower().strip()
        for depth in cls:
            if depth.value == value_lower or depth.name.lower() == value_lower:
                return depth
        raise ValueError(f"Unknown depth: {value!r}")

    def includes(self, scope: FolderPath, folder: FolderPath) -> bool:
        """Whether an item stored in ``folder`` is visible from ``scope``."""
        if self is Depth.SIMPLE:
            return scope == folder
        return scope.contains(folder)


@dataclass(frozen=True, order=True)
class FolderPath:
    """An immutable position in the hierarchical namespace."""

    parts: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.parts, str):
            raise TypeError(
                f"FolderPath expects a sequence of segments, got string {self.parts!r}; "
                "use FolderPath.parse() for slash-separated text"
            )
        object.__setattr__(self, "parts", tuple(str(part) for part in self.parts))

    @classmethod
    def root(cls) -> FolderPath:
        return cls(())

    @classmethod
    def of(cls, segments: Iterable[object]) -> FolderPath:
        if isinstance(segments, str):
            return cls(segments)
        return cls(tuple(str(segment) for segment in segments))

    @classmethod
    def parse(cls, text: str) -> FolderPath:
        """Parse a slash-separated folder path. Empty segments are dropped."""
        return cls(tuple(part for part in text.split(SEPARATOR) if part))

    @property
    def segments(self) -> tuple[str, ...]:
        return self.parts

    @property
    def is_root(self) -> bool:
        return not self.parts

    def child(self, name: str) -> FolderPath:
        return FolderPath(self.parts + (name,))

    def contains(self, other: FolderPath) -> bool:
        """
        Whether ``self`` is a structural prefix of ``other``.

        A folder contains itself and all of its descendants, never its
        ancestors.
        """
        if len(self.parts) > len(other.parts):
            return False
        return other.parts[: len(self.parts)] == self.parts

    def __str__(self) -> str:
        return SEPARATOR.join(self.parts) + SEPARATOR


@dataclass(frozen=True, order=True)
class FilePath:
    """A folder plus the name of the item stored in it."""

    folder: FolderPath
    file_name: str

    def __post_init__(self) -> None:
        if not isinstance(self.folder, FolderPath):
            object.__setattr__(self, "folder", FolderPath.of(self.folder))
        object.__setattr__(self, "file_name", str(self.file_name))

    @classmethod
    def from_segments(cls, segments: Iterable[object]) -> FilePath:
        """
        Build a file path from a flat sequence of segments.

        The last segment becomes the file name and the remaining ones the
        folder. Raises MissingFileName when ``segments`` is empty.
        """
        parts = [str(segment) for segment in segments]
        if not parts:
            raise MissingFileName()
        file_name = parts.pop()
        return cls(FolderPath(tuple(parts)), file_name)

    @classmethod
    def parse(cls, text: str) -> FilePath:
        """Parse a slash-separated file path such as ``folder/item``."""
        try:
            return cls.from_segments(part for part in text.split(SEPARATOR) if part)
        except MissingFileName:
            raise MissingFileName(f"No file name in path {text!r}") from None

    @property
    def segments(self) -> tuple[str, ...]:
        return self.folder.parts + (self.file_name,)

    @property
    def key(self) -> str:
        """Canonical slash-separated form, e.g. ``folder/item``. parse(key) == self."""
        return SEPARATOR.join(self.segments)

    def __str__(self) -> str:
        return f"{self.folder}{self.file_name}"
