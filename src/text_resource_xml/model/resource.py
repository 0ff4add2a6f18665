"""In-memory model of a text resource document.

A :class:`TextResource` is an ordered list of :class:`TextGroup` objects plus a
name and the ``index_with_counts`` flag. Each group is an ordered list of
strings whose position is their index.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional


@dataclass
class TextGroup:
    """A numbered group of strings, indexed by position."""

    id: int
    strings: List[str] = field(default_factory=list)

    def add(self, text: str) -> int:
        """Append a string and return its index."""
        self.strings.append(text)
        return len(self.strings) - 1

    @property
    def size(self) -> int:
        return len(self.strings)

    def __len__(self) -> int:
        return len(self.strings)

    def __getitem__(self, index: int) -> str:
        return self.strings[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self.strings)


@dataclass
class TextResource:
    """Full in-memory representation of one text resource document."""

    name: str = ""
    index_with_counts: bool = True
    groups: List[TextGroup] = field(default_factory=list)

    def add_group(self, group: TextGroup) -> None:
        if not isinstance(group, TextGroup):
            raise TypeError("Group must be a TextGroup instance")
        self.groups.append(group)

    def find_group(self, group_id: int) -> Optional[TextGroup]:
        """Return the first group with the given id, or None."""
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    @property
    def string_count(self) -> int:
        """Total number of strings over all groups."""
        return sum(len(group) for group in self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def __iter__(self) -> Iterator[TextGroup]:
        return iter(self.groups)
