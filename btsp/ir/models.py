"""IR data models for parsed bootstrap scripts.

These are the structures the parser fills in and the debug serializer
reads. A Document is created per compile, populated once, serialized once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# Source syntax
START_MARKER = "#start"
END_MARKER = "#end"
IMPORT_PREFIX = "#import "
ARG_SEPARATOR = "??"

# Debug dump section headers, in output order
SECTION_DETAILS = ";;details"
SECTION_RAW = ";;raw"
SECTION_IMPORTS = ";;imports"
SECTION_ENTITIES = ";;entities"
SECTION_REFERENCES = ";;references"

SECTION_ORDER = (
    SECTION_DETAILS,
    SECTION_RAW,
    SECTION_IMPORTS,
    SECTION_ENTITIES,
    SECTION_REFERENCES,
)

# Fixed format/version references appended after the boundary references
BOOTSTRAP_VERSION_REFERENCES = (
    "bootstrapver:b26;",
    "bootstraprqcomp:b26c;",
    "bootstrapast:b26bast;",
)

ABSENT_MARKER = "none"  # Rendered in place of a line number for a missing marker


class EntityForm(Enum):
    """Which branch of the entity grammar a line fell into."""

    BARE = "bare"  # No ?? separator, the whole line is the command
    WITH_ARGS = "with_args"  # Separator present, args may still be empty


@dataclass
class Entity:
    """One parsed statement: a command plus its ordered arguments."""

    command: str
    args: list[str] = field(default_factory=list)
    form: EntityForm = field(default=EntityForm.BARE, compare=False)

    def render(self) -> str:
        """Debug-dump form: ``cmd ?? (a, b);`` or ``cmd;``."""
        if self.args:
            return f"{self.command} {ARG_SEPARATOR} ({', '.join(self.args)});"
        return f"{self.command};"


@dataclass
class Boundaries:
    """1-indexed line numbers of the program markers; None when absent."""

    start: int | None = None
    end: int | None = None

    @property
    def complete(self) -> bool:
        return self.start is not None and self.end is not None


@dataclass
class Document:
    """The assembled parse result for one source file.

    Each list is kept in the order it is written to the debug dump.
    """

    imports: list[str] = field(default_factory=list)
    entities: list[Entity] = field(default_factory=list)
    references: list[str] = field(default_factory=list)
    details: list[str] = field(default_factory=list)
    raw: list[str] = field(default_factory=list)

    @property
    def entity_count(self) -> int:
        return len(self.entities)

    def summary(self) -> str:
        return (
            f"{len(self.raw)} line(s), {len(self.imports)} import(s), "
            f"{self.entity_count} entit{'y' if self.entity_count == 1 else 'ies'}"
        )
