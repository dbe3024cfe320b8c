"""Bootstrap parser: builds the IR Document from .btsp source lines.

Parsing is lenient by design of the format: a missing separator, missing
parentheses or missing program markers degrade to a simpler reading of the
line instead of raising.
"""

from __future__ import annotations

from btsp.ir.models import (
    ABSENT_MARKER,
    ARG_SEPARATOR,
    BOOTSTRAP_VERSION_REFERENCES,
    END_MARKER,
    IMPORT_PREFIX,
    START_MARKER,
    Boundaries,
    Document,
    Entity,
    EntityForm,
)


# Characters trimmed from each argument token
ARG_WHITESPACE = " \t\r\n"


def split_lines(text: str) -> list[str]:
    """Split source text on newlines, keeping empty lines.

    A trailing newline ends the last line rather than starting a new one.
    """
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def extract_imports(lines: list[str]) -> list[str]:
    """Collect ``#import <name>`` directives in first-occurrence order."""
    imports: list[str] = []
    for line in lines:
        if line.startswith(IMPORT_PREFIX):
            name = line[len(IMPORT_PREFIX):]
            if name not in imports:
                imports.append(name)
    return imports


def parse_entity_line(line: str) -> Entity:
    """Parse one program line into an Entity.

    ``cmd ?? (a, b)`` gives command ``cmd`` and args ``["a", "b"]``. A line
    without ``??`` is a bare command and is kept exactly as written.
    """
    pos = line.find(ARG_SEPARATOR)
    if pos == -1:
        return Entity(command=line)

    command = line[:pos].rstrip(ARG_WHITESPACE)
    rest = line[pos + len(ARG_SEPARATOR):].strip(ARG_WHITESPACE)
    if rest.startswith("(") and rest.endswith(")"):
        rest = rest[1:-1]

    args = []
    for token in rest.split(","):
        token = token.strip(ARG_WHITESPACE)
        if token:
            args.append(token)

    return Entity(command=command, args=args, form=EntityForm.WITH_ARGS)


def extract_entities(lines: list[str]) -> list[Entity]:
    """Tokenize every non-empty line between ``#start`` and ``#end``.

    Markers toggle the inside flag each time they are seen, so lines after a
    second ``#start`` are picked up again.
    """
    entities = []
    inside_program = False
    for line in lines:
        if line == START_MARKER:
            inside_program = True
            continue
        if line == END_MARKER:
            inside_program = False
            continue
        if inside_program and line:
            entities.append(parse_entity_line(line))
    return entities


def find_boundaries(lines: list[str]) -> Boundaries:
    """Locate the program markers (1-indexed). A repeated marker re-assigns."""
    boundaries = Boundaries()
    for index, line in enumerate(lines):
        if line == START_MARKER:
            boundaries.start = index + 1
        if line == END_MARKER:
            boundaries.end = index + 1
    return boundaries


def _format_line_number(value: int | None) -> str:
    return ABSENT_MARKER if value is None else str(value)


def build_references(lines: list[str]) -> list[str]:
    """Boundary references followed by the fixed bootstrap version tags."""
    boundaries = find_boundaries(lines)
    start = _format_line_number(boundaries.start)
    end = _format_line_number(boundaries.end)
    return [
        f"start:{start};",
        f"end:{end};",
        f"endcode:{end};",
        *BOOTSTRAP_VERSION_REFERENCES,
    ]


def assemble_document(lines: list[str], source: str, start_time: int) -> Document:
    """Run every extraction pass over ``lines`` and compose the Document.

    Args:
        lines: Source lines as produced by split_lines.
        source: Identifier recorded as the project name (usually the path).
        start_time: Compile start, in whole epoch seconds.
    """
    document = Document(raw=list(lines))
    document.imports = extract_imports(lines)
    document.references = build_references(lines)
    document.entities = extract_entities(lines)
    document.details = [
        f"projectname={source}",
        f"compile-start:{start_time}",
        f"num-entities:{document.entity_count}",
    ]
    return document


def parse_source(text: str, source: str = "<string>", start_time: int = 0) -> Document:
    """Convenience wrapper: split ``text`` and assemble a Document."""
    return assemble_document(split_lines(text), source=source, start_time=start_time)
