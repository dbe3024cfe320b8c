"""Debug serializer: writes a Document as a sectioned .btspdebug dump.

Layout (every item is followed by a newline)::

    ;;details
    projectname=...
    ;;raw
    <source lines>
    ;;imports
    <import names>
    ;;entities
    cmd ?? (a, b);
    ;;references
    start:1;
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from btsp.ir.models import (
    SECTION_DETAILS,
    SECTION_ENTITIES,
    SECTION_IMPORTS,
    SECTION_ORDER,
    SECTION_RAW,
    SECTION_REFERENCES,
    Document,
    Entity,
)
from btsp.ir.parser import parse_entity_line, split_lines

logger = logging.getLogger(__name__)


def render_debug(document: Document) -> str:
    """Render ``document`` to the debug dump text. Deterministic."""
    sections = [
        (SECTION_DETAILS, document.details),
        (SECTION_RAW, document.raw),
        (SECTION_IMPORTS, document.imports),
        (SECTION_ENTITIES, [entity.render() for entity in document.entities]),
        (SECTION_REFERENCES, document.references),
    ]
    out: list[str] = []
    for header, items in sections:
        out.append(header + "\n")
        out.extend(item + "\n" for item in items)
    return "".join(out)


def _target_mode(path: Path) -> int:
    """Mode a plain ``open(path, "w")`` would leave on ``path``.

    mkstemp creates files as 0600; an existing target keeps its mode,
    a new one gets 0666 minus the process umask.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_debug(
    document: Document,
    path: str | Path,
    atomic: bool = True,
    encoding: str = "utf-8",
) -> Path:
    """Write the dump for ``document`` to ``path``.

    With ``atomic`` the text goes to a temporary file in the same directory
    and is moved over ``path`` once complete, so a failed write leaves no
    partial dump behind. Without it ``path`` is written in place.
    """
    path = Path(path)
    text = render_debug(document)

    if not atomic:
        with open(path, "w", encoding=encoding, newline="\n") as f:
            f.write(text)
        return path

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="\n") as f:
            f.write(text)
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug("Wrote %d byte(s) to %s", len(text.encode(encoding)), path)
    return path


def parse_debug_sections(text: str) -> dict[str, list[str]]:
    """Split a debug dump back into its sections.

    Lines are assigned to the most recent header. A raw source line that
    happens to equal a header will be read as one; the raw section is not
    meant to be re-parsed.
    """
    sections: dict[str, list[str]] = {header: [] for header in SECTION_ORDER}
    current: str | None = None
    for line in split_lines(text):
        if line in sections:
            current = line
            continue
        if current is None:
            raise ValueError(f"Content before first section header: {line!r}")
        sections[current].append(line)
    return sections


def parse_debug_entities(text: str) -> list[Entity]:
    """Re-tokenize the ``;;entities`` section of a debug dump."""
    entities = []
    for line in parse_debug_sections(text)[SECTION_ENTITIES]:
        if line.endswith(";"):
            line = line[:-1]
        entities.append(parse_entity_line(line))
    return entities
