"""Compile operation: source file in, debug dump out.

Every failure is caught here and returned as a CompileResult, so callers
branch on ``result.ok`` instead of handling exceptions.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from btsp.config import CompilerConfig
from btsp.ir.models import Document
from btsp.ir.parser import assemble_document, split_lines
from btsp.ir.serializer import write_debug

logger = logging.getLogger(__name__)

STATUS_FAILED = "b26c=1"


class CompileError(Enum):
    INPUT_UNREADABLE = "input_unreadable"  # Source could not be opened or read
    UNSTRUCTURED_FAILURE = "unstructured_failure"  # Anything raised while parsing or writing


@dataclass
class CompileResult:
    """Outcome of one compile: a Document on success, an error otherwise."""

    ok: bool
    source: str
    document: Document | None = None
    output_path: Path | None = None
    error: CompileError | None = None
    message: str = ""

    def status_lines(self) -> list[str]:
        """Text reported at the process boundary; empty on success."""
        if self.ok:
            return []
        if self.error == CompileError.INPUT_UNREADABLE:
            return [STATUS_FAILED, "file-opened: 0"]
        return [STATUS_FAILED, f"error: {self.message or '?'}"]

    def summary(self) -> str:
        if self.ok:
            return f"[OK] {self.source} -> {self.output_path} ({self.document.summary()})"
        return f"[FAIL] {self.source}: {self.error.value}"


class Compiler:
    """Runs the bootstrap pipeline for one source file per call.

    Parameters
    ----------
    config:
        Output location, suffixes and write mode. Defaults to CompilerConfig().
    clock:
        Zero-argument callable returning epoch seconds; recorded as the
        compile start time.
    """

    def __init__(
        self,
        config: CompilerConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or CompilerConfig()
        self.clock = clock

    def compile(self, source_path: str | Path, output_name: str | None = None) -> CompileResult:
        """Parse ``source_path`` and write ``<output_name>.btspdebug``.

        The caller is expected to have checked the path and suffix already.
        """
        source = str(source_path)
        try:
            f = open(source_path, encoding=self.config.encoding, newline="")
        except OSError as e:
            logger.warning("Could not open %s: %s", source, e)
            return CompileResult(
                ok=False,
                source=source,
                error=CompileError.INPUT_UNREADABLE,
                message=str(e),
            )

        try:
            with f:
                start_time = int(self.clock())
                content = f.read()
            lines = split_lines(content)
            document = assemble_document(lines, source=source, start_time=start_time)

            output_path = self.config.output_path(output_name)
            write_debug(
                document,
                output_path,
                atomic=self.config.atomic_write,
                encoding=self.config.encoding,
            )
        except Exception as e:
            logger.exception("Compile failed for %s", source)
            return CompileResult(
                ok=False,
                source=source,
                error=CompileError.UNSTRUCTURED_FAILURE,
                message=str(e),
            )

        logger.info("Compiled %s to %s (%s)", source, output_path, document.summary())
        return CompileResult(ok=True, source=source, document=document, output_path=output_path)


def compile_file(
    source_path: str | Path,
    output_name: str | None = None,
    config: CompilerConfig | None = None,
    clock: Callable[[], float] = time.time,
) -> CompileResult:
    """Compile one file with a throwaway Compiler.

    ``output_name`` falls back to the config value, "main" by default.
    """
    return Compiler(config=config, clock=clock).compile(source_path, output_name=output_name)
