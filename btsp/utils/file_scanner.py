"""File scanner: check build targets and discover bootstrap sources."""

from dataclasses import dataclass
from pathlib import Path

from btsp.config import CompilerConfig

# Directories to always skip
SKIP_DIRS = {
    ".git", "__pycache__", ".venv", "venv", ".env",
    "dist", "build", ".tox", ".pytest_cache", "node_modules",
}

SOURCE_SUFFIX = CompilerConfig.source_suffix


@dataclass
class BuildCheck:
    """Outcome of validating the arguments to a build."""

    properties_valid: bool
    path_valid: bool
    suffix_valid: bool
    path: Path | None = None

    @property
    def passed(self) -> bool:
        return self.properties_valid and self.path_valid and self.suffix_valid

    def report_lines(self) -> list[str]:
        """Status block printed when the check fails."""
        location = self.path.absolute() if self.path is not None else ""
        return [
            "b26c=1:",
            f"build-properties-valid: {int(self.properties_valid)}",
            f"build-path-valid: {int(self.path_valid)} ({location})",
            f"build-path-suffix-valid: {int(self.suffix_valid)}",
        ]


def check_build_target(args: list[str] | tuple[str, ...], suffix: str = SOURCE_SUFFIX) -> BuildCheck:
    """Validate that ``args`` names exactly one existing source file.

    All three conditions are evaluated so the report can list each one.
    """
    path = Path(args[0]) if args else None
    return BuildCheck(
        properties_valid=len(args) == 1,
        path_valid=path is not None and path.exists(),
        suffix_valid=path is not None and path.name.endswith(suffix),
        path=path,
    )


def scan_sources(root: Path, suffix: str = SOURCE_SUFFIX) -> list[Path]:
    """Recursively find bootstrap sources under ``root``, sorted by path."""
    files = []
    for item in Path(root).rglob(f"*{suffix}"):
        if item.is_file() and _should_include(item, root):
            files.append(item)
    return sorted(files)


def _should_include(path: Path, root: Path) -> bool:
    """Check if a file sits outside every skipped directory."""
    for part in path.relative_to(root).parts[:-1]:
        if part in SKIP_DIRS:
            return False
    return True
