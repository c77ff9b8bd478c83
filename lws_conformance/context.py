"""Per-run context threaded through the harness components."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, kw_only=True)
class RunContext:
    """Settings shared by every component of a single run."""

    verbose: bool = False
    root: Path = field(default_factory=Path.cwd)

    def resolve(self, path: str | Path) -> Path:
        """Resolve a possibly relative path against the run root."""
        return (self.root / path).resolve()
