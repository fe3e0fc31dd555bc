"""Base class for result exporters."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class BaseWriter(ABC):
    """
    Exporter rooted at one output directory.

    Subclasses implement `write` for a single artifact and call `_track`
    for every file they produce.
    """

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.written: list[Path] = []

    def path_for(self, destination: str) -> Path:
        return self.output_dir / destination

    def _track(self, path: Path) -> None:
        self.written.append(path)
        logger.info("Wrote %s", path)

    @abstractmethod
    def write(self, data: Any, destination: str) -> None:
        """Write one artifact to `destination` inside the output directory."""
