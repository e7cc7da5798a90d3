"""Subgraph manifest loader.

This module provides the loader interface and a file-based implementation
that reads YAML subgraph manifests and produces the flat list of
``TypeDefinitionFragment`` records for one composition run.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError
import yaml

from .definitions import TypeDefinitionFragment
from .exceptions import SubgraphLoadError
from .logging import get_logger
from .manifest import SubgraphManifest

logger = get_logger(__name__)

MANIFEST_SUFFIXES = (".yaml", ".yml")


@dataclass
class SubgraphLoadResult:
    """Result of a manifest loading operation."""

    fragments: list[TypeDefinitionFragment]
    loaded_at: datetime
    file_count: int
    services: list[str] = field(default_factory=list)

    @property
    def fragment_count(self) -> int:
        """Number of loaded fragments."""
        return len(self.fragments)


class SubgraphLoader(ABC):
    """Interface for loading subgraph type definitions."""

    @abstractmethod
    async def load_fragments(
        self, paths: list[str] | None = None
    ) -> list[TypeDefinitionFragment]:
        """Load all fragments for one composition run."""
        pass

    @abstractmethod
    async def load_result(self, paths: list[str] | None = None) -> SubgraphLoadResult:
        """Load fragments along with loading metadata."""
        pass


class FileSubgraphLoader(SubgraphLoader):
    """File-based subgraph loader.

    Accepts manifest files and directories. Directories are scanned
    (non-recursively) for ``*.yaml``/``*.yml`` files in sorted order, so the
    fragment order is stable between runs.
    """

    def __init__(self, paths: list[str] | str | None = None):
        """Initialize with default manifest paths.

        Args:
            paths: File or directory paths used when ``load_*`` is called
                without explicit paths
        """
        if isinstance(paths, str):
            paths = [paths]
        self.paths = [Path(p) for p in paths or []]

    async def load_fragments(
        self, paths: list[str] | None = None
    ) -> list[TypeDefinitionFragment]:
        """Load fragments from manifest files.

        Args:
            paths: Optional override for the manifest paths

        Returns:
            Fragments in file order, then declaration order

        Raises:
            SubgraphLoadError: If a path is missing or a manifest is invalid
        """
        result = await self.load_result(paths)
        return result.fragments

    async def load_result(self, paths: list[str] | None = None) -> SubgraphLoadResult:
        """Load fragments and report which services and files were read."""
        manifest_files = self._collect_files(
            [Path(p) for p in paths] if paths is not None else self.paths
        )

        fragments: list[TypeDefinitionFragment] = []
        services: list[str] = []

        for manifest_file in manifest_files:
            manifest = await self._load_manifest(manifest_file)
            if manifest.service and manifest.service not in services:
                services.append(manifest.service)
            fragments.extend(manifest.to_fragments(source=str(manifest_file)))

        logger.debug(
            "subgraphs_loaded",
            file_count=len(manifest_files),
            fragment_count=len(fragments),
            services=services,
        )

        return SubgraphLoadResult(
            fragments=fragments,
            loaded_at=datetime.now(UTC),
            file_count=len(manifest_files),
            services=services,
        )

    def _collect_files(self, paths: list[Path]) -> list[Path]:
        """Expand directories into their manifest files."""
        if not paths:
            raise SubgraphLoadError("No subgraph manifest paths given")

        files: list[Path] = []
        for path in paths:
            if not path.exists():
                raise SubgraphLoadError(f"Manifest path does not exist: {path}")
            if path.is_dir():
                files.extend(
                    sorted(
                        p
                        for p in path.iterdir()
                        if p.is_file() and p.suffix in MANIFEST_SUFFIXES
                    )
                )
            else:
                files.append(path)
        return files

    async def _load_manifest(self, manifest_file: Path) -> SubgraphManifest:
        """Read and validate a single manifest file.

        Raises:
            SubgraphLoadError: If reading, parsing, or shape validation fails
        """
        try:
            with manifest_file.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise SubgraphLoadError(
                f"Failed to load manifest '{manifest_file}': {e}", cause=e
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SubgraphLoadError(
                f"Manifest '{manifest_file}' must be a mapping, "
                f"got {type(data).__name__}"
            )

        try:
            return SubgraphManifest.model_validate(data)
        except PydanticValidationError as e:
            raise SubgraphLoadError(
                f"Invalid manifest '{manifest_file}': {e}", cause=e
            ) from e
