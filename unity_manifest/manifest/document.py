"""In-memory view of a package manifest."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..schemas.manifest import ScopedRegistry
from .spans import TextSpan


@dataclass(slots=True)
class ManifestDocument:
    """Registries as structured values, dependencies as an opaque text block.

    ``dependency_block`` is ``None`` when the source has no dependency table.
    ``dependency_span`` records where the block was found in the source text;
    ``table_indent`` is the indentation of the line holding the
    ``"dependencies"`` key.
    """

    registries: List[ScopedRegistry] = field(default_factory=list)
    dependency_block: Optional[str] = None
    dependency_span: Optional[TextSpan] = None
    table_indent: str = ""

    @property
    def has_dependency_table(self) -> bool:
        return self.dependency_block is not None
