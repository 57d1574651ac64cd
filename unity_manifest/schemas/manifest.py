"""Pydantic models describing manifest registries and installable packages."""

from __future__ import annotations

import json
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import CatalogError


def quote_key(name: str) -> str:
    """Return the quoted literal used as a dependency key."""

    return json.dumps(name, ensure_ascii=False)


class ScopedRegistry(BaseModel):
    """One entry of the manifest ``scopedRegistries`` array.

    Equality is structural over ``name``, ``url`` and the ordered ``scopes``.
    Extra keys found in a manifest are carried through serialization but never
    compared.
    """

    name: str
    url: str
    scopes: Tuple[str, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(extra="allow", frozen=True)

    def identity(self) -> Tuple[str, str, Tuple[str, ...]]:
        return (self.name, self.url, tuple(self.scopes))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScopedRegistry):
            return NotImplemented
        return self.identity() == other.identity()

    def __hash__(self) -> int:
        return hash(self.identity())


class PackageSpec(BaseModel):
    """A package the installer can add to a manifest."""

    name: str = Field(..., description="Bare package identifier, e.g. com.atteneder.gltfast.")
    version: str = Field(..., description="Version string or git URL written as the dependency value.")
    title: Optional[str] = Field(default=None, description="Human readable name used in prompts.")
    registry: Optional[str] = Field(default=None, description="Catalog registry the package is served from.")

    model_config = ConfigDict(extra="forbid")

    @property
    def key(self) -> str:
        """Quoted key literal as it appears inside the dependency table."""

        return quote_key(self.name)

    @property
    def display_name(self) -> str:
        return self.title or self.name


class PackageCatalog(BaseModel):
    registries: Dict[str, ScopedRegistry] = Field(default_factory=dict)
    packages: Dict[str, PackageSpec] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _check_registry_references(self) -> "PackageCatalog":
        for alias, package in self.packages.items():
            if package.registry is not None and package.registry not in self.registries:
                raise ValueError(f"Package '{alias}' references unknown registry '{package.registry}'.")
        return self

    def resolve(self, alias: str) -> Tuple[PackageSpec, Optional[ScopedRegistry]]:
        """Return the package registered under ``alias`` and its registry, if any."""

        package = self.packages.get(alias)
        if package is None:
            known = ", ".join(sorted(self.packages)) or "none"
            raise CatalogError(f"Unknown package '{alias}' (known: {known}).")
        if package.registry is None:
            return package, None
        return package, self.registries[package.registry]
