"""Pydantic v2 value objects for a generation run.

All models here are created per invocation and discarded once the run has
written its files; none of them carry state between runs.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import UnknownArtifactKindError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ArtifactKind(str, Enum):
    """The fixed set of things the scaffolder can generate."""
    COMPONENT = "component"
    STORE = "store"
    SERVICE = "service"
    PAGE = "page"

    @property
    def suffix(self) -> str:
        """Canonical name suffix (``"Page"`` for pages, empty for components)."""
        return _KIND_SUFFIXES[self]

    @classmethod
    def parse(cls, value: str | ArtifactKind) -> ArtifactKind:
        """Resolve a kind name or CLI alias (``c``, ``s``, ``api``, ``p``)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        try:
            return _KIND_ALIASES[key]
        except KeyError:
            raise UnknownArtifactKindError(str(value)) from None


_KIND_SUFFIXES: dict[ArtifactKind, str] = {
    ArtifactKind.COMPONENT: "",
    ArtifactKind.STORE: "Store",
    ArtifactKind.SERVICE: "Service",
    ArtifactKind.PAGE: "Page",
}

_KIND_ALIASES: dict[str, ArtifactKind] = {
    "component": ArtifactKind.COMPONENT,
    "c": ArtifactKind.COMPONENT,
    "store": ArtifactKind.STORE,
    "s": ArtifactKind.STORE,
    "service": ArtifactKind.SERVICE,
    "api": ArtifactKind.SERVICE,
    "page": ArtifactKind.PAGE,
    "p": ArtifactKind.PAGE,
}


class PatchStatus(str, Enum):
    """Outcome of merging one entry into the registry document."""
    CREATED = "created"
    UPDATED = "updated"
    ALREADY_EXISTS = "already_exists"
    SKIPPED = "skipped"


# ---------------------------------------------------------------------------
# Request & identifiers
# ---------------------------------------------------------------------------

FlagValue = Union[bool, str]


class GenerationRequest(BaseModel):
    """A fully resolved request handed over by the CLI."""

    base_name: str = Field(..., description="Human-supplied name, with or without kind suffix")
    artifact_kind: ArtifactKind
    flags: dict[str, FlagValue] = Field(
        default_factory=dict,
        description="Per-kind options such as store, service, antd or description",
    )
    output_root: Path = Field(default=Path("."), description="Project root to write into")

    @field_validator("artifact_kind", mode="before")
    @classmethod
    def _resolve_kind(cls, value: str | ArtifactKind) -> ArtifactKind:
        # Aliases resolve here; unknown kinds raise UnknownArtifactKindError.
        return ArtifactKind.parse(value)


class DerivedIdentifiers(BaseModel):
    """The family of names computed from a base name."""

    model_config = ConfigDict(frozen=True)

    entity_name: str
    pascal_name: str
    camel_name: str
    kebab_name: str
    title_text: str


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

class LayoutEntry(BaseModel):
    """One row of the per-kind output table."""

    model_config = ConfigDict(frozen=True)

    relative_path: Path
    template_key: str


class RenderedArtifact(BaseModel):
    """One generated file, rendered but not yet written."""

    relative_path: Path
    content: str
    template_key: str = ""


class RegistryEntry(BaseModel):
    """A route to merge into the shared registry document."""

    model_config = ConfigDict(frozen=True)

    import_statement: str
    registration_block: str
    uniqueness_key: str = Field(..., description="Route path used to detect duplicates")


class PatchResult(BaseModel):
    """The patched document text plus what happened to it."""

    status: PatchStatus
    content: str = ""
    path: Path | None = None
    reason: str = ""

    @property
    def changed(self) -> bool:
        return self.status in (PatchStatus.CREATED, PatchStatus.UPDATED)


class GenerationResult(BaseModel):
    """Summary of a completed generation run."""

    artifact_kind: ArtifactKind
    identifiers: DerivedIdentifiers
    written: list[Path] = Field(default_factory=list)
    skipped: list[Path] = Field(default_factory=list)
    registry: PatchResult | None = None

    @property
    def changed_files(self) -> list[Path]:
        """Written artifacts plus the routes file when it was created or updated."""
        files = list(self.written)
        if self.registry is not None and self.registry.changed and self.registry.path is not None:
            files.append(self.registry.path)
        return files
