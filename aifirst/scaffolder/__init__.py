"""AI-First scaffolder -- renders React artifacts and registers their routes.

This package takes a ``GenerationRequest`` (artifact kind, base name and
feature flags) and renders the artifact's source, test and index files from
Jinja2 templates.  Pages are also merged into the project's routes file.

Quick usage::

    from aifirst.scaffolder import ArtifactGenerator, ArtifactKind, GenerationRequest

    request = GenerationRequest(
        base_name="Invoice",
        artifact_kind=ArtifactKind.PAGE,
        flags={"store": True},
        output_root="./my-app",
    )
    result = ArtifactGenerator().generate(request)
"""

from aifirst.scaffolder.context import build_context
from aifirst.scaffolder.errors import (
    InvalidNameError,
    RegistryPatchError,
    ScaffoldError,
    TemplateError,
    UnknownArtifactKindError,
)
from aifirst.scaffolder.generator import ArtifactGenerator, layout
from aifirst.scaffolder.models import (
    ArtifactKind,
    DerivedIdentifiers,
    GenerationRequest,
    GenerationResult,
    PatchResult,
    PatchStatus,
    RegistryEntry,
    RenderedArtifact,
)
from aifirst.scaffolder.naming import derive
from aifirst.scaffolder.registry import RegistryPatcher, build_route_entry, patch_document
from aifirst.scaffolder.templates import TemplateRenderer

__all__ = [
    "ArtifactGenerator",
    "ArtifactKind",
    "DerivedIdentifiers",
    "GenerationRequest",
    "GenerationResult",
    "InvalidNameError",
    "PatchResult",
    "PatchStatus",
    "RegistryEntry",
    "RegistryPatchError",
    "RegistryPatcher",
    "RenderedArtifact",
    "ScaffoldError",
    "TemplateError",
    "TemplateRenderer",
    "UnknownArtifactKindError",
    "build_context",
    "build_route_entry",
    "derive",
    "layout",
    "patch_document",
]
