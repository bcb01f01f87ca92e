"""Main scaffolding orchestrator.

Takes a ``GenerationRequest`` and produces the artifact set for its kind:

- component -> ``Component.tsx``, ``Component.test.tsx``, ``index.ts``
- store     -> ``Store.ts``, ``__tests__/Store.test.ts``, ``apiClient.ts``
- service   -> ``Service.ts``, ``__tests__/Service.test.ts``
- page      -> ``Page.tsx``, ``Page.test.tsx``, ``index.ts`` plus a route
  registered in the routes file

Artifacts are rendered and written one at a time in layout order.  A template
failure aborts the run; files already written are kept.  Registry failures are
isolated and reported on the result instead of raised.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from ..config import ScaffoldConfig
from ..utils import print_warning, run_command, write_text_file
from .context import build_context
from .errors import RegistryPatchError
from .models import (
    ArtifactKind,
    DerivedIdentifiers,
    GenerationRequest,
    GenerationResult,
    LayoutEntry,
    PatchResult,
    PatchStatus,
    RenderedArtifact,
)
from .naming import derive
from .registry import RegistryPatcher, build_route_entry
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Output layout
# ---------------------------------------------------------------------------

def layout(
    artifact_kind: ArtifactKind | str,
    identifiers: DerivedIdentifiers,
    config: ScaffoldConfig | None = None,
) -> list[LayoutEntry]:
    """Return the ordered ``(relative_path, template_key)`` table for a kind."""
    kind = ArtifactKind.parse(artifact_kind)
    cfg = config or ScaffoldConfig()
    name = identifiers.pascal_name

    if kind is ArtifactKind.COMPONENT:
        base = Path(cfg.components_dir) / name
        rows = [
            (base / f"{name}.tsx", "component/Component.tsx.j2"),
            (base / f"{name}.test.tsx", "component/Component.test.tsx.j2"),
            (base / "index.ts", "component/index.ts.j2"),
        ]
    elif kind is ArtifactKind.STORE:
        base = Path(cfg.stores_dir)
        rows = [
            (base / f"{name}.ts", "store/Store.ts.j2"),
            (base / "__tests__" / f"{name}.test.ts", "store/Store.test.ts.j2"),
            (Path(cfg.services_dir) / "apiClient.ts", "store/apiClient.ts.j2"),
        ]
    elif kind is ArtifactKind.SERVICE:
        base = Path(cfg.services_dir)
        rows = [
            (base / f"{name}.ts", "service/Service.ts.j2"),
            (base / "__tests__" / f"{name}.test.ts", "service/Service.test.ts.j2"),
        ]
    else:
        base = Path(cfg.pages_dir) / identifiers.entity_name
        rows = [
            (base / f"{name}.tsx", "page/Page.tsx.j2"),
            (base / f"{name}.test.tsx", "page/Page.test.tsx.j2"),
            (base / "index.ts", "page/index.ts.j2"),
        ]

    return [LayoutEntry(relative_path=path, template_key=key) for path, key in rows]


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ArtifactGenerator:
    """Renders and writes the artifacts of one generation request.

    One instance can serve many requests; it keeps no per-run state.
    """

    def __init__(
        self,
        config: ScaffoldConfig | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config or ScaffoldConfig()
        self.renderer = renderer or TemplateRenderer(self.config.templates_dir)

    # -- Public API --------------------------------------------------------

    def plan(self, request: GenerationRequest) -> list[RenderedArtifact]:
        """Render every artifact for *request* without writing anything."""
        identifiers = derive(request.base_name, request.artifact_kind)
        context = build_context(request, identifiers)
        return [
            RenderedArtifact(
                relative_path=entry.relative_path,
                content=self.renderer.render(entry.template_key, context),
                template_key=entry.template_key,
            )
            for entry in layout(request.artifact_kind, identifiers, self.config)
        ]

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Render and write every artifact, then register pages.

        Raises:
            InvalidNameError: Before anything is written.
            TemplateError: At the failing artifact; earlier files remain.
        """
        identifiers = derive(request.base_name, request.artifact_kind)
        context = build_context(request, identifiers)
        root = Path(request.output_root)
        result = GenerationResult(artifact_kind=request.artifact_kind, identifiers=identifiers)

        for entry in layout(request.artifact_kind, identifiers, self.config):
            target = root / entry.relative_path
            if target.exists() and not self.config.overwrite:
                result.skipped.append(target)
                continue
            content = self.renderer.render(entry.template_key, context)
            write_text_file(target, content)
            result.written.append(target)

        if request.artifact_kind is ArtifactKind.PAGE:
            result.registry = self.register_route(root, identifiers, str(context["route"]))

        return result

    def register_route(
        self, root: Path, identifiers: DerivedIdentifiers, route: str
    ) -> PatchResult:
        """Patch the routes file under *root*; anchor failures are reported, not raised."""
        patcher = RegistryPatcher(self.config.routes_path(root), self.config.pages_alias)
        entry = build_route_entry(identifiers, route, self.config.pages_alias)
        try:
            return patcher.apply(entry)
        except RegistryPatchError as exc:
            return PatchResult(status=PatchStatus.SKIPPED, path=patcher.path, reason=str(exc))

    async def format_files(self, paths: list[Path], cwd: Path | None = None) -> bool:
        """Run the configured formatter over *paths*.

        Formatting is cosmetic: every failure is downgraded to a warning and
        reported through the return value.
        """
        if not self.config.format_output or not paths:
            return False
        # Absolute paths, since the formatter runs inside *cwd*.
        cmd = shlex.split(self.config.formatter_command)
        cmd += [str(Path(p).resolve()) for p in paths]
        try:
            returncode, _, stderr = await run_command(
                cmd, cwd=cwd, timeout=self.config.formatter_timeout
            )
        except OSError as exc:
            print_warning(f"Could not format files: {exc}")
            return False
        if returncode != 0:
            print_warning(f"Could not format files: {stderr or f'exit code {returncode}'}")
            return False
        return True
