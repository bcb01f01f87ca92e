"""Scaffolder configuration.

Centralised, typed configuration for a scaffolding session.  All settings use
a Pydantic v2 model so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ScaffoldConfig(BaseModel):
    """Global scaffolder configuration.

    Instances are typically created once by the CLI entry point and then
    passed to ``ArtifactGenerator``.  Directory fields are relative to the
    project root of each generation request.
    """

    project_root: Path = Field(default=Path("."))
    templates_dir: Path | None = Field(
        default=None, description="Override for the bundled template directory"
    )

    # Output locations per artifact kind
    components_dir: str = Field(default="src/components")
    stores_dir: str = Field(default="src/stores")
    services_dir: str = Field(default="src/services")
    pages_dir: str = Field(default="src/pages")

    # Route registry
    routes_file: str = Field(default="src/routes.tsx")
    pages_alias: str = Field(
        default="@pages", description="Module alias used in generated page imports"
    )

    # Write policy
    overwrite: bool = Field(
        default=True, description="Replace existing artifacts when regenerating"
    )

    # External formatter
    format_output: bool = Field(default=True)
    formatter_command: str = Field(default="npx prettier --write")
    formatter_timeout: int = Field(default=120, ge=1, description="Formatter timeout in seconds")

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    def resolve(self, relative: str | Path, root: Path | None = None) -> Path:
        """Resolve *relative* against *root* (defaults to ``project_root``)."""
        return (root if root is not None else self.project_root) / relative

    def routes_path(self, root: Path | None = None) -> Path:
        """Path to the route registry file."""
        return self.resolve(self.routes_file, root)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to ``<project_root>/aifirst.json``.

        Returns:
            The resolved path where the file was written.
        """
        target = path or (self.project_root / "aifirst.json")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ScaffoldConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            AIFIRST_PROJECT_ROOT, AIFIRST_TEMPLATES_DIR, AIFIRST_ROUTES_FILE,
            AIFIRST_PAGES_ALIAS, AIFIRST_OVERWRITE, AIFIRST_FORMAT,
            AIFIRST_FORMATTER, AIFIRST_FORMATTER_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("AIFIRST_PROJECT_ROOT"):
            kwargs["project_root"] = Path(os.environ["AIFIRST_PROJECT_ROOT"])
        if os.environ.get("AIFIRST_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["AIFIRST_TEMPLATES_DIR"])
        if os.environ.get("AIFIRST_ROUTES_FILE"):
            kwargs["routes_file"] = os.environ["AIFIRST_ROUTES_FILE"]
        if os.environ.get("AIFIRST_PAGES_ALIAS"):
            kwargs["pages_alias"] = os.environ["AIFIRST_PAGES_ALIAS"]
        if os.environ.get("AIFIRST_OVERWRITE"):
            kwargs["overwrite"] = _env_bool(os.environ["AIFIRST_OVERWRITE"])
        if os.environ.get("AIFIRST_FORMAT"):
            kwargs["format_output"] = _env_bool(os.environ["AIFIRST_FORMAT"])
        if os.environ.get("AIFIRST_FORMATTER"):
            kwargs["formatter_command"] = os.environ["AIFIRST_FORMATTER"]
        if os.environ.get("AIFIRST_FORMATTER_TIMEOUT"):
            kwargs["formatter_timeout"] = int(os.environ["AIFIRST_FORMATTER_TIMEOUT"])
        return cls(**kwargs)


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
