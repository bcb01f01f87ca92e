"""Exception hierarchy for the scaffolding engine.

Every error raised by the engine derives from ``ScaffoldError`` so the CLI
can report failures uniformly.  Name and template errors are fatal to a
generation run; ``RegistryPatchError`` is isolated to the registration step.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""


class InvalidNameError(ScaffoldError):
    """Raised when a base name is empty or contains non-alphanumeric characters."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"Invalid name {name!r}: {message}")


class UnknownArtifactKindError(ScaffoldError):
    """Raised when an artifact kind (or CLI alias) is not in the fixed set."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(
            f"Unknown generator type: {kind} (expected component, store, service or page)"
        )


class TemplateError(ScaffoldError):
    """Raised when a template cannot be rendered.

    Attributes:
        template: Name of the template (or ``"<string>"`` for inline sources).
        reason: One of ``"missing variable"``, ``"malformed block"`` or
            ``"not found"``.
        detail: The underlying Jinja2 message.
    """

    MISSING_VARIABLE = "missing variable"
    MALFORMED_BLOCK = "malformed block"
    NOT_FOUND = "not found"

    def __init__(self, template: str, reason: str, detail: str = "") -> None:
        self.template = template
        self.reason = reason
        self.detail = detail
        message = f"Template {template} failed ({reason})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class RegistryPatchError(ScaffoldError):
    """Raised when an existing registry file has no recognisable anchor.

    The file is left untouched; callers report that registration was skipped.
    """

    def __init__(self, path: Path | str | None, anchor: str) -> None:
        self.path = Path(path) if path is not None else None
        self.anchor = anchor
        where = str(self.path) if self.path is not None else "registry document"
        super().__init__(f"Could not find the {anchor} anchor in {where}")
