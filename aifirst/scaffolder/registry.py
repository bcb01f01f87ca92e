"""Route registry patching.

Merges one generated page into the shared routes file without a parser: the
document is treated as text with two anchors.

* Imports anchor: the end of the last ``import ... from '<alias>/...'``
  statement, falling back to the first import statement of the file.
  Statements may span several lines.
* Entries anchor: the opening ``[`` of ``const routes ... = [``.

Decision sequence for one entry:

1. No document: create one holding a single import and a one-entry array.
2. The entry's route path is already registered: leave the text untouched.
3. Otherwise insert the import after the imports anchor and the registration
   block right after the entries anchor, using the document's own line
   ending.  A missing anchor raises ``RegistryPatchError`` and nothing is
   written.

Applying the same entry twice yields the same text as applying it once.
"""

from __future__ import annotations

import re
from pathlib import Path

from ..utils import atomic_write
from .errors import RegistryPatchError
from .models import DerivedIdentifiers, PatchResult, PatchStatus, RegistryEntry

# One whole import statement, which may span several lines.
_IMPORT_STATEMENT = re.compile(
    r"^[ \t]*import\b\s*(?:[^;'\"]*?\bfrom\s*)?(['\"])(?P<module>[^'\"]+)\1[ \t]*;?",
    re.MULTILINE,
)
_ROUTES_ARRAY = re.compile(r"^.*\bconst\s+routes\b.*\[", re.MULTILINE)


def build_route_entry(
    identifiers: DerivedIdentifiers,
    route: str,
    pages_alias: str = "@pages",
) -> RegistryEntry:
    """Build the registry entry for a generated page."""
    page = identifiers.pascal_name
    return RegistryEntry(
        import_statement=f"import {{ {page} }} from '{pages_alias}/{identifiers.entity_name}';",
        registration_block=(
            "  {\n"
            f"    path: '{route}',\n"
            f"    element: <{page} />,\n"
            "  },"
        ),
        uniqueness_key=route,
    )


def is_registered(document: str, entry: RegistryEntry) -> bool:
    """Return ``True`` if *document* already routes ``entry.uniqueness_key``."""
    pattern = re.compile(
        r"\bpath\s*:\s*(['\"`])" + re.escape(entry.uniqueness_key) + r"\1"
    )
    return pattern.search(document) is not None


def patch_document(
    document: str | None,
    entry: RegistryEntry,
    pages_alias: str = "@pages",
) -> PatchResult:
    """Merge *entry* into *document* and return the resulting text.

    Pure: the caller decides whether and where to write ``result.content``.

    Raises:
        RegistryPatchError: If *document* exists but lacks either anchor.
    """
    if document is None:
        return PatchResult(status=PatchStatus.CREATED, content=_bootstrap_document(entry))

    if is_registered(document, entry):
        return PatchResult(
            status=PatchStatus.ALREADY_EXISTS,
            content=document,
            reason=f"Route {entry.uniqueness_key} already exists",
        )

    import_anchor = _find_import_anchor(document, pages_alias)
    if import_anchor is None:
        raise RegistryPatchError(None, "imports")
    if _ROUTES_ARRAY.search(document) is None:
        raise RegistryPatchError(None, "routes array")

    newline = _line_ending(document)
    content = document
    if entry.import_statement not in content:
        content = (
            content[:import_anchor] + newline + entry.import_statement + content[import_anchor:]
        )

    # Re-located after the import insertion shifted offsets.
    array_match = _ROUTES_ARRAY.search(content)
    if array_match is None:
        raise RegistryPatchError(None, "routes array")
    insert_at = array_match.end()
    block = entry.registration_block.replace("\n", newline)
    content = content[:insert_at] + newline + block + content[insert_at:]

    return PatchResult(status=PatchStatus.UPDATED, content=content)


class RegistryPatcher:
    """Applies registry entries to the routes file on disk."""

    def __init__(self, path: str | Path, pages_alias: str = "@pages") -> None:
        self.path = Path(path)
        self.pages_alias = pages_alias

    def apply(self, entry: RegistryEntry) -> PatchResult:
        """Read, patch and (if changed) atomically rewrite the registry file.

        Raises:
            RegistryPatchError: If the existing file has no usable anchors.
                The file is not modified.
        """
        document: str | None = None
        if self.path.exists():
            # newline="" keeps CRLF documents intact.
            with self.path.open(encoding="utf-8", newline="") as handle:
                document = handle.read()

        try:
            result = patch_document(document, entry, self.pages_alias)
        except RegistryPatchError as exc:
            raise RegistryPatchError(self.path, exc.anchor) from exc

        if result.changed:
            atomic_write(self.path, result.content)
        return result.model_copy(update={"path": self.path})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _find_import_anchor(document: str, pages_alias: str) -> int | None:
    """Offset at the end of the line holding the last ``pages_alias`` import.

    Falls back to the first import statement of the document.  Statements
    are matched whole, so a multi-line ``import { ... } from`` is never split.
    """
    first = None
    last_alias = None
    for match in _IMPORT_STATEMENT.finditer(document):
        if first is None:
            first = match
        module = match.group("module")
        if module == pages_alias or module.startswith(pages_alias + "/"):
            last_alias = match
    anchor = last_alias or first
    if anchor is None:
        return None
    line_end = document.find("\n", anchor.end())
    if line_end == -1:
        return len(document)
    if line_end > 0 and document[line_end - 1] == "\r":
        return line_end - 1
    return line_end


def _line_ending(document: str) -> str:
    return "\r\n" if "\r\n" in document else "\n"


def _bootstrap_document(entry: RegistryEntry) -> str:
    return (
        f"{entry.import_statement}\n"
        "\n"
        "export const routes = [\n"
        f"{entry.registration_block}\n"
        "];\n"
    )
