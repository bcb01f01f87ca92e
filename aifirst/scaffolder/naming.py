"""Identifier derivation.

Turns a user-supplied base name such as ``"orderItem"`` or ``"UserPage"`` into
the identifiers a generation run needs::

    derive("orderItem", ArtifactKind.COMPONENT)
    # entity_name="OrderItem", pascal_name="OrderItem", camel_name="orderItem",
    # kebab_name="order-item", title_text="Order Item"

Case conversion is a single pass over lowercase->uppercase boundaries.  Runs of
capitals (acronyms such as ``"HTTPClient"``) are not split.
"""

from __future__ import annotations

import re

from .errors import InvalidNameError
from .models import ArtifactKind, DerivedIdentifiers

_VALID_NAME = re.compile(r"^[A-Za-z0-9]+$")
_WORD_BOUNDARY = re.compile(r"([a-z])([A-Z])")


def derive(base_name: str, artifact_kind: ArtifactKind | str) -> DerivedIdentifiers:
    """Derive every identifier for *base_name* as an artifact of *artifact_kind*.

    The kind suffix (``Store``, ``Service``, ``Page``) is stripped when present
    and re-appended canonically, so ``derive("User", "page")`` and
    ``derive("UserPage", "page")`` are equal.

    Raises:
        InvalidNameError: If the name is empty, contains characters outside
            ``[A-Za-z0-9]``, or is nothing but the kind suffix.
    """
    kind = ArtifactKind.parse(artifact_kind)
    name = (base_name or "").strip()
    if not name:
        raise InvalidNameError(base_name, "name must not be empty")
    if not _VALID_NAME.match(name):
        raise InvalidNameError(base_name, "only letters and digits are allowed")

    entity = to_pascal(strip_suffix(name, kind.suffix))
    if not entity:
        raise InvalidNameError(base_name, f"name is only the {kind.value} suffix")

    pascal = entity + kind.suffix
    return DerivedIdentifiers(
        entity_name=entity,
        pascal_name=pascal,
        camel_name=to_camel(pascal),
        kebab_name=to_kebab(entity),
        title_text=to_title(entity),
    )


def strip_suffix(name: str, suffix: str) -> str:
    """Remove *suffix* from the end of *name*, if present."""
    if suffix and name.endswith(suffix):
        return name[: -len(suffix)]
    return name


def to_pascal(name: str) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    return name[:1].upper() + name[1:]


def to_camel(name: str) -> str:
    """Lowercase the first character, leaving the rest untouched."""
    return name[:1].lower() + name[1:]


def to_kebab(name: str) -> str:
    """``"OrderItem"`` -> ``"order-item"``."""
    return _WORD_BOUNDARY.sub(r"\1-\2", name).lower()


def to_title(name: str) -> str:
    """``"OrderItem"`` -> ``"Order Item"``."""
    return _WORD_BOUNDARY.sub(r"\1 \2", name)
