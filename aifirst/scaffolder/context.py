"""Template context construction.

``build_context`` turns a ``GenerationRequest`` plus its derived identifiers
into the flat, read-only mapping consumed by the templates.  Feature flags are
expanded into derived sub-structures by a per-kind builder table; for example a
page with a store gets loading/error conditions, a default "Add" action and a
mock store shape for its test.

Every sequence in the context is a tuple and every record a read-only mapping,
in insertion order, because that order is the rendering order.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from .models import ArtifactKind, DerivedIdentifiers, FlagValue, GenerationRequest
from .naming import to_camel

TemplateContext = Mapping[str, Any]


# ---------------------------------------------------------------------------
# Flag defaults per kind
# ---------------------------------------------------------------------------

DEFAULT_FLAGS: dict[ArtifactKind, dict[str, FlagValue]] = {
    ArtifactKind.COMPONENT: {"antd": False, "styled": False},
    ArtifactKind.STORE: {"api": True},
    ArtifactKind.SERVICE: {"zod": True},
    ArtifactKind.PAGE: {"store": True, "service": True},
}

_TRUE_STRINGS = frozenset({"true", "yes", "1", "on"})


def resolve_flags(kind: ArtifactKind, flags: Mapping[str, FlagValue]) -> dict[str, FlagValue]:
    """Overlay user *flags* on the defaults for *kind*."""
    return {**DEFAULT_FLAGS[kind], **flags}


def _flag(flags: Mapping[str, FlagValue], name: str) -> bool:
    value = flags.get(name, False)
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def default_description(kind: ArtifactKind, ids: DerivedIdentifiers) -> str:
    """Description used when the request does not provide one."""
    if kind is ArtifactKind.COMPONENT:
        return f"{ids.pascal_name} component for the application"
    if kind is ArtifactKind.STORE:
        return f"{ids.pascal_name} store for state management"
    if kind is ArtifactKind.SERVICE:
        return f"API service for managing {ids.entity_name} resources"
    return f"{ids.entity_name} management page with CRUD operations"


def crud_action_names(entity: str) -> tuple[str, ...]:
    """The four CRUD action names shared by stores and page mocks."""
    return (
        f"fetch{entity}List",
        f"create{entity}",
        f"update{entity}",
        f"delete{entity}",
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_context(request: GenerationRequest, identifiers: DerivedIdentifiers) -> TemplateContext:
    """Build the immutable template context for *request*.

    Pure and deterministic: no I/O, and equal inputs produce equal contexts.
    """
    kind = request.artifact_kind
    flags = resolve_flags(kind, request.flags)
    description = flags.get("description")
    if not isinstance(description, str) or not description.strip():
        description = default_description(kind, identifiers)

    context: dict[str, Any] = {
        "artifact_kind": kind.value,
        "entity_name": identifiers.entity_name,
        "pascal_name": identifiers.pascal_name,
        "camel_name": identifiers.camel_name,
        "kebab_name": identifiers.kebab_name,
        "title_text": identifiers.title_text,
        "description": description,
    }
    context.update(_BUILDERS[kind](identifiers, flags))
    return _freeze(context)


# ---------------------------------------------------------------------------
# Per-kind builders
# ---------------------------------------------------------------------------

def _component_context(ids: DerivedIdentifiers, flags: Mapping[str, FlagValue]) -> dict[str, Any]:
    use_antd = _flag(flags, "antd")
    return {
        "component_name": ids.pascal_name,
        "category": str(flags.get("category", "UI Components")),
        "use_antd": use_antd,
        "antd_components": ["Card", "Button"] if use_antd else [],
        "has_styles": _flag(flags, "styled"),
        "props": [
            {
                "name": "title",
                "type": "string",
                "description": "The title to display",
                "optional": False,
                "default_value": "",
            },
            {
                "name": "loading",
                "type": "boolean",
                "description": "Loading state",
                "optional": True,
                "default_value": "false",
            },
        ],
    }


def _store_context(ids: DerivedIdentifiers, flags: Mapping[str, FlagValue]) -> dict[str, Any]:
    entity = ids.entity_name
    has_api = _flag(flags, "api")
    service_class = f"{entity}Service"
    fetch_list, create, update, delete = crud_action_names(entity)
    return {
        "store_name": ids.pascal_name,
        "has_api": has_api,
        "service_class": service_class if has_api else "",
        "api_service": to_camel(service_class) if has_api else "",
        "properties": [
            {"name": "data", "type": f"{entity}[]" if has_api else "any[]", "default_value": "[]"},
            {"name": "selectedId", "type": "string | null", "default_value": "null"},
            {"name": "loading", "type": "boolean", "default_value": "false"},
            {"name": "error", "type": "string | null", "default_value": "null"},
        ],
        "computed": [
            {
                "name": "count",
                "type": "number",
                "implementation": "return this.data.length;",
            },
            {
                "name": "selected",
                "type": f"{entity} | null" if has_api else "any | null",
                "implementation": "return this.data.find((item) => item.id === this.selectedId) || null;",
            },
        ],
        "actions": [
            {
                "name": "setSelectedId",
                "parameters": "id: string | null",
                "return_type": "void",
                "implementation": "this.selectedId = id;",
            },
        ],
        "api_actions": [
            {"name": fetch_list, "service_method": "list", "parameters": "", "arguments": ""},
            {
                "name": create,
                "service_method": "create",
                "parameters": f"input: Create{entity}Input",
                "arguments": "input",
            },
            {
                "name": update,
                "service_method": "update",
                "parameters": f"id: string, input: Update{entity}Input",
                "arguments": "id, input",
            },
            {"name": delete, "service_method": "remove", "parameters": "id: string", "arguments": "id"},
        ] if has_api else [],
    }


def _service_context(ids: DerivedIdentifiers, flags: Mapping[str, FlagValue]) -> dict[str, Any]:
    return {
        "service_name": ids.pascal_name,
        "has_zod": _flag(flags, "zod"),
        "endpoint": f"/{ids.kebab_name}s",
        "properties": [
            {"name": "id", "type": "string", "zod": "z.string()", "optional": False},
            {"name": "name", "type": "string", "zod": "z.string()", "optional": False},
            {"name": "description", "type": "string", "zod": "z.string()", "optional": True},
            {"name": "createdAt", "type": "string", "zod": "z.string()", "optional": False},
            {"name": "updatedAt", "type": "string", "zod": "z.string()", "optional": False},
        ],
        "create_properties": [
            {"name": "name", "type": "string", "zod": "z.string().min(1)", "optional": False},
            {"name": "description", "type": "string", "zod": "z.string()", "optional": True},
        ],
        "update_properties": [
            {"name": "name", "type": "string", "zod": "z.string().min(1)", "optional": True},
            {"name": "description", "type": "string", "zod": "z.string()", "optional": True},
        ],
    }


def _page_context(ids: DerivedIdentifiers, flags: Mapping[str, FlagValue]) -> dict[str, Any]:
    entity = ids.entity_name
    instance = to_camel(entity)
    has_store = _flag(flags, "store")
    store_name = f"{instance}Store"
    route = flags.get("route")
    if not isinstance(route, str) or not route.strip():
        route = f"/{entity.lower()}"

    mock_store_data: list[dict[str, Any]] = []
    if has_store:
        mock_store_data.append({
            "store_name": store_name,
            "properties": [
                {"name": "loading", "value": "false"},
                {"name": "error", "value": "null"},
                {"name": "data", "value": "[]"},
            ],
            "actions": [{"name": name} for name in crud_action_names(entity)],
        })

    return {
        "page_name": ids.pascal_name,
        "route": route,
        "has_store": has_store,
        "has_service": _flag(flags, "service"),
        "has_effects": has_store,
        "has_loading": has_store,
        "has_error": has_store,
        "has_actions": True,
        "store_name": store_name,
        "store_class": f"{entity}Store",
        "store_actions": [f"fetch{entity}List"] if has_store else [],
        "loading_condition": f"{store_name}.loading" if has_store else "false",
        "error_condition": f"{store_name}.error" if has_store else "false",
        "error_message": f"{store_name}.error" if has_store else "null",
        "actions": [
            {"text": f"Add {entity}", "type": "primary", "on_click": f"handleAdd{entity}"},
        ],
        "handlers": [
            {
                "name": f"handleAdd{entity}",
                "parameters": "",
                "body": f"console.log('Add {entity} clicked');",
            },
        ],
        "mock_store_data": mock_store_data,
    }


_BUILDERS: dict[ArtifactKind, Callable[[DerivedIdentifiers, Mapping[str, FlagValue]], dict[str, Any]]] = {
    ArtifactKind.COMPONENT: _component_context,
    ArtifactKind.STORE: _store_context,
    ArtifactKind.SERVICE: _service_context,
    ArtifactKind.PAGE: _page_context,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _freeze(value: Any) -> Any:
    """Recursively convert dicts to read-only mappings and lists to tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value
