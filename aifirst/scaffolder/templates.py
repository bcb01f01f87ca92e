"""Jinja2 template rendering for artifact scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``aifirst/scaffolder/templates/`` directory and renders them with a template
context.  Supports single-file rendering, string-based rendering for inline
template content, and tree rendering for the starter application.

Generated artifacts are source code, not markup, so autoescaping is disabled
and values are injected raw.  Undefined variables are an error rather than an
empty string.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    UndefinedError,
)
from jinja2 import Template as _JinjaTemplate

from .errors import TemplateError
from .naming import to_kebab, to_title


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for artifact scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Supported constructs are the Jinja2 subset the
    bundled templates use: ``{{ value }}`` substitution, ``{% if %}`` /
    ``{% else %}`` blocks and ``{% for %}`` loops with ``loop.last`` for
    trailing-comma suppression.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["kebab_case"] = to_kebab
        self.env.filters["title_case"] = to_title

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: Mapping[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"page/Page.tsx.j2"``).
            context: Mapping of variables available inside the template.

        Returns:
            The rendered template content as a string.

        Raises:
            TemplateError: If the template does not exist, is malformed, or
                references a variable missing from *context*.
        """
        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound as exc:
            raise TemplateError(template_path, TemplateError.NOT_FOUND, str(exc)) from exc
        except TemplateSyntaxError as exc:
            raise TemplateError(
                template_path, TemplateError.MALFORMED_BLOCK, _syntax_detail(exc)
            ) from exc
        return _render(template, template_path, context)

    def render_string(self, template_string: str, context: Mapping[str, Any]) -> str:
        """Render an inline template string with the provided context.

        Useful for rendering small template fragments that are not stored as
        files (e.g. dynamically constructed content).
        """
        try:
            template = self.env.from_string(template_string)
        except TemplateSyntaxError as exc:
            raise TemplateError(
                "<string>", TemplateError.MALFORMED_BLOCK, _syntax_detail(exc)
            ) from exc
        return _render(template, "<string>", context)

    # -- Tree rendering ----------------------------------------------------

    def render_tree(
        self,
        template_prefix: str,
        context: Mapping[str, Any],
    ) -> dict[Path, str]:
        """Render every ``*.j2`` file under *template_prefix*.

        The directory structure is preserved: a template at
        ``app/src/App.tsx.j2`` rendered with ``template_prefix="app"`` is
        returned under the relative path ``src/App.tsx``.

        Returns:
            Mapping of relative output path to rendered content, in sorted
            template order.
        """
        prefix_path = self.template_dir / template_prefix
        if not prefix_path.is_dir():
            raise TemplateError(template_prefix, TemplateError.NOT_FOUND)

        rendered: dict[Path, str] = {}
        for template_key in self.list_templates(template_prefix):
            rel = Path(template_key).relative_to(template_prefix)
            rendered[rel.with_suffix("")] = self.render(template_key, context)

        return rendered

    # -- Utility -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of all ``.j2`` template paths under *prefix*.

        Paths are relative to the template root directory.
        """
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*.j2")
        )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _render(template: _JinjaTemplate, name: str, context: Mapping[str, Any]) -> str:
    try:
        return template.render(**context)
    except UndefinedError as exc:
        raise TemplateError(name, TemplateError.MISSING_VARIABLE, exc.message or "") from exc
    except TemplateSyntaxError as exc:
        raise TemplateError(name, TemplateError.MALFORMED_BLOCK, _syntax_detail(exc)) from exc


def _syntax_detail(exc: TemplateSyntaxError) -> str:
    if exc.lineno:
        return f"line {exc.lineno}: {exc.message}"
    return exc.message or ""
