"""Tests for the Jinja2 template renderer.

Covers:
- Substitution, conditionals and loops with ``loop.last``
- Raw (unescaped) injection of source snippets
- Missing variables and malformed blocks raising ``TemplateError``
- File templates, tree rendering and template listing
"""

from __future__ import annotations

from pathlib import Path

import pytest

from aifirst.scaffolder import TemplateError, TemplateRenderer


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def custom_renderer(tmp_path: Path) -> TemplateRenderer:
    """Renderer over a small throwaway template tree."""
    (tmp_path / "kit" / "nested").mkdir(parents=True)
    (tmp_path / "kit" / "a.txt.j2").write_text("A={{ value }}\n", encoding="utf-8")
    (tmp_path / "kit" / "nested" / "b.txt.j2").write_text("B={{ value }}\n", encoding="utf-8")
    (tmp_path / "broken.j2").write_text("{% if x %}never closed", encoding="utf-8")
    return TemplateRenderer(tmp_path)


class TestRenderString:
    def test_substitution(self, renderer):
        assert renderer.render_string("Hello {{ name }}", {"name": "World"}) == "Hello World"

    def test_conditional_with_else(self, renderer):
        source = "{% if flag %}yes{% else %}no{% endif %}"
        assert renderer.render_string(source, {"flag": True}) == "yes"
        assert renderer.render_string(source, {"flag": False}) == "no"

    def test_loop_suppresses_trailing_comma(self, renderer):
        source = "[{% for p in props %}{{ p.name }}{% if not loop.last %}, {% endif %}{% endfor %}]"
        context = {"props": ({"name": "a"}, {"name": "b"}, {"name": "c"})}
        assert renderer.render_string(source, context) == "[a, b, c]"

    def test_loop_preserves_order(self, renderer):
        source = "{% for a in actions %}{{ a }};{% endfor %}"
        actions = ("fetchList", "create", "update", "delete")
        assert renderer.render_string(source, {"actions": actions}) == "fetchList;create;update;delete;"

    def test_raw_injection_is_not_escaped(self, renderer):
        snippet = "<Button onClick={() => go('x & y')} />"
        assert renderer.render_string("{{ code }}", {"code": snippet}) == snippet

    def test_filters(self, renderer):
        assert renderer.render_string("{{ n | kebab_case }}", {"n": "OrderItem"}) == "order-item"
        assert renderer.render_string("{{ n | title_case }}", {"n": "OrderItem"}) == "Order Item"

    def test_only_referenced_variables_is_enough(self, renderer):
        source = "{{ a }}{% if b %}{% for c in cs %}{{ c.x }}{% endfor %}{% endif %}"
        assert renderer.render_string(source, {"a": 1, "b": True, "cs": [{"x": 2}]}) == "12"


class TestRenderErrors:
    def test_missing_variable(self, renderer):
        with pytest.raises(TemplateError) as exc_info:
            renderer.render_string("Hello {{ missing }}", {})
        assert exc_info.value.reason == TemplateError.MISSING_VARIABLE
        assert "missing" in str(exc_info.value)

    def test_missing_conditional_variable(self, renderer):
        with pytest.raises(TemplateError) as exc_info:
            renderer.render_string("{% if missing %}x{% endif %}", {})
        assert exc_info.value.reason == TemplateError.MISSING_VARIABLE

    def test_missing_record_field(self, renderer):
        with pytest.raises(TemplateError) as exc_info:
            renderer.render_string("{% for p in ps %}{{ p.nope }}{% endfor %}", {"ps": [{"name": "a"}]})
        assert exc_info.value.reason == TemplateError.MISSING_VARIABLE

    @pytest.mark.parametrize(
        "source",
        ["{% if x %}unterminated", "{% for a in b %}unterminated", "{{ unclosed"],
    )
    def test_malformed_block(self, renderer, source):
        with pytest.raises(TemplateError) as exc_info:
            renderer.render_string(source, {"x": True, "b": []})
        assert exc_info.value.reason == TemplateError.MALFORMED_BLOCK

    def test_malformed_file_template(self, custom_renderer):
        with pytest.raises(TemplateError) as exc_info:
            custom_renderer.render("broken.j2", {"x": True})
        assert exc_info.value.reason == TemplateError.MALFORMED_BLOCK
        assert exc_info.value.template == "broken.j2"

    def test_unknown_template(self, renderer):
        with pytest.raises(TemplateError) as exc_info:
            renderer.render("does/not/exist.j2", {})
        assert exc_info.value.reason == TemplateError.NOT_FOUND


class TestFileTemplates:
    def test_render_tree_preserves_structure(self, custom_renderer):
        rendered = custom_renderer.render_tree("kit", {"value": 7})
        assert rendered == {
            Path("a.txt"): "A=7\n",
            Path("nested/b.txt"): "B=7\n",
        }

    def test_render_tree_unknown_prefix(self, custom_renderer):
        with pytest.raises(TemplateError):
            custom_renderer.render_tree("nope", {})

    def test_list_templates(self, custom_renderer):
        assert custom_renderer.list_templates("kit") == ["kit/a.txt.j2", "kit/nested/b.txt.j2"]
        assert custom_renderer.list_templates("missing") == []

    def test_bundled_templates_present(self, renderer):
        templates = renderer.list_templates()
        for key in (
            "component/Component.tsx.j2",
            "component/Component.test.tsx.j2",
            "component/index.ts.j2",
            "store/Store.ts.j2",
            "store/Store.test.ts.j2",
            "store/apiClient.ts.j2",
            "service/Service.ts.j2",
            "service/Service.test.ts.j2",
            "page/Page.tsx.j2",
            "page/Page.test.tsx.j2",
            "page/index.ts.j2",
            "app/src/routes.tsx.j2",
        ):
            assert key in templates

    def test_starter_app_includes_dotfiles(self, renderer):
        rendered = renderer.render_tree(
            "app",
            {"app_name": "Demo", "description": "Demo", "pages_alias": "@pages"},
        )
        assert Path(".prettierrc") in rendered
        assert Path("src/services/apiClient.ts") in rendered
        assert "createApiClient" in rendered[Path("src/services/apiClient.ts")]
        assert '"name": "demo"' in rendered[Path("package.json")]

    def test_starter_app_names_from_filters(self, renderer):
        rendered = renderer.render_tree(
            "app",
            {"app_name": "ShopFront", "description": "Shop", "pages_alias": "@pages"},
        )
        assert '"name": "shop-front"' in rendered[Path("package.json")]
        assert "<title>Shop Front</title>" in rendered[Path("index.html")]

    def test_starter_app_auth_module(self, renderer):
        rendered = renderer.render_tree(
            "app",
            {"app_name": "demo", "description": "Demo", "pages_alias": "@pages"},
        )
        for rel in (
            "src/auth/AuthStore.ts",
            "src/auth/AuthProvider.tsx",
            "src/auth/types.ts",
            "src/auth/index.ts",
            "src/auth/__tests__/AuthStore.test.ts",
            "src/hooks/useAuth.ts",
        ):
            assert Path(rel) in rendered, rel

        auth_store = rendered[Path("src/auth/AuthStore.ts")]
        assert "private readonly client: ApiClient," in auth_store
        assert "this.client.setAuthToken(token);" in auth_store
        assert "new AuthStore" not in auth_store

        root_store = rendered[Path("src/stores/index.tsx")]
        assert "public readonly authStore: AuthStore;" in root_store
        assert "this.authStore = new AuthStore(apiClient);" in root_store

        assert "export const useAuth = (): AuthStore => useStore().authStore;" in rendered[
            Path("src/hooks/useAuth.ts")
        ]
        assert "window.addEventListener('auth:logout', handleLogout);" in rendered[
            Path("src/auth/AuthProvider.tsx")
        ]
        assert "<AuthProvider>" in rendered[Path("src/App.tsx")]
        assert "dispatchEvent(new Event('auth:logout'))" in rendered[
            Path("src/services/apiClient.ts")
        ]
