"""Integration tests for the create-then-generate workflow.

These tests create an application from the bundled templates, generate
every artifact kind into it through the CLI, and verify the generated tree
and the shared routes file.

No external tools (npm, prettier) are required.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from aifirst.cli import main


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    """A freshly created application."""
    code = main(["create-app", "shop-front", "--root", str(tmp_path), "--skip-install", "--no-format"])
    assert code == 0
    return tmp_path / "shop-front"


def _generate(app_dir: Path, *argv: str) -> int:
    return main(["g", *argv, "--root", str(app_dir), "--no-format"])


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestCreateApp:
    def test_package_json_is_valid(self, app_dir: Path):
        package = json.loads((app_dir / "package.json").read_text(encoding="utf-8"))
        assert package["name"] == "shop-front"
        assert "mobx" in package["dependencies"]
        assert "@pages/(.*)" in json.dumps(package["jest"])

    def test_tsconfig_is_valid(self, app_dir: Path):
        tsconfig = json.loads((app_dir / "tsconfig.json").read_text(encoding="utf-8"))
        assert "compilerOptions" in tsconfig

    def test_routes_file_is_empty_array(self, app_dir: Path):
        routes = (app_dir / "src" / "routes.tsx").read_text(encoding="utf-8")
        assert "export const routes: RouteObject[] = [" in routes
        assert "path:" not in routes

    def test_root_store_owns_stores(self, app_dir: Path):
        stores = (app_dir / "src" / "stores" / "index.tsx").read_text(encoding="utf-8")
        assert "class RootStore" in stores
        assert "export const useStore" in stores


class TestGenerateIntoApp:
    def test_every_kind(self, app_dir: Path):
        assert _generate(app_dir, "component", "ProductCard") == 0
        assert _generate(app_dir, "service", "ProductService") == 0
        assert _generate(app_dir, "store", "ProductStore") == 0
        assert _generate(app_dir, "page", "ProductPage") == 0

        src = app_dir / "src"
        for rel in (
            "components/ProductCard/ProductCard.tsx",
            "components/ProductCard/index.ts",
            "services/ProductService.ts",
            "services/__tests__/ProductService.test.ts",
            "stores/ProductStore.ts",
            "stores/__tests__/ProductStore.test.ts",
            "pages/Product/ProductPage.tsx",
            "pages/Product/ProductPage.test.tsx",
            "pages/Product/index.ts",
        ):
            assert (src / rel).exists(), rel

    def test_pages_share_one_registry(self, app_dir: Path):
        assert _generate(app_dir, "page", "Product") == 0
        assert _generate(app_dir, "page", "OrderHistory") == 0

        routes = (app_dir / "src" / "routes.tsx").read_text(encoding="utf-8")
        assert "import type { RouteObject } from 'react-router-dom';" in routes
        assert "import { ProductPage } from '@pages/Product';" in routes
        assert "import { OrderHistoryPage } from '@pages/OrderHistory';" in routes
        assert "path: '/product'" in routes
        assert "path: '/orderhistory'" in routes
        # Most recent registration comes first.
        assert routes.index("/orderhistory") < routes.index("/product")

    def test_regenerating_page_keeps_registry_stable(self, app_dir: Path):
        assert _generate(app_dir, "page", "Product") == 0
        routes_file = app_dir / "src" / "routes.tsx"
        first = routes_file.read_text(encoding="utf-8")

        assert _generate(app_dir, "page", "Product") == 0

        assert routes_file.read_text(encoding="utf-8") == first
        assert first.count("path: '/product'") == 1
        assert first.count("import { ProductPage }") == 1
