"""Checks that the Sphinx sources reference importable objects."""

import importlib
import re
from pathlib import Path

import pytest

SOURCE = Path(__file__).resolve().parent.parent / "docs" / "source"
DIRECTIVE = re.compile(r"^\.\. auto(module|function|class):: (\S+)$", re.MULTILINE)


def documented_targets():
    return DIRECTIVE.findall((SOURCE / "api.md").read_text(encoding="utf-8"))


class TestDocsSources:
    def test_index_links_api_page(self):
        index = (SOURCE / "index.md").read_text(encoding="utf-8")
        assert "{toctree}" in index
        assert "api" in index.split("{toctree}", 1)[1]

    def test_api_page_documents_every_public_module(self):
        package = SOURCE.parent.parent / "budget_review"
        public = {
            ".".join(path.relative_to(package.parent).with_suffix("").parts)
            for path in package.rglob("*.py")
            if not path.name.startswith("_")
        }
        documented = {target for kind, target in documented_targets() if kind == "module"}
        assert public == documented

    @pytest.mark.parametrize(("kind", "target"), documented_targets())
    def test_target_importable(self, kind, target):
        if kind == "module":
            importlib.import_module(target)
        else:
            module_name, _, attribute = target.rpartition(".")
            assert hasattr(importlib.import_module(module_name), attribute)
