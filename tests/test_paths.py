"""
Tests for install path resolution.
"""

import logging
from pathlib import Path

import pytest

from patchoverview.core.models import InstallPathRule, PackageDeclaration
from patchoverview.core.paths import PathResolver, flatten_rules


@pytest.fixture
def root(tmp_path):
    return tmp_path / "web"


class TestFlattenRules:
    """Test type -> template flattening."""

    def test_types_share_a_template(self):
        rules = [InstallPathRule("web/modules/contrib/{$name}", ["drupal-module", "drupal-custom-module"])]

        assert flatten_rules(rules) == {
            "drupal-module": "web/modules/contrib/{$name}",
            "drupal-custom-module": "web/modules/contrib/{$name}",
        }

    def test_qualifier_prefix_is_dropped(self):
        rule = InstallPathRule.from_qualifiers("web/themes/contrib/{$name}", ["type:drupal-theme"])

        assert rule.types == ["drupal-theme"]

    def test_later_rule_wins(self, caplog):
        rules = [
            InstallPathRule("first/{$name}", ["module"]),
            InstallPathRule("second/{$name}", ["module"]),
        ]

        with caplog.at_level(logging.WARNING):
            templates = flatten_rules(rules)

        assert templates == {"module": "second/{$name}"}
        assert "module" in caplog.text

    def test_repeated_identical_template_is_quiet(self, caplog):
        rules = [
            InstallPathRule("same/{$name}", ["module"]),
            InstallPathRule("same/{$name}", ["module"]),
        ]

        with caplog.at_level(logging.WARNING):
            flatten_rules(rules)

        assert caplog.text == ""


class TestPathResolver:
    """Test absolute install directories."""

    def test_template_substitutes_short_name(self, root):
        resolver = PathResolver(root, [InstallPathRule("web/modules/contrib/{$name}", ["module"])])

        path = resolver.resolve(PackageDeclaration("vendor/foo", "module"))

        assert path == root.parent / "web" / "modules" / "contrib" / "foo"

    def test_bare_name_placeholder(self, root):
        resolver = PathResolver(root, [InstallPathRule("web/modules/contrib/{name}", ["module"])])

        path = resolver.resolve(PackageDeclaration("vendor/foo", "module"))

        assert path == root.parent / "web" / "modules" / "contrib" / "foo"

    def test_unknown_type_falls_back_to_vendor(self, root):
        resolver = PathResolver(root, [InstallPathRule("web/modules/contrib/{$name}", ["module"])])

        path = resolver.resolve(PackageDeclaration("symfony/console", "library"))

        assert path == root.parent / "vendor" / "console"

    def test_no_rules_at_all(self, root):
        path = PathResolver(root, []).resolve(PackageDeclaration("vendor/foo", "module"))

        assert path == root.parent / "vendor" / "foo"

    def test_path_is_absolute_and_normalized(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        resolver = PathResolver(Path("web"), [InstallPathRule("web/modules/{$name}", ["module"])])

        path = resolver.resolve(PackageDeclaration("vendor/foo", "module"))

        assert path.is_absolute()
        assert ".." not in path.parts
        assert path == tmp_path / "web" / "modules" / "foo"

    def test_short_name_of_unscoped_package(self, root):
        path = PathResolver(root, []).resolve(PackageDeclaration("standalone", "library"))

        assert path == root.parent / "vendor" / "standalone"
