"""
Tests for the rule and adapter registry.
"""

from ctorlint.csharp_adapter import CSharpAdapter
from ctorlint.registry import Registry, setup_adapters
from ctorlint_rules.style_constructor_arguments import ConstructorArgumentsRule


class TestRegistry:

    def setup_method(self):
        self.registry = Registry()

    def test_discover_rules(self):
        assert self.registry.discover_rules(["ctorlint_rules"]) == 1
        assert self.registry.get_rule_ids() == ["style.constructor_arguments"]
        # Rediscovery registers nothing new
        assert self.registry.discover_rules(["ctorlint_rules"]) == 0

    def test_discover_missing_package(self):
        assert self.registry.discover_rules(["no_such_rules_package"]) == 0

    def test_enabled_rules(self):
        self.registry.register_rule(ConstructorArgumentsRule())

        assert len(self.registry.get_enabled_rules(["*"], "csharp")) == 1
        assert len(self.registry.get_enabled_rules(["style.*"], "csharp")) == 1
        assert self.registry.get_enabled_rules(["naming.*"], "csharp") == []
        assert self.registry.get_enabled_rules(["*"], "python") == []
        assert self.registry.get_enabled_rules([], "csharp") == []

    def test_adapters(self):
        setup_adapters(self.registry)

        assert self.registry.list_supported_languages() == ["csharp"]
        assert isinstance(self.registry.get_adapter_for_file("src/Point.CS"), CSharpAdapter)
        assert self.registry.get_adapter_for_file("main.py") is None

    def test_clear(self):
        self.registry.register_rule(ConstructorArgumentsRule())
        self.registry.clear()

        assert self.registry.get_all_rules() == []
