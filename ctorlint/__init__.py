"""
ctorlint engine package.

This package checks and fixes the layout of C# constructor parameter lists,
built on Tree-sitter.
"""

from .types import (
    Finding, Diagnostic, RuleMeta, Rule, RuleContext, Edit, Requires,
    LanguageAdapter, AnalysisCancelled, Severity
)

from .syntax import Parameter, ConstructorDeclaration

from .registry import (
    register_rule, register_adapter, get_adapter, get_rule,
    get_all_rules, get_rules_for_language, get_enabled_rules,
    get_all_adapters, list_supported_languages, clear
)

from .config import (
    EngineConfig, load_config, get_default_config, save_config, find_config_file, get_rule_severity
)

__version__ = "0.1.0"

__all__ = [
    # Types
    "Finding", "Diagnostic", "RuleMeta", "Rule", "RuleContext", "Edit", "Requires",
    "LanguageAdapter", "AnalysisCancelled", "Severity",

    # Syntax model
    "Parameter", "ConstructorDeclaration",

    # Registry
    "register_rule", "register_adapter", "get_adapter", "get_rule",
    "get_all_rules", "get_rules_for_language", "get_enabled_rules",
    "get_all_adapters", "list_supported_languages", "clear",

    # Config
    "EngineConfig", "load_config", "get_default_config", "save_config", "find_config_file", "get_rule_severity"
]
