"""
Configuration management for the ctorlint engine.

This module provides configuration loading with sensible defaults for
limits, severities, formatting options and per-rule settings.
"""

import copy
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = [".ctorlint.yml", ".ctorlint.yaml", "ctorlint.yml", "ctorlint.yaml"]

NEWLINE_STYLES = {"lf": "\n", "crlf": "\r\n"}

DEFAULTS: Dict[str, Any] = {
    "enabled_rules": ["*"],
    "max_findings_per_file": 50,
    "max_total_findings": 1000,
    "max_fix_passes": 100,
    "rule_severities": {
        "style.constructor_arguments": "warn",
    },
    "language_configs": {
        "csharp": {
            "indent_size": 4,
            "use_tabs": False,
            "parameter_indent": "indent",  # "indent" | "align"
            "newline": "auto",  # "auto" | "lf" | "crlf"
        },
    },
    "rule_configs": {
        "style.constructor_arguments": {
            "min_parameters": 3,
        },
    },
}


@dataclass
class EngineConfig:
    """Configuration for the ctorlint engine."""

    # Rule selection (glob patterns over rule ids)
    enabled_rules: List[str]
    max_findings_per_file: int = 50
    max_total_findings: int = 1000

    # Upper bound on apply/re-evaluate rounds per file when fixing
    max_fix_passes: int = 100

    # Rule severity overrides (rule_id -> severity)
    rule_severities: Dict[str, str] = None

    # Language-specific settings
    language_configs: Dict[str, Dict[str, Any]] = None

    # Rule-specific configuration
    rule_configs: Dict[str, Dict[str, Any]] = None

    def __post_init__(self):
        if self.language_configs is None:
            object.__setattr__(self, 'language_configs', {})
        if self.rule_severities is None:
            object.__setattr__(self, 'rule_severities', {})
        if self.rule_configs is None:
            object.__setattr__(self, 'rule_configs', {})

    def context_config(self, language: str, rule_ids: List[str]) -> Dict[str, Any]:
        """Flat config dict handed to rules: language settings, then rule settings."""
        merged = dict(self.language_configs.get(language, {}))
        for rule_id in rule_ids:
            merged.update(self.rule_configs.get(rule_id, {}))
        return merged


def _merge_nested(target: Dict[str, Dict[str, Any]], overrides: Dict[str, Dict[str, Any]]) -> None:
    for key, values in overrides.items():
        if key in target and isinstance(values, dict):
            target[key].update(values)
        else:
            target[key] = values


def load_config(config_path: Optional[str] = None) -> EngineConfig:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Path to config file (YAML). If None, uses defaults.

    Returns:
        EngineConfig instance
    """
    merged_config = copy.deepcopy(DEFAULTS)

    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}; using defaults")
            return EngineConfig(**merged_config)

        if not isinstance(file_config, dict):
            logger.warning(f"Ignoring config {config_path}: expected a mapping at top level")
            return EngineConfig(**merged_config)

        unknown = set(file_config) - set(DEFAULTS)
        if unknown:
            logger.warning(f"Ignoring unknown config keys in {config_path}: {sorted(unknown)}")

        for key, value in file_config.items():
            if key not in DEFAULTS:
                continue
            if key == "rule_severities":
                merged_config[key].update(value or {})
            elif key in ("language_configs", "rule_configs"):
                _merge_nested(merged_config[key], value or {})
            else:
                merged_config[key] = value

        logger.debug(f"Loaded config from {config_path}")

    return EngineConfig(**merged_config)


def get_default_config() -> EngineConfig:
    """Get default configuration without loading from file."""
    return load_config(None)


def save_config(config: EngineConfig, config_path: str) -> None:
    """
    Save configuration to file.

    Args:
        config: EngineConfig to save
        config_path: Path where to save the config
    """
    config_dict = {
        "enabled_rules": config.enabled_rules,
        "max_findings_per_file": config.max_findings_per_file,
        "max_total_findings": config.max_total_findings,
        "max_fix_passes": config.max_fix_passes,
        "rule_severities": config.rule_severities,
        "rule_configs": config.rule_configs,
        "language_configs": config.language_configs
    }

    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.dump(config_dict, f, default_flow_style=False, indent=2)


def find_config_file(start_path: str = ".") -> Optional[str]:
    """
    Find configuration file by walking up the directory tree.

    Looks for files in this order:
    1. .ctorlint.yml
    2. .ctorlint.yaml
    3. ctorlint.yml
    4. ctorlint.yaml

    Args:
        start_path: File or directory to start searching from

    Returns:
        Path to config file or None if not found
    """
    current_path = os.path.abspath(start_path)
    if os.path.isfile(current_path):
        current_path = os.path.dirname(current_path)

    while True:
        for config_name in CONFIG_FILE_NAMES:
            config_path = os.path.join(current_path, config_name)
            if os.path.exists(config_path):
                return config_path

        parent_path = os.path.dirname(current_path)
        if parent_path == current_path:
            # Reached the root directory
            break
        current_path = parent_path

    return None


def get_rule_severity(rule_id: str, config: EngineConfig, default_severity: str = "warn") -> str:
    """
    Get the configured severity for a rule, falling back to default.

    Args:
        rule_id: Rule identifier (e.g., "style.constructor_arguments")
        config: Engine configuration
        default_severity: Fallback severity if not configured

    Returns:
        Severity level ("info", "warn", or "error")
    """
    if config.rule_severities and rule_id in config.rule_severities:
        return config.rule_severities[rule_id]
    return default_severity


def resolve_newline(setting: Optional[str]) -> Optional[str]:
    """Map the `newline` option to a line break, or None to auto-detect."""
    if not setting or setting == "auto":
        return None
    try:
        return NEWLINE_STYLES[setting]
    except KeyError:
        raise ValueError(f"Unknown newline style: {setting!r}") from None
