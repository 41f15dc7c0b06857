"""
Validation service for the ctorlint engine.

This module provides one entry point for validating and fixing code. It
hides adapter loading, rule discovery, configuration lookup and conversion
of findings to the JSON protocol.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .config import EngineConfig, find_config_file, load_config
from .fixer import FixResult, fix_paths, fix_text
from .registry import (discover_rules, get_adapter, get_adapter_for_file, get_enabled_rules,
                       list_supported_languages, setup_adapters)
from .runner import analyze_text, collect_files, default_jobs, run_analysis_parallel
from .schema import ENGINE_VERSION, PROTOCOL_VERSION, findings_to_json
from .suppressions import validate_suppression_patterns
from .types import LanguageAdapter

logger = logging.getLogger(__name__)


class UnsupportedLanguageError(ValueError):
    """Raised when no adapter handles a requested language or file."""


class ValidationService:
    """Service for validating code using ctorlint rules."""

    def __init__(self):
        self._adapters_loaded = False
        self._rules_loaded = False
        self._loaded_rule_ids: List[str] = []

    def ensure_adapters_loaded(self) -> None:
        """Ensure all language adapters are loaded."""
        if self._adapters_loaded:
            return

        setup_adapters()
        logger.debug(f"Loaded adapters: {list_supported_languages()}")
        self._adapters_loaded = True

    def ensure_rules_loaded(self) -> None:
        """Ensure all rules are discovered and registered."""
        if self._rules_loaded:
            return

        discover_rules()
        self._loaded_rule_ids = sorted({
            rule.meta.id
            for language in list_supported_languages()
            for rule in get_enabled_rules(["*"], language)
        })
        logger.info(f"Loaded {len(self._loaded_rule_ids)} rules: {self._loaded_rule_ids}")
        self._rules_loaded = True

    def get_loaded_rules(self) -> List[str]:
        """Get list of loaded rule IDs."""
        self.ensure_adapters_loaded()
        self.ensure_rules_loaded()
        return self._loaded_rule_ids.copy()

    def load_config_for(self, paths: List[str], config_path: Optional[str] = None) -> EngineConfig:
        """Load the explicit config file, or the one found above the first path."""
        if config_path is None:
            config_path = find_config_file(paths[0] if paths else ".")
        return load_config(config_path)

    def rules_for(self, language: str, config: EngineConfig, rule_patterns: Optional[List[str]] = None) -> List:
        """Enabled rules for a language, narrowed by rule_patterns when given."""
        self.ensure_adapters_loaded()
        self.ensure_rules_loaded()
        rules = get_enabled_rules(config.enabled_rules, language)
        if rule_patterns:
            selected = {rule.meta.id for rule in get_enabled_rules(rule_patterns, language)}
            rules = [rule for rule in rules if rule.meta.id in selected]
        return rules

    def resolve_adapter(self, file_path: str, language: Optional[str] = None) -> LanguageAdapter:
        """Adapter for an explicit language, or by file extension."""
        self.ensure_adapters_loaded()
        adapter = get_adapter(language) if language else get_adapter_for_file(file_path)
        if adapter is None:
            raise UnsupportedLanguageError(
                f"Unsupported language '{language}'" if language else f"No adapter for file '{file_path}'"
            )
        return adapter

    def validate_paths(self, paths: List[str], rule_patterns: Optional[List[str]] = None,
                       config: Optional[EngineConfig] = None, jobs: int = 1,
                       cancel_event: Optional[threading.Event] = None) -> Dict[str, Any]:
        """
        Validate code at the given paths.

        Args:
            paths: Files or directories to validate
            rule_patterns: Optional glob patterns narrowing the enabled rules
            config: Engine configuration (default: found above the first path)
            jobs: Worker threads; 0 picks a default from the file count
            cancel_event: Set by the host to stop the run

        Returns:
            Runner output document (see schema.RUNNER_OUTPUT_SCHEMA)
        """
        start_time = time.time()
        self.ensure_adapters_loaded()
        self.ensure_rules_loaded()

        if config is None:
            config = self.load_config_for(paths)

        all_findings = []
        total_files = 0
        total_parse_ms = 0.0
        rule_ids = set()

        for language in list_supported_languages():
            rules = self.rules_for(language, config, rule_patterns)
            if not rules:
                continue

            files = collect_files(paths, language)
            if not files:
                continue

            rule_ids.update(rule.meta.id for rule in rules)
            total_files += len(files)
            workers = jobs if jobs > 0 else default_jobs(len(files))
            findings, parse_ms = run_analysis_parallel(files, rules, config, workers, cancel_event)
            all_findings.extend(findings)
            total_parse_ms += parse_ms

        return self._build_output(all_findings[:config.max_total_findings], total_files, len(rule_ids),
                                  total_parse_ms, start_time, {})

    def validate_files_content(self, files: List[Dict[str, Any]], rule_patterns: Optional[List[str]] = None,
                               config: Optional[EngineConfig] = None) -> Dict[str, Any]:
        """
        Validate files from their content (for remote validation).

        Args:
            files: List of dicts with 'path', 'content', and optional 'language' keys
            rule_patterns: Optional glob patterns narrowing the enabled rules
            config: Engine configuration (default: built-in defaults)

        Returns:
            Runner output document

        Raises:
            UnsupportedLanguageError: a file names a language with no adapter
        """
        start_time = time.time()
        self.ensure_adapters_loaded()
        if config is None:
            config = load_config(None)

        all_findings = []
        text_cache: Dict[str, str] = {}
        total_parse_ms = 0.0
        rule_ids = set()
        files_scanned = 0

        for file_info in files:
            file_path = file_info['path']
            content = file_info.get('content', '')
            language = file_info.get('language')

            if not language and get_adapter_for_file(file_path) is None:
                logger.info(f"Skipping {file_path}: no adapter for its extension")
                continue

            adapter = self.resolve_adapter(file_path, language)
            rules = self.rules_for(adapter.language_id, config, rule_patterns)
            rule_ids.update(rule.meta.id for rule in rules)

            findings, parse_ms = analyze_text(file_path, content, adapter, rules, config)
            text_cache[str(Path(file_path).resolve())] = content
            all_findings.extend(findings)
            total_parse_ms += parse_ms
            files_scanned += 1

        return self._build_output(all_findings[:config.max_total_findings], files_scanned, len(rule_ids),
                                  total_parse_ms, start_time, text_cache)

    def autofix_content(self, file_path: str, content: str, language: Optional[str] = None,
                        rule_id: Optional[str] = None, config: Optional[EngineConfig] = None) -> FixResult:
        """Apply all available fixes to in-memory content."""
        if config is None:
            config = load_config(None)

        adapter = self.resolve_adapter(file_path, language)
        rules = self.rules_for(adapter.language_id, config)
        return fix_text(file_path, content, adapter, rules, config, rule_id=rule_id)

    def autofix_paths(self, paths: List[str], rule_patterns: Optional[List[str]] = None,
                      config: Optional[EngineConfig] = None, write: bool = True,
                      cancel_event: Optional[threading.Event] = None) -> List[FixResult]:
        """Fix files on disk; returns one result per handled file."""
        self.ensure_adapters_loaded()
        if config is None:
            config = self.load_config_for(paths)

        results = []
        for language in list_supported_languages():
            rules = self.rules_for(language, config, rule_patterns)
            if not rules:
                continue
            files = collect_files(paths, language)
            results.extend(fix_paths(files, rules, config, write=write, cancel_event=cancel_event))
        return results

    def check_suppressions(self, paths: List[str]) -> List[Tuple[str, int, str]]:
        """Malformed suppression comments in the files under paths, as (file, line, message)."""
        self.ensure_adapters_loaded()
        problems = []
        for language in list_supported_languages():
            for file_path in collect_files(paths, language):
                try:
                    with open(file_path, 'r', encoding='utf-8', newline='') as f:
                        text = f.read()
                except (OSError, UnicodeDecodeError) as e:
                    logger.warning(f"Could not read {file_path}: {e}")
                    continue
                problems.extend((file_path, line, message) for line, message in validate_suppression_patterns(text))
        return problems

    def _build_output(self, findings: List, files_scanned: int, rules_run: int, parse_ms: float,
                      start_time: float, text_cache: Dict[str, str]) -> Dict[str, Any]:
        total_ms = (time.time() - start_time) * 1000
        return {
            "ctorlint.protocol": PROTOCOL_VERSION,
            "engine_version": ENGINE_VERSION,
            "files_scanned": files_scanned,
            "rules_run": rules_run,
            "findings": findings_to_json(findings, text_cache),
            "metrics": {
                "parse_ms": parse_ms,
                "rules_ms": max(0.0, total_ms - parse_ms),
                "total_ms": total_ms,
            },
        }


# Global service instance
_validation_service = None


def get_validation_service() -> ValidationService:
    """Get the global validation service instance."""
    global _validation_service
    if _validation_service is None:
        _validation_service = ValidationService()
    return _validation_service
