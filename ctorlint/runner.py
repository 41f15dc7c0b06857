"""
Analysis runner for the ctorlint engine.

Parses files with the registered adapters, runs the enabled rules over each
tree and applies suppressions, severity overrides and limits. Generated code
is skipped.
"""

import concurrent.futures
import logging
import os
import threading
import time
from typing import List, Optional, Tuple

from .config import EngineConfig, get_rule_severity
from .file_filter import should_analyze_file
from .registry import get_adapter, get_adapter_for_file
from .suppressions import filter_suppressed_findings
from .types import AnalysisCancelled, Finding, LanguageAdapter, RuleContext

logger = logging.getLogger(__name__)


def collect_files(paths: List[str], language: str) -> List[str]:
    """Collect files to analyze for a language, sorted and de-duplicated."""
    adapter = get_adapter(language)
    if not adapter:
        logger.error(f"No adapter found for language '{language}'")
        return []

    return adapter.list_files(paths)


def analyze_text(file_path: str, text: str, adapter: LanguageAdapter, rules: List, config: EngineConfig,
                 cancel_event: Optional[threading.Event] = None) -> Tuple[List[Finding], float]:
    """
    Run rules over in-memory text.

    Args:
        file_path: Path reported in findings
        text: Source text
        adapter: Language adapter used to parse the text
        rules: Rules to run
        config: Engine configuration
        cancel_event: Set by the host to stop between constructor visits

    Returns:
        (findings, parse time in ms)
    """
    if not should_analyze_file(file_path, text):
        logger.debug(f"Skipping generated file {file_path}")
        return [], 0.0

    parse_start = time.time()
    tree = adapter.parse(text)
    parse_time = (time.time() - parse_start) * 1000

    if tree is None:
        logger.warning(f"No parser available for {file_path}; skipping")
        return [], parse_time

    rule_ids = [rule.meta.id for rule in rules]
    context = RuleContext(
        file_path=file_path,
        text=text,
        tree=tree,
        adapter=adapter,
        config=config.context_config(adapter.language_id, rule_ids),
        cancel_event=cancel_event,
    )

    findings = []
    for rule in rules:
        try:
            rule_findings = list(rule.visit(context))
        except AnalysisCancelled:
            raise
        except Exception as e:
            logger.warning(f"Rule '{rule.meta.id}' failed on {file_path}: {e}")
            continue

        rule_findings = filter_suppressed_findings(rule_findings, text)
        for finding in rule_findings:
            finding = finding._replace(severity=get_rule_severity(finding.rule, config, finding.severity))
            findings.append(finding)

        if len(findings) >= config.max_findings_per_file:
            findings = findings[:config.max_findings_per_file]
            break

    return findings, parse_time


def analyze_file(file_path: str, rules: List, config: EngineConfig, content: Optional[str] = None,
                 cancel_event: Optional[threading.Event] = None) -> Tuple[List[Finding], float]:
    """Analyze a single file (read from disk unless content is given)."""
    adapter = get_adapter_for_file(file_path)
    if not adapter:
        logger.warning(f"No adapter registered for {file_path}")
        return [], 0.0

    if content is None:
        try:
            with open(file_path, 'r', encoding='utf-8', newline='') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {file_path}: {e}")
            return [], 0.0

    return analyze_text(file_path, content, adapter, rules, config, cancel_event)


def run_analysis_parallel(files: List[str], rules: List, config: EngineConfig, jobs: int = 1,
                          cancel_event: Optional[threading.Event] = None) -> Tuple[List[Finding], float]:
    """Run analysis on files with optional parallelization.

    Findings come back in file order regardless of completion order.
    """
    all_findings = []
    total_parse_time = 0.0

    if jobs <= 1 or len(files) <= 1:
        results = (analyze_file(path, rules, config, cancel_event=cancel_event) for path in files)
        for findings, parse_time in results:
            all_findings.extend(findings)
            total_parse_time += parse_time
            if len(all_findings) >= config.max_total_findings:
                break
        return all_findings[:config.max_total_findings], total_parse_time

    with concurrent.futures.ThreadPoolExecutor(max_workers=jobs) as executor:
        futures = [
            executor.submit(analyze_file, path, rules, config, cancel_event=cancel_event)
            for path in files
        ]
        for path, future in zip(files, futures):
            try:
                findings, parse_time = future.result()
            except AnalysisCancelled:
                for pending in futures:
                    pending.cancel()
                raise
            except Exception as e:
                logger.warning(f"Failed to process {path}: {e}")
                continue
            all_findings.extend(findings)
            total_parse_time += parse_time

    return all_findings[:config.max_total_findings], total_parse_time


def default_jobs(files_count: int) -> int:
    """Worker count used when --jobs is 0."""
    return max(1, min(4, files_count, os.cpu_count() or 1))
