"""
Autofix application for ctorlint findings.

Fixes are applied one at a time. After every applied fix the text is parsed
again and the rules re-run, so each fix is computed against the current
text and never against locations from an earlier pass. The loop stops when
no fixable finding is left (or the pass limit is reached).
"""

import difflib
import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .config import EngineConfig
from .registry import get_adapter_for_file
from .runner import analyze_text
from .types import AnalysisCancelled, Edit, Finding, LanguageAdapter

logger = logging.getLogger(__name__)


@dataclass
class FixResult:
    """Outcome of fixing one file."""
    file_path: str
    original: str
    content: str
    fixes_applied: int = 0
    passes: int = 0
    remaining: List[Finding] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.content != self.original

    def diff(self) -> str:
        """Unified diff from the original to the fixed content."""
        return unified_diff(self.original, self.content, self.file_path)


def apply_edits(content: str, edits: Iterable[Edit]) -> str:
    """
    Apply byte-range edits to content.

    Edits are applied from the end of the text backwards so earlier offsets
    stay valid. Edits that fall outside the text or overlap an edit already
    applied are skipped.
    """
    source = content.encode('utf-8')
    applied_from = len(source)

    for edit in sorted(edits, key=lambda e: (e.start_byte, e.end_byte), reverse=True):
        if edit.start_byte < 0 or edit.start_byte > edit.end_byte or edit.end_byte > len(source):
            logger.warning(f"Skipping out-of-bounds edit {edit.start_byte}-{edit.end_byte}")
            continue
        if edit.end_byte > applied_from:
            logger.warning(f"Skipping overlapping edit {edit.start_byte}-{edit.end_byte}")
            continue

        source = source[:edit.start_byte] + edit.replacement.encode('utf-8') + source[edit.end_byte:]
        applied_from = edit.start_byte

    return source.decode('utf-8')


def fix_text(file_path: str, text: str, adapter: LanguageAdapter, rules: List, config: EngineConfig,
             rule_id: Optional[str] = None, cancel_event: Optional[threading.Event] = None) -> FixResult:
    """
    Apply fixes to text until no fixable finding remains.

    Args:
        file_path: Path reported in findings
        text: Source text
        adapter: Language adapter used to parse the text
        rules: Rules to run
        config: Engine configuration (max_fix_passes bounds the loop)
        rule_id: Only apply fixes of this rule
        cancel_event: Set by the host to stop between passes

    Returns:
        FixResult with the final content and the findings left after the last pass
    """
    result = FixResult(file_path=file_path, original=text, content=text)

    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise AnalysisCancelled(file_path)

        findings, _ = analyze_text(file_path, result.content, adapter, rules, config, cancel_event)
        result.remaining = findings

        fixable = [f for f in findings if f.autofix and (rule_id is None or f.rule == rule_id)]
        if not fixable:
            break

        if result.passes >= config.max_fix_passes:
            logger.warning(f"Stopped fixing {file_path} after {result.passes} passes")
            break

        finding = fixable[0]
        updated = apply_edits(result.content, finding.autofix)
        result.passes += 1

        if updated == result.content:
            logger.warning(f"Fix for {finding.rule} at byte {finding.start_byte} in {file_path} changed nothing")
            break

        result.content = updated
        result.fixes_applied += 1

    return result


def fix_file(file_path: str, rules: List, config: EngineConfig, write: bool = True,
             rule_id: Optional[str] = None, cancel_event: Optional[threading.Event] = None) -> Optional[FixResult]:
    """Fix one file on disk. Returns None when the file cannot be handled."""
    adapter = get_adapter_for_file(file_path)
    if adapter is None:
        logger.warning(f"No adapter registered for {file_path}")
        return None

    try:
        with open(file_path, 'r', encoding='utf-8', newline='') as f:
            original = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {file_path}: {e}")
        return None

    result = fix_text(file_path, original, adapter, rules, config, rule_id, cancel_event)

    if write and result.changed:
        with open(file_path, 'w', encoding='utf-8', newline='') as f:
            f.write(result.content)
        logger.info(f"Applied {result.fixes_applied} fixes to {file_path}")

    return result


def fix_paths(files: List[str], rules: List, config: EngineConfig, write: bool = True,
              rule_id: Optional[str] = None, cancel_event: Optional[threading.Event] = None) -> List[FixResult]:
    """Fix files one after another."""
    results = []
    for file_path in files:
        result = fix_file(file_path, rules, config, write, rule_id, cancel_event)
        if result is not None:
            results.append(result)
    return results


def unified_diff(original: str, fixed: str, file_path: str) -> str:
    """Generate a unified diff for one file."""
    return ''.join(difflib.unified_diff(
        original.splitlines(keepends=True),
        fixed.splitlines(keepends=True),
        fromfile=f"a/{file_path}",
        tofile=f"b/{file_path}",
    ))
