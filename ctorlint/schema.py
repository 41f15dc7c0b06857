"""
JSON schema and serialisation for ctorlint findings.

This module provides JSON schema definitions and validation helpers to ensure
findings conform to a well-defined contract for downstream tools.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from .suppressions import suppression_hint

# Current protocol version
PROTOCOL_VERSION = "1"
ENGINE_VERSION = "0.1.0"

_RANGE_SCHEMA = {
    "type": "object",
    "properties": {
        "startLine": {"type": "integer", "minimum": 1},
        "startCol": {"type": "integer", "minimum": 0},
        "endLine": {"type": "integer", "minimum": 1},
        "endCol": {"type": "integer", "minimum": 0}
    },
    "required": ["startLine", "startCol", "endLine", "endCol"],
    "additionalProperties": False,
    "description": "Line/column range (1-based lines, 0-based columns)"
}

# JSON Schema for a single Finding
FINDING_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "rule_id": {
            "type": "string",
            "description": "Rule identifier that generated this finding"
        },
        "message": {
            "type": "string",
            "description": "Human-readable description of the issue"
        },
        "file_path": {
            "type": "string",
            "description": "File path where the issue was found"
        },
        "start_byte": {"type": "integer", "minimum": 0},
        "end_byte": {"type": "integer", "minimum": 0},
        "range": _RANGE_SCHEMA,
        "severity": {
            "type": "string",
            "enum": ["info", "warn", "error"],
            "description": "Severity level of the finding"
        },
        "autofix": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "file_path": {"type": "string"},
                    "start_byte": {"type": "integer", "minimum": 0},
                    "end_byte": {"type": "integer", "minimum": 0},
                    "replacement": {"type": "string"},
                    "range": _RANGE_SCHEMA
                },
                "required": ["file_path", "start_byte", "end_byte", "replacement", "range"],
                "additionalProperties": False
            },
            "description": "Optional list of edits to fix the issue"
        },
        "suppression_hint": {
            "type": "string",
            "description": "Comment text to suppress this rule"
        },
        "meta": {
            "type": "object",
            "description": "Optional metadata about the finding"
        }
    },
    "required": ["rule_id", "message", "file_path", "start_byte", "end_byte", "range", "severity"],
    "additionalProperties": False
}

# JSON Schema for the full runner output
RUNNER_OUTPUT_SCHEMA = {
    "type": "object",
    "properties": {
        "ctorlint.protocol": {"type": "string"},
        "engine_version": {"type": "string"},
        "files_scanned": {"type": "integer", "minimum": 0},
        "rules_run": {"type": "integer", "minimum": 0},
        "findings": {
            "type": "array",
            "items": FINDING_JSON_SCHEMA
        },
        "metrics": {
            "type": "object",
            "properties": {
                "parse_ms": {"type": "number", "minimum": 0},
                "rules_ms": {"type": "number", "minimum": 0},
                "total_ms": {"type": "number", "minimum": 0}
            },
            "required": ["parse_ms", "rules_ms", "total_ms"]
        }
    },
    "required": ["ctorlint.protocol", "engine_version", "files_scanned", "rules_run", "findings", "metrics"]
}


def byte_to_line_col(source: bytes, byte_offset: int) -> tuple[int, int]:
    """Convert a byte offset to a (1-based line, 0-based character column) pair."""
    byte_offset = max(0, min(byte_offset, len(source)))
    line_start = source.rfind(b'\n', 0, byte_offset) + 1
    line = source.count(b'\n', 0, byte_offset) + 1
    col = len(source[line_start:byte_offset].decode('utf-8', errors='ignore'))
    return line, col


def create_range_from_bytes(text: str, start_byte: int, end_byte: int) -> dict:
    """Build a protocol range dict for a byte span of text."""
    source = text.encode('utf-8')
    start_line, start_col = byte_to_line_col(source, start_byte)
    end_line, end_col = byte_to_line_col(source, end_byte)
    return {"startLine": start_line, "startCol": start_col, "endLine": end_line, "endCol": end_col}


def _read_text(file_path: str, text_cache: Dict[str, str]) -> str:
    key = str(Path(file_path).resolve())
    if key not in text_cache:
        with open(file_path, 'r', encoding='utf-8', errors='ignore', newline='') as f:
            text_cache[key] = f.read()
    return text_cache[key]


def findings_to_json(findings: List[Any], text_cache: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
    """
    Convert findings to protocol dicts.

    Args:
        findings: Finding objects
        text_cache: resolved path -> file text; files missing from it are read from disk

    Returns:
        List of JSON-serialisable dicts
    """
    if text_cache is None:
        text_cache = {}

    result = []
    for finding in findings:
        text = _read_text(finding.file, text_cache)
        entry: Dict[str, Any] = {
            "rule_id": finding.rule,
            "message": finding.message,
            "file_path": finding.file,
            "start_byte": finding.start_byte,
            "end_byte": finding.end_byte,
            "range": create_range_from_bytes(text, finding.start_byte, finding.end_byte),
            "severity": finding.severity,
            "suppression_hint": suppression_hint(finding.rule),
        }
        if finding.autofix:
            entry["autofix"] = [
                {
                    "file_path": finding.file,
                    "start_byte": edit.start_byte,
                    "end_byte": edit.end_byte,
                    "replacement": edit.replacement,
                    "range": create_range_from_bytes(text, edit.start_byte, edit.end_byte),
                }
                for edit in finding.autofix
            ]
        if finding.meta:
            entry["meta"] = dict(finding.meta)
        result.append(entry)

    return result


def validate_findings(findings: List[Dict[str, Any]]) -> List[str]:
    """Validate protocol finding dicts; return one message per problem."""
    errors = []
    for index, finding in enumerate(findings):
        try:
            jsonschema.validate(finding, FINDING_JSON_SCHEMA)
        except jsonschema.ValidationError as e:
            errors.append(f"Finding {index}: {e.message}")
    return errors


def validate_runner_output(output: Dict[str, Any]) -> List[str]:
    """Validate a full runner output document; return one message per problem."""
    validator = jsonschema.Draft7Validator(RUNNER_OUTPUT_SCHEMA)
    return [
        f"{'/'.join(str(p) for p in error.absolute_path) or '<root>'}: {error.message}"
        for error in validator.iter_errors(output)
    ]
