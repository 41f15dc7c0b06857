from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class FileContent(BaseModel):
    """A source file sent inline with a request."""
    path: str = Field(..., min_length=1, description="File path used in findings and for language detection")
    content: str
    language: Optional[str] = None  # Overrides detection by extension


class ValidateRequest(BaseModel):
    files: List[FileContent] = Field(..., min_length=1)
    rules: Optional[List[str]] = None  # Rule id glob patterns (default: all enabled)


class ValidateResponse(BaseModel):
    verdict: Literal["safe", "risky"]
    files_scanned: int
    rules_run: int
    findings: List[Dict[str, Any]] = []
    metrics: Dict[str, Any] = {}


class AutofixRequest(BaseModel):
    file: FileContent
    rule_id: Optional[str] = None  # Only apply fixes of this rule


class AutofixResponse(BaseModel):
    path: str
    content: str
    fixes_applied: int
    passes: int
    remaining_findings: int
    diff: str = ""
