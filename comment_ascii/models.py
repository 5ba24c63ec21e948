from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field


class FileResult(BaseModel):
    path: str
    encoding: Optional[str] = None
    changed: bool = False
    replacements: int = 0
    unterminated: Optional[str] = Field(default=None, examples=["block_comment"])
    forged_terminators: int = 0
    error: Optional[str] = None


class RunSummary(BaseModel):
    root: str
    examined: int = 0
    changed: int = 0
    failed: int = 0
    dry_run: bool = False
    files: List[FileResult] = Field(default_factory=list)

    def add(self, result: FileResult) -> None:
        self.examined += 1
        if result.changed:
            self.changed += 1
        if result.error is not None:
            self.failed += 1
        self.files.append(result)


class NormalizedSource(BaseModel):
    filename: str
    sha256: str
    encoding: str = Field(default="utf-8-sig")
    content_b64: str


class NormalizeReport(BaseModel):
    detected_encoding: str
    changed: bool
    replacements: int = 0
    unterminated: Optional[str] = None
    forged_terminators: int = 0


class NormalizeResponse(BaseModel):
    normalized_source: NormalizedSource
    report: NormalizeReport

class HealthResponse(BaseModel):
    ok: bool = True
