# Contract-only models for the Perl::Critic JSON report. Keep names/fields stable.
from typing import List

from pydantic import BaseModel, Field


class Violation(BaseModel):
    filename: str = Field(min_length=1, strict=True)
    line_number: int = Field(ge=1, strict=True)
    column_number: int = Field(ge=1, strict=True)
    severity: int = Field(ge=1, le=5, strict=True)
    source: str = Field(default="", strict=True)
    policy: str = Field(min_length=1, strict=True)
    description: str = Field(default="", strict=True)
    explanation: str = Field(default="", strict=True)
    diagnostics: str = Field(default="", strict=True)


class ViolationReport(BaseModel):
    tool_version: str = Field(alias="perl_critic_version", strict=True)
    violations: List[Violation]
