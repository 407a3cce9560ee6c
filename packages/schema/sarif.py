"""SARIF 2.1.0 output models (the subset this converter emits)."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SARIF_VERSION = "2.1.0"
SARIF_SCHEMA = (
    "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/"
    "Schemata/sarif-schema-2.1.0.json"
)

Level = Literal["none", "note", "warning", "error"]


class SarifMessage(BaseModel):
    text: str


class SarifArtifactContent(BaseModel):
    text: str


class SarifArtifactLocation(BaseModel):
    uri: str
    uriBaseId: Optional[str] = None


class SarifRegion(BaseModel):
    startLine: int
    startColumn: int
    snippet: Optional[SarifArtifactContent] = None


class SarifPhysicalLocation(BaseModel):
    artifactLocation: SarifArtifactLocation
    region: SarifRegion


class SarifLocation(BaseModel):
    physicalLocation: SarifPhysicalLocation


class SarifRule(BaseModel):
    id: str
    name: str
    shortDescription: SarifMessage
    fullDescription: Optional[SarifMessage] = None
    helpUri: Optional[str] = None


class SarifDriver(BaseModel):
    name: str
    fullName: Optional[str] = None
    version: str
    informationUri: Optional[str] = None
    rules: List[SarifRule] = Field(default_factory=list)


class SarifTool(BaseModel):
    driver: SarifDriver


class SarifResult(BaseModel):
    ruleId: str
    ruleIndex: int
    level: Level
    message: SarifMessage
    locations: List[SarifLocation] = Field(default_factory=list)
    properties: Optional[Dict[str, Any]] = None


class VersionControlDetails(BaseModel):
    repositoryUri: str
    branch: Optional[str] = None
    revisionId: Optional[str] = None
    mappedTo: Optional[SarifArtifactLocation] = None


class SarifRun(BaseModel):
    tool: SarifTool
    versionControlProvenance: Optional[List[VersionControlDetails]] = None
    results: List[SarifResult] = Field(default_factory=list)


class SarifDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schema_uri: str = Field(default=SARIF_SCHEMA, alias="$schema")
    version: str = SARIF_VERSION
    runs: List[SarifRun] = Field(default_factory=list)
