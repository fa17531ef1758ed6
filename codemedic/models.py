"""Core data models shared across codemedic components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

SEVERITY_LEVELS: tuple[str, ...] = ("low", "medium", "high", "critical")
RISK_LEVELS: tuple[str, ...] = ("low", "medium", "high")

UNKNOWN_LANGUAGE = "Unknown"


@dataclass(frozen=True)
class UploadedFile:
    """A file handed to the ingestion pipeline by the caller."""

    name: str
    storage_path: str
    size_bytes: int


@dataclass(frozen=True)
class FunctionInfo:
    name: str
    line: int
    param_count: int


@dataclass(frozen=True)
class ClassInfo:
    name: str
    line: int


@dataclass
class StructuralSummary:
    """Static-analysis facts for one file. The default instance is the empty summary."""

    functions: List[FunctionInfo] = field(default_factory=list)
    classes: List[ClassInfo] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)
    complexity_score: int = 0
    potential_issues: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.functions
            or self.classes
            or self.imports
            or self.complexity_score
            or self.potential_issues
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "functions": [
                {"name": item.name, "line": item.line, "paramCount": item.param_count}
                for item in self.functions
            ],
            "classes": [{"name": item.name, "line": item.line} for item in self.classes],
            "imports": list(self.imports),
            "complexityScore": self.complexity_score,
            "potentialIssues": list(self.potential_issues),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StructuralSummary":
        return cls(
            functions=[
                FunctionInfo(
                    name=str(item.get("name", "anonymous")),
                    line=int(item.get("line", 0)),
                    param_count=int(item.get("paramCount", 0)),
                )
                for item in data.get("functions", []) or []
            ],
            classes=[
                ClassInfo(name=str(item.get("name", "anonymous")), line=int(item.get("line", 0)))
                for item in data.get("classes", []) or []
            ],
            imports=[str(item) for item in data.get("imports", []) or []],
            complexity_score=int(data.get("complexityScore", 0) or 0),
            potential_issues=[str(item) for item in data.get("potentialIssues", []) or []],
        )


@dataclass(frozen=True)
class AnalyzedFile:
    """An uploaded file after reading, classification and static analysis."""

    name: str
    content: str
    size_bytes: int
    line_count: int
    extension: str
    language: str
    summary: StructuralSummary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "content": self.content,
            "size": self.size_bytes,
            "lines": self.line_count,
            "extension": self.extension,
            "language": self.language,
            "analysis": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalyzedFile":
        return cls(
            name=str(data.get("name", "")),
            content=str(data.get("content", "")),
            size_bytes=int(data.get("size", 0) or 0),
            line_count=int(data.get("lines", 0) or 0),
            extension=str(data.get("extension", "")),
            language=str(data.get("language", UNKNOWN_LANGUAGE)),
            summary=StructuralSummary.from_dict(data.get("analysis") or {}),
        )


@dataclass(frozen=True)
class AppProjectMetadata:
    """Caller-supplied details for a described application project."""

    name: str
    description: Optional[str] = None
    codebase_url: Optional[str] = None
    access_type: Optional[str] = None
    deployment_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppProjectMetadata":
        return cls(
            name=str(data.get("name") or "Untitled Project"),
            description=_optional_str(data.get("description")),
            codebase_url=_optional_str(data.get("codebaseUrl")),
            access_type=_optional_str(data.get("accessType")),
            deployment_url=_optional_str(data.get("deploymentUrl")),
        )


@dataclass(frozen=True)
class ProjectSnapshot:
    """Read-only structural view of one ingested project."""

    name: str
    files: List[AnalyzedFile]
    total_files: int
    total_lines: int
    languages: FrozenSet[str]
    project_type: str
    dependencies: Dict[str, Dict[str, str]]
    description: Optional[str] = None
    codebase_url: Optional[str] = None
    access_type: Optional[str] = None
    deployment_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "files": [item.to_dict() for item in self.files],
            "totalFiles": self.total_files,
            "totalLines": self.total_lines,
            "languages": sorted(self.languages),
            "projectType": self.project_type,
            "dependencies": {key: dict(value) for key, value in self.dependencies.items()},
        }
        for key, value in (
            ("description", self.description),
            ("codebaseUrl", self.codebase_url),
            ("accessType", self.access_type),
            ("deploymentUrl", self.deployment_url),
        ):
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectSnapshot":
        files = [AnalyzedFile.from_dict(item) for item in data.get("files", []) or []]
        dependencies = data.get("dependencies") or {}
        return cls(
            name=str(data.get("name", "Uploaded Project")),
            files=files,
            total_files=int(data.get("totalFiles", len(files)) or 0),
            total_lines=int(data.get("totalLines", 0) or 0),
            languages=frozenset(str(item) for item in data.get("languages", []) or []),
            project_type=str(data.get("projectType", "Generic")),
            dependencies={
                str(ecosystem): {str(name): str(version) for name, version in packages.items()}
                for ecosystem, packages in dependencies.items()
                if isinstance(packages, dict)
            },
            description=_optional_str(data.get("description")),
            codebase_url=_optional_str(data.get("codebaseUrl")),
            access_type=_optional_str(data.get("accessType")),
            deployment_url=_optional_str(data.get("deploymentUrl")),
        )


@dataclass
class FixRecommendation:
    """One candidate fix proposed for an analysed bug."""

    id: Any
    title: Any
    description: Any
    steps: Any = field(default_factory=list)
    risk_level: Any = "low"
    estimated_time: Any = None
    recommended_provider: Any = None
    reasoning: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "steps": self.steps,
            "riskLevel": self.risk_level,
            "estimatedTime": self.estimated_time,
            "recommendedProvider": self.recommended_provider,
            "reasoning": self.reasoning,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FixRecommendation":
        """Decode a fix as emitted by the model. Values are taken as-is."""
        provider = data.get("recommendedProvider")
        if provider is None:
            provider = data.get("recommendedAI")
        return cls(
            id=data.get("id"),
            title=data.get("title"),
            description=data.get("description"),
            steps=data.get("steps", []),
            risk_level=data.get("riskLevel"),
            estimated_time=data.get("estimatedTime"),
            recommended_provider=provider,
            reasoning=data.get("reasoning"),
        )


_ANALYSIS_KEYS = {
    "rootCause",
    "severity",
    "impact",
    "fixes",
    "relatedIssues",
    "testingStrategy",
}


@dataclass
class BugAnalysis:
    """Interpreted model verdict for a bug report.

    ``source`` records which interpretation path produced the object:
    ``structured`` (decoded model JSON, passed through unvalidated),
    ``lenient`` (labeled-section extraction), ``default`` (parse failure
    placeholder) or ``unavailable`` (the model could not be reached).
    """

    root_cause: Any
    severity: Any
    impact: Any
    fixes: Any
    testing_strategy: Any
    related_issues: Any = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    source: str = "structured"

    def to_dict(self) -> Dict[str, Any]:
        fixes = self.fixes
        if isinstance(fixes, list):
            fixes = [item.to_dict() if isinstance(item, FixRecommendation) else item for item in fixes]
        data: Dict[str, Any] = dict(self.extra)
        data.update(
            {
                "rootCause": self.root_cause,
                "severity": self.severity,
                "impact": self.impact,
                "fixes": fixes,
                "relatedIssues": self.related_issues,
                "testingStrategy": self.testing_strategy,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, source: str = "structured") -> "BugAnalysis":
        """Map a decoded model reply onto the dataclass without validating it.

        Absent fields stay ``None`` and unexpected keys are kept in ``extra``.
        """
        fixes = data.get("fixes")
        if isinstance(fixes, list):
            fixes = [
                FixRecommendation.from_dict(item) if isinstance(item, Mapping) else item
                for item in fixes
            ]
        return cls(
            root_cause=data.get("rootCause"),
            severity=data.get("severity"),
            impact=data.get("impact"),
            fixes=fixes,
            testing_strategy=data.get("testingStrategy"),
            related_issues=data.get("relatedIssues"),
            extra={key: value for key, value in data.items() if key not in _ANALYSIS_KEYS},
            source=source,
        )


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "AnalyzedFile",
    "AppProjectMetadata",
    "BugAnalysis",
    "ClassInfo",
    "FixRecommendation",
    "FunctionInfo",
    "ProjectSnapshot",
    "RISK_LEVELS",
    "SEVERITY_LEVELS",
    "StructuralSummary",
    "UNKNOWN_LANGUAGE",
    "UploadedFile",
]
