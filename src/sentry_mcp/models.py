"""Internal models for tool definitions, results and arguments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Dict[str, Any]


@dataclass(frozen=True)
class TextContent:
    text: str
    type: str = "text"


@dataclass(frozen=True)
class ToolCallResult:
    content: List[TextContent]
    is_error: bool = False


@dataclass(frozen=True)
class Release:
    version: str
    date_created: Optional[str]
    new_groups: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "dateCreated": self.date_created,
            "newGroups": self.new_groups,
        }


@dataclass(frozen=True)
class Issue:
    id: str
    title: str
    permalink: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Issue":
        return cls(
            id=payload.get("id"),
            title=payload.get("title"),
            permalink=payload.get("permalink"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "permalink": self.permalink}


@dataclass
class RetryState:
    max_retries: int
    delay: Callable[[int], float]
    attempt_count: int = 0

    @property
    def exhausted(self) -> bool:
        return self.attempt_count >= self.max_retries

    def next_delay(self) -> float:
        self.attempt_count += 1
        return self.delay(self.attempt_count)


class ToolArguments(BaseModel):
    """Base for per-tool argument records.

    Non-numeric fields are coerced to strings; numeric fields go through
    pydantic's numeric parsing. Unknown keys are dropped.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any, info) -> Any:
        annotation = cls.model_fields[info.field_name].annotation
        if value is None or annotation in (int, Optional[int], float, Optional[float]):
            return value
        if isinstance(value, bool):
            return str(value).lower()
        if not isinstance(value, str):
            return str(value)
        return value


class InspectArgs(ToolArguments):
    pass


class ListRecentReleasesArgs(ToolArguments):
    project_slug: str = Field(..., description="Project slug")
    org_slug: Optional[str] = Field(None, description="Organization slug (defaults to SENTRY_ORG_SLUG)")
    count: Optional[float] = Field(None, ge=0, allow_inf_nan=False, description="Number of releases to return (default 5)")


class GetReleasesArgs(ToolArguments):
    project_slug: str = Field(..., description="Project slug")
    org_slug: Optional[str] = Field(None, description="Organization slug (defaults to SENTRY_ORG_SLUG)")


class GetReleaseHealthArgs(ToolArguments):
    project_slug: str = Field(..., description="Project slug")
    org_slug: Optional[str] = Field(None, description="Organization slug (defaults to SENTRY_ORG_SLUG)")
    release_version: Optional[str] = Field(None, description="Release version (defaults to latest)")


class GetIssueArgs(ToolArguments):
    issue_id: str = Field(..., description="Sentry issue ID")
    org_slug: str = Field(..., description="Organization slug")
    project_slug: str = Field(..., description="Project slug")


class GetReleaseIssuesArgs(ToolArguments):
    project_slug: str = Field(..., description="Project slug (e.g., 'renaissance')")
    org_slug: Optional[str] = Field(None, description="Organization slug (defaults to SENTRY_ORG_SLUG)")
    release_version: Optional[str] = Field(
        None, description="Optional: Specific release version (defaults to latest)"
    )


_NUMERIC = {int: "number", float: "number", Optional[int]: "number", Optional[float]: "number"}


def input_schema_for(model: type[ToolArguments]) -> Dict[str, Any]:
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for name, info in model.model_fields.items():
        prop: Dict[str, Any] = {"type": _NUMERIC.get(info.annotation, "string")}
        if info.description:
            prop["description"] = info.description
        properties[name] = prop
        if info.is_required():
            required.append(name)
    return {"type": "object", "properties": properties, "required": required}


@dataclass(frozen=True)
class SentryTool:
    definition: ToolDefinition
    input_model: type[ToolArguments]
    handler: Callable[[Any], Any] = field(compare=False)

    @property
    def name(self) -> str:
        return self.definition.name
