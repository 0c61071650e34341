"""
Response types returned by the connector service and the HTTP request models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from kafka_connector.kafka.executor import OpExecResponse


class FilterResponse(str, Enum):
    """How the connector classifies a path."""

    CONFIG = "config"
    RESOURCE = "resource"
    NONE = "none"


@dataclass
class GetResourceResponse:
    """Live state of one resource."""

    resource_definition: bytes
    outputs: Optional[Dict[str, str]] = None


@dataclass
class Diagnostic:
    """One problem found in a resource payload."""

    message: str
    severity: str = "error"
    field: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None


@dataclass
class DiagnosticResponse:
    diagnostics: List[Diagnostic] = field(default_factory=list)


@dataclass
class SkeletonResponse:
    """A template payload for a resource kind at a placeholder address."""

    addr: str
    body: bytes


@dataclass
class GetDocResponse:
    markdown: str


@dataclass
class TaskExecResponse:
    outputs: Optional[Dict[str, str]] = None
    friendly_message: Optional[str] = None
    next_state: Optional[bytes] = None


@dataclass
class OpExecOutcome:
    """Result of one item in a batch execution."""

    path: str
    ok: bool
    response: Optional[OpExecResponse] = None
    error: Optional[str] = None


# ============= HTTP request models =============


class PathRequest(BaseModel):
    path: str = Field(..., description="Resource path, e.g. 'kafka/prod/topics/orders.yaml'")


class ListRequest(BaseModel):
    subpath: str = Field(default="", description="Only list paths under this subpath")


class PlanRequest(BaseModel):
    path: str = Field(..., description="Resource path")
    current: Optional[str] = Field(default=None, description="Current YAML payload, absent if the resource is missing")
    desired: Optional[str] = Field(default=None, description="Desired YAML payload, absent to delete the resource")


class OpExecRequest(BaseModel):
    path: str = Field(..., description="Resource path")
    op: str = Field(..., description="Operation definition as returned by /plan")


class OpExecBatchRequest(BaseModel):
    items: List[OpExecRequest] = Field(default_factory=list)


class PayloadRequest(BaseModel):
    path: str = Field(..., description="Resource path")
    body: str = Field(..., description="YAML payload")


class EqRequest(BaseModel):
    path: str = Field(..., description="Resource path")
    a: str = Field(..., description="First YAML payload")
    b: str = Field(..., description="Second YAML payload")


class DocstringRequest(BaseModel):
    type_name: str = Field(..., description="Model name, e.g. 'KafkaTopic'")
    field: Optional[str] = Field(default=None, description="Optional field of the model")
