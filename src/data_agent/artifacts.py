"""
Visualization Artifacts
=======================

Pydantic models for the chart/table/scorecard descriptors rendered by the
dashboard, and helpers to pull them out of analyst output.
"""

import json
import re
from enum import Enum
from typing import Any, Literal, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

logger = structlog.get_logger(__name__)

# First ```json fenced block, as the analyst prompt asks for it.
JSON_BLOCK_PATTERN = re.compile(r"```json\n([\s\S]*?)\n```")
JSON_FENCE_PATTERN = re.compile(r"```json[\s\S]*?```")


class ArtifactType(str, Enum):
    CHART = "chart"
    TABLE = "table"
    SCORECARD = "scorecard"


class _ArtifactModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Dataset(_ArtifactModel):
    label: str
    data: list[Optional[Union[float, int, str]]]
    background_color: Optional[Union[str, list[str]]] = Field(
        default=None, alias="backgroundColor"
    )


class ChartData(_ArtifactModel):
    labels: list[Union[str, int, float]]
    datasets: list[Dataset]

    @model_validator(mode="after")
    def check_lengths(self) -> "ChartData":
        for dataset in self.datasets:
            if len(dataset.data) != len(self.labels):
                raise ValueError(
                    f"Dataset '{dataset.label}' has {len(dataset.data)} values "
                    f"for {len(self.labels)} labels"
                )
        return self


class TableColumn(_ArtifactModel):
    header: str
    field: str


class TableData(_ArtifactModel):
    columns: list[TableColumn]
    rows: list[dict[str, Any]]


class ScorecardMetric(_ArtifactModel):
    label: str
    value: Union[str, int, float]
    change: Optional[float] = None
    change_label: Optional[str] = Field(default=None, alias="changeLabel")
    trend: Optional[Literal["up", "down", "neutral"]] = None


class Insight(_ArtifactModel):
    title: str
    description: str
    type: Literal["warning", "opportunity", "action"]
    kcs_principle: Optional[str] = Field(default=None, alias="kcsPrinciple")


class Artifact(_ArtifactModel):
    """Structured visualization descriptor consumed by the rendering layer."""

    type: ArtifactType
    title: str
    description: Optional[str] = None
    chart_type: Optional[Literal["bar", "line", "pie", "area"]] = Field(
        default=None, alias="chartType"
    )
    data: Union[ChartData, TableData, list[ScorecardMetric]]
    insights: list[Insight] = Field(default_factory=list)
    follow_up_questions: list[str] = Field(default_factory=list, alias="followUpQuestions")

    @model_validator(mode="after")
    def check_data_matches_type(self) -> "Artifact":
        expected = {
            ArtifactType.CHART: ChartData,
            ArtifactType.TABLE: TableData,
            ArtifactType.SCORECARD: list,
        }[self.type]
        if not isinstance(self.data, expected):
            raise ValueError(f"'{self.type.value}' artifact has mismatched data")
        return self

    def to_json(self) -> dict[str, Any]:
        """Wire shape with the rendering layer's camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def extract_artifact(content: str) -> Optional[Artifact]:
    """
    Parse the first ```json block of a model response into an Artifact.

    Returns None when there is no block or it does not parse or validate.
    """
    match = JSON_BLOCK_PATTERN.search(content)
    if not match or not match.group(1).strip():
        return None

    try:
        payload = json.loads(match.group(1))
        return Artifact.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error("artifact_parse_failed", error=str(e))
        return None


def strip_artifact_block(content: str) -> str:
    """Remove the first ```json fence from display text."""
    return JSON_FENCE_PATTERN.sub("", content, count=1).strip()
