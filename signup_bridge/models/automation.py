"""Browserless BQL response envelope and per-step results.

The ``data`` mapping Browserless returns is loosely typed: a step that never
ran is ``null`` (or simply absent), a step that blew up may carry an
``error`` key, and everything else is whatever fields the mutation selected.
``resolve_step`` turns each raw value into one of the tagged models below so
the relay can classify them without poking at dicts.
"""
from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

HTML_STEP = "html"


class AutomationErrorLocation(BaseModel):
    line: int
    column: int


class AutomationError(BaseModel):
    message: str = ""
    locations: list[AutomationErrorLocation] = []
    path: list[str | int] = []

    model_config = ConfigDict(extra="allow")


class AutomationResponse(BaseModel):
    data: dict[str, Any] | None = None
    errors: list[AutomationError] | None = None

    model_config = ConfigDict(extra="allow")


class MissingStep(BaseModel):
    kind: Literal["missing"] = "missing"
    name: str


class ErrorStep(BaseModel):
    kind: Literal["error"] = "error"
    name: str
    error: Any = None


class TimingStep(BaseModel):
    """A step that ran. Carries whatever timing/geometry fields were selected."""

    kind: Literal["timing"] = "timing"
    name: str
    time: float | None = None
    selector: str | None = None
    status: int | None = None
    url: str | None = None
    text: str | None = None
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None
    raw: Any = None


class HtmlStep(BaseModel):
    kind: Literal["html"] = "html"
    name: str = HTML_STEP
    html: str = ""
    time: float | None = None


StepResult = Union[MissingStep, ErrorStep, TimingStep, HtmlStep]

_TIMING_FIELDS = ("time", "selector", "status", "url", "text", "x", "y", "width", "height")


def resolve_step(name: str, value: Any) -> StepResult:
    """Classify one raw step value from the ``data`` mapping."""
    if value is None:
        return MissingStep(name=name)
    if isinstance(value, dict) and "error" in value:
        return ErrorStep(name=name, error=value["error"])
    if name == HTML_STEP:
        if isinstance(value, dict):
            html = value.get("html")
            captured_at = value.get("time")
            return HtmlStep(
                html=html if isinstance(html, str) else "",
                time=captured_at if isinstance(captured_at, (int, float)) else None,
            )
        return HtmlStep()
    if isinstance(value, dict):
        fields = {}
        for key in _TIMING_FIELDS:
            if value.get(key) is not None:
                fields[key] = value[key]
        try:
            return TimingStep(name=name, raw=value, **fields)
        except ValueError:
            # Unexpected field types still mean the step ran.
            return TimingStep(name=name, raw=value)
    return TimingStep(name=name, raw=value)


def is_failed(step: StepResult) -> bool:
    return isinstance(step, (MissingStep, ErrorStep))


class StepReport(BaseModel):
    """Resolved view over a whole ``data`` mapping."""

    steps: dict[str, StepResult] = Field(default_factory=dict)

    @classmethod
    def from_data(cls, data: dict[str, Any], expected: list[str]) -> StepReport:
        names = list(expected)
        names.extend(key for key in data if key not in names)
        return cls(steps={name: resolve_step(name, data.get(name)) for name in names})

    @property
    def failed_steps(self) -> list[str]:
        return [
            name
            for name, step in self.steps.items()
            if name != HTML_STEP and is_failed(step)
        ]

    @property
    def html(self) -> str:
        step = self.steps.get(HTML_STEP)
        if isinstance(step, HtmlStep):
            return step.html
        return ""

    def url_of(self, name: str) -> str | None:
        step = self.steps.get(name)
        if isinstance(step, TimingStep):
            return step.url
        return None
