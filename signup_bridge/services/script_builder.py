"""Structured Browserless BQL script for the Keela signup form.

Steps are built as data and only turned into mutation text at the very end.
Every string argument goes through ``quote`` on the way out, so whatever a
user typed into the signup form lands in the script as a single string
literal and can't close the argument list or inject extra steps.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Union

from signup_bridge.config import settings
from signup_bridge.models.signup import SignupRequest

FIRST_NAME_SELECTOR = "input[placeholder*='First']"
LAST_NAME_SELECTOR = "input[placeholder*='Last']"
EMAIL_SELECTOR = "input[placeholder*='Email']"
RADIO_LABEL_SELECTOR = "label.form-check-label"
SUBMIT_BUTTON_SELECTOR = "button.btn-form-primary"

GEOMETRY_FIELDS = ("height", "selector", "time", "y", "x", "width")


class BqlEnum(str):
    """An enum value, rendered bare instead of quoted (e.g. ``networkIdle``)."""


ArgValue = Union[str, int, float, bool, BqlEnum]


def quote(value: str) -> str:
    """Encode ``value`` as a BQL/GraphQL string literal."""
    # JSON string escaping is a subset of what GraphQL string literals accept.
    return json.dumps(value, ensure_ascii=False)


def render_value(value: ArgValue) -> str:
    if isinstance(value, BqlEnum):
        return str(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return quote(value)
    raise TypeError(f"Unsupported BQL argument type: {type(value).__name__}")


@dataclass(frozen=True)
class ScriptStep:
    alias: str
    action: str
    arguments: dict[str, ArgValue] = field(default_factory=dict)
    fields: tuple[str, ...] = ("time",)

    def render(self, indent: str = "  ") -> str:
        head = self.action if self.alias == self.action else f"{self.alias}: {self.action}"
        if self.arguments:
            args = ", ".join(f"{k}: {render_value(v)}" for k, v in self.arguments.items())
            head = f"{head}({args})"
        body = "\n".join(f"{indent}  {name}" for name in self.fields)
        return f"{indent}{head} {{\n{body}\n{indent}}}"


@dataclass(frozen=True)
class AutomationScript:
    name: str
    steps: tuple[ScriptStep, ...]

    @property
    def step_names(self) -> list[str]:
        return [step.alias for step in self.steps]

    def to_query(self) -> str:
        rendered = "\n\n".join(step.render() for step in self.steps)
        return f"mutation {self.name} {{\n{rendered}\n}}\n"

    def to_payload(self) -> dict:
        return {"query": self.to_query()}


def radio_label_selector(is_scientist: bool) -> str:
    """Selector for the radio label whose ``for`` ends with 'true'/'false'."""
    return f"label[for$='{str(bool(is_scientist)).lower()}']"


def build_signup_script(
    request: SignupRequest,
    form_url: str | None = None,
    selector_timeout_ms: int | None = None,
    navigation_timeout_ms: int | None = None,
) -> AutomationScript:
    """Build the fill-and-submit script for one signup."""
    form_url = form_url or settings.form_url
    wait = selector_timeout_ms or settings.selector_timeout_ms
    nav_wait = navigation_timeout_ms or settings.navigation_timeout_ms

    steps = (
        ScriptStep(
            "goto", "goto",
            {"url": form_url, "waitUntil": BqlEnum("networkIdle")},
            ("status",),
        ),
        ScriptStep(
            "waitForForm", "waitForSelector",
            {"selector": FIRST_NAME_SELECTOR, "timeout": wait},
            ("selector", "time"),
        ),
        ScriptStep(
            "waitForFormLoad", "waitForSelector",
            {"selector": f"{LAST_NAME_SELECTOR}, {EMAIL_SELECTOR}", "timeout": wait},
            ("selector", "time"),
        ),
        ScriptStep(
            "typeFirstName", "type",
            {"selector": FIRST_NAME_SELECTOR, "text": request.first_name},
        ),
        ScriptStep(
            "typeLastName", "type",
            {"selector": LAST_NAME_SELECTOR, "text": request.last_name},
        ),
        ScriptStep(
            "typeEmail", "type",
            {"selector": EMAIL_SELECTOR, "text": request.email},
        ),
        ScriptStep(
            "waitForRadios", "waitForSelector",
            {"selector": RADIO_LABEL_SELECTOR, "timeout": wait},
            GEOMETRY_FIELDS,
        ),
        ScriptStep(
            "clickRadioLabel", "click",
            {"selector": radio_label_selector(request.is_scientist)},
        ),
        ScriptStep(
            "waitForButton", "waitForSelector",
            {"selector": SUBMIT_BUTTON_SELECTOR, "timeout": wait},
            GEOMETRY_FIELDS,
        ),
        ScriptStep(
            "clickSubmit", "click",
            {"selector": SUBMIT_BUTTON_SELECTOR},
        ),
        ScriptStep(
            "waitAfterSubmit", "waitForNavigation",
            {"timeout": nav_wait},
            ("status", "time", "text", "url"),
        ),
        ScriptStep("html", "html", fields=("html", "time")),
    )
    return AutomationScript(name="SubmitKeelaForm", steps=steps)
