"""Tests for BQL script construction."""

import pytest

from signup_bridge.models.signup import SignupRequest
from signup_bridge.services.script_builder import (
    BqlEnum,
    ScriptStep,
    build_signup_script,
    quote,
    radio_label_selector,
    render_value,
)

EXPECTED_STEPS = [
    "goto",
    "waitForForm",
    "waitForFormLoad",
    "typeFirstName",
    "typeLastName",
    "typeEmail",
    "waitForRadios",
    "clickRadioLabel",
    "waitForButton",
    "clickSubmit",
    "waitAfterSubmit",
    "html",
]


def test_steps_in_order(signup_request):
    script = build_signup_script(signup_request, form_url="https://forms.example/embed/abc")
    assert script.step_names == EXPECTED_STEPS


def test_query_renders_navigation_and_timeouts(signup_request):
    query = build_signup_script(
        signup_request,
        form_url="https://forms.example/embed/abc",
        selector_timeout_ms=30000,
        navigation_timeout_ms=15000,
    ).to_query()

    assert query.startswith("mutation SubmitKeelaForm {")
    assert 'goto(url: "https://forms.example/embed/abc", waitUntil: networkIdle) {' in query
    assert (
        "waitForForm: waitForSelector(selector: \"input[placeholder*='First']\", timeout: 30000)"
        in query
    )
    assert "waitAfterSubmit: waitForNavigation(timeout: 15000)" in query
    assert "\n  html {\n    html\n    time\n  }" in query


def test_user_values_are_typed(signup_request):
    query = build_signup_script(signup_request).to_query()
    assert 'text: "Ada"' in query
    assert 'text: "Lovelace"' in query
    assert 'text: "ada@example.com"' in query


@pytest.mark.parametrize("is_scientist, suffix", [(True, "true"), (False, "false")])
def test_radio_label_follows_flag(is_scientist, suffix):
    request = SignupRequest(
        first_name="Ada", last_name="Lovelace", email="ada@example.com", is_scientist=is_scientist
    )
    query = build_signup_script(request).to_query()
    assert radio_label_selector(is_scientist) == f"label[for$='{suffix}']"
    assert f"clickRadioLabel: click(selector: \"label[for$='{suffix}']\")" in query


def test_injected_text_stays_inside_string_literal():
    request = SignupRequest(
        first_name='Bob" } html { html',
        last_name="O'Brien\nline",
        email="bob@example.com",
    )
    query = build_signup_script(request).to_query()

    assert 'text: "Bob\\" } html { html"' in query
    assert 'text: "O\'Brien\\nline"' in query
    # Only the real capture step opens a block at step indentation.
    assert query.count("\n  html {") == 1


def test_render_value_types():
    assert render_value(BqlEnum("networkIdle")) == "networkIdle"
    assert render_value(True) == "true"
    assert render_value(15000) == "15000"
    assert render_value('say "hi"') == '"say \\"hi\\""'
    with pytest.raises(TypeError):
        render_value(None)


def test_quote_escapes_backslashes():
    assert quote("a\\b") == '"a\\\\b"'


def test_step_without_alias_or_arguments():
    step = ScriptStep("html", "html", fields=("html", "time"))
    assert step.render() == "  html {\n    html\n    time\n  }"


def test_payload_wraps_query(signup_request):
    script = build_signup_script(signup_request)
    assert script.to_payload() == {"query": script.to_query()}
