"""Browserless relay: submits a signup to the Keela form via a BQL script."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

import httpx

from signup_bridge.config import Settings, settings
from signup_bridge.errors import (
    AutomationStepFailure,
    BridgeError,
    HeuristicMismatch,
    ScriptRejected,
    TransportError,
)
from signup_bridge.models.automation import AutomationResponse, StepReport
from signup_bridge.models.signup import SignupRequest, SubmissionOutcome
from signup_bridge.services.script_builder import AutomationScript, build_signup_script

logger = logging.getLogger(__name__)

# Tuned against the Keela confirmation page. Case-sensitive on purpose.
SUCCESS_MARKERS = ("success", "thank", "submitted", "Thank you", "Success")
HTML_PREVIEW_LENGTH = 1000
NAVIGATION_STEP = "waitAfterSubmit"


def looks_successful(html: str) -> bool:
    return any(marker in html for marker in SUCCESS_MARKERS)


def classify_response(response: AutomationResponse, script: AutomationScript) -> SubmissionOutcome:
    """Turn a parsed Browserless response into an outcome.

    Raises ``ScriptRejected``, ``TransportError`` or ``AutomationStepFailure``
    for hard failures and ``HeuristicMismatch`` when every step ran but the
    page shows no success marker. Any ``errors`` key fails the run, even an
    empty list.
    """
    if response.errors is not None:
        messages = ", ".join(e.message for e in response.errors)
        raise ScriptRejected(f"GraphQL errors: {messages}")

    if response.data is None:
        raise TransportError("Browserless response carried no step data")

    report = StepReport.from_data(response.data, script.step_names)
    failed = report.failed_steps
    if failed:
        raise AutomationStepFailure(failed)

    html = report.html
    data = {
        "html": html[:HTML_PREVIEW_LENGTH],
        "url": report.url_of(NAVIGATION_STEP),
    }
    if not looks_successful(html):
        raise HeuristicMismatch("Form submission may have failed", data=data)
    return SubmissionOutcome(success=True, message="Form submitted successfully", data=data)


class BrowserlessService:
    """Relays signups to Browserless, or simulates them when no token is set."""

    def __init__(
        self,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()
        self._client_loop: asyncio.AbstractEventLoop | None = None

    @property
    def is_configured(self) -> bool:
        token = self._config.browserless_token
        return bool(token) and token != self._config.mock_token_sentinel

    async def get_client(self) -> httpx.AsyncClient:
        """Create the shared HTTP client once per event loop.

        Concurrent first use on one loop still builds a single client. When
        the running loop changes (serverless platforms may run each
        invocation on a fresh loop, and lifespan never runs there) the old
        client is abandoned rather than reused, since its connections belong
        to the loop that opened them.
        """
        loop = asyncio.get_running_loop()
        if self._client_loop is not loop:
            if self._client is not None:
                logger.info("Event loop changed, rebuilding Browserless HTTP client")
            self._client = None
            self._client_lock = asyncio.Lock()
            self._client_loop = loop
        if self._client is None:
            async with self._client_lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        timeout=self._config.request_timeout,
                        transport=self._transport,
                    )
                    logger.info("Browserless HTTP client created")
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Browserless HTTP client closed")

    async def submit_form(self, request: SignupRequest) -> SubmissionOutcome:
        """Submit one signup. Never raises; failures come back as outcomes."""
        try:
            logger.info("Starting form submission for %s", request.email)
            if not self.is_configured:
                logger.warning("No valid Browserless token configured - returning mock success")
                return self._mock_outcome(request)
            return await self._execute(request)
        except Exception as e:
            logger.error("Form submission failed: %s", e, exc_info=True)
            return SubmissionOutcome(success=False, message=f"Form submission failed: {e}")

    def _mock_outcome(self, request: SignupRequest) -> SubmissionOutcome:
        return SubmissionOutcome(
            success=True,
            message="Mock form submission successful (no Browserless token configured)",
            data={
                "firstName": request.first_name,
                "lastName": request.last_name,
                "email": request.email,
                "isScientist": request.is_scientist,
                "submittedAt": datetime.now(timezone.utc).isoformat(),
                "mock": True,
            },
        )

    def _query_params(self) -> dict[str, str]:
        cfg = self._config
        params = {"token": cfg.browserless_token}
        if cfg.browserless_proxy:
            params["proxy"] = cfg.browserless_proxy
            params["proxySticky"] = "true"
            params["proxyCountry"] = cfg.browserless_proxy_country
        if cfg.browserless_humanlike:
            params["humanlike"] = "true"
        if cfg.browserless_block_consent_modals:
            params["blockConsentModals"] = "true"
        return params

    async def _execute(self, request: SignupRequest) -> SubmissionOutcome:
        script = build_signup_script(
            request,
            form_url=self._config.form_url,
            selector_timeout_ms=self._config.selector_timeout_ms,
            navigation_timeout_ms=self._config.navigation_timeout_ms,
        )
        try:
            response = await self._post(script)
            outcome = classify_response(response, script)
        except HeuristicMismatch as e:
            logger.warning("No success marker on the resulting page for %s", request.email)
            return SubmissionOutcome(success=False, message=e.message, data=e.data)
        except AutomationStepFailure as e:
            logger.warning("Some form submission steps failed: %s", ", ".join(e.failed_steps))
            return SubmissionOutcome(success=False, message=e.message)
        except BridgeError as e:
            logger.error("Browserless call failed: %s", e.message)
            return SubmissionOutcome(success=False, message=e.message)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error executing form submission: %s", e)
            return SubmissionOutcome(success=False, message=f"Execution error: {e}")

        logger.info("Form submitted for %s", request.email)
        return outcome

    async def _post(self, script: AutomationScript) -> AutomationResponse:
        client = await self.get_client()
        logger.info("Sending request to Browserless API: %s", self._config.browserless_url)
        response = await client.post(
            self._config.browserless_url,
            params=self._query_params(),
            json=script.to_payload(),
        )
        logger.info("Browserless response status: %d", response.status_code)

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            logger.error(
                "Non-JSON response received (%s): %s",
                content_type or "no content type",
                response.text[:500],
            )
            raise TransportError(
                "Browserless API returned a non-JSON response. Check URL and authentication."
            )
        return AutomationResponse.model_validate(response.json())


browserless_service = BrowserlessService()
