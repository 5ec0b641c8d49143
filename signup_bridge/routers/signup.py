"""Signup endpoint: validate, relay to Browserless, map the outcome to HTTP."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from signup_bridge.errors import BridgeError, SubmissionFailed
from signup_bridge.models.signup import (
    ErrorResponse,
    SignupData,
    SignupPayload,
    SignupResponse,
)
from signup_bridge.services.browserless_service import browserless_service
from signup_bridge.services.validation_service import validate_signup

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Signup"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    summary="Submit a signup form via Browserless automation",
    responses={
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        500: {"model": ErrorResponse, "description": "Form submission failure"},
    },
)
async def signup(payload: SignupPayload = Body(...)) -> SignupResponse | JSONResponse:
    """Submit user registration data to the Keela form through Browserless."""
    logger.info("Received signup request for %s", payload.email)
    try:
        request = validate_signup(payload)
        outcome = await browserless_service.submit_form(request)
        if not outcome.success:
            raise SubmissionFailed(outcome.message)
    except BridgeError as e:
        logger.error("Signup failed for %s: %s", payload.email, e.message)
        raise
    except Exception as e:
        logger.error("Signup error for %s: %s", payload.email, e, exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(message="Internal server error", error=str(e)).model_dump(),
        )

    logger.info("Signup successful for %s", request.email)
    return SignupResponse(
        message=outcome.message,
        data=SignupData(
            email=request.email,
            first_name=request.first_name,
            last_name=request.last_name,
            is_scientist=request.is_scientist,
        ),
    )
