from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SignupPayload(BaseModel):
    """Raw signup body as posted by the browser script.

    Everything is optional here so that missing fields reach the validator
    and come back as a 400 instead of a schema error.
    """

    first_name: str | None = Field(None, alias="firstName", examples=["John"])
    last_name: str | None = Field(None, alias="lastName", examples=["Doe"])
    email: str | None = Field(None, examples=["john.doe@example.com"])
    is_scientist: bool | None = Field(None, alias="isScientist", examples=[True])

    model_config = ConfigDict(populate_by_name=True)


class SignupRequest(BaseModel):
    """A validated signup. Immutable and scoped to one request."""

    first_name: str = Field(alias="firstName", min_length=1, max_length=50)
    last_name: str = Field(alias="lastName", min_length=1, max_length=50)
    email: str
    is_scientist: bool = Field(False, alias="isScientist")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SubmissionOutcome(BaseModel):
    success: bool
    message: str
    data: dict[str, Any] | None = None


class SignupData(BaseModel):
    email: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    is_scientist: bool = Field(alias="isScientist")

    model_config = ConfigDict(populate_by_name=True)


class SignupResponse(BaseModel):
    success: bool = True
    message: str = Field(examples=["Form submitted successfully"])
    data: SignupData


class ErrorResponse(BaseModel):
    success: bool = False
    message: str = Field(examples=["Missing required fields: firstName, lastName, email"])
    error: str | None = Field(None, examples=["Validation Error"])


class HealthResponse(BaseModel):
    status: str = "ok"
    automation_configured: bool
