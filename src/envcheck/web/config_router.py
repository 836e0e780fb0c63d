"""FastAPI router exposing the validation outcome, deprecations and schema."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from envcheck.core.types import HealthStatus
from envcheck.environment import Environment, describe_schema

router = APIRouter()


# --- Response models ---


class ViolationResponse(BaseModel):
    field: str
    constraint: str
    message: str
    related: str | None = None


class ValidationResponse(BaseModel):
    schema_name: str
    is_valid: bool
    errors: list[ViolationResponse] = Field(default_factory=list)


class DeprecationResponse(BaseModel):
    field: str
    message: str


def _environment(request: Request) -> Environment:
    return request.app.state.environment


# --- Endpoints ---


@router.get("/health", response_model=HealthStatus)
async def health(request: Request) -> HealthStatus:
    environment = _environment(request)
    outcome = await environment.validate()
    return HealthStatus(
        service=f"config:{environment.schema.name}",
        healthy=outcome.is_valid,
        details={"errors": len(outcome.errors), "fields": len(environment)},
    )


@router.get("/api/config/validation", response_model=ValidationResponse)
async def get_validation(request: Request) -> ValidationResponse:
    environment = _environment(request)
    outcome = await environment.validate()
    return ValidationResponse(
        schema_name=environment.schema.name,
        is_valid=outcome.is_valid,
        errors=[
            ViolationResponse(
                field=v.field, constraint=str(v.constraint), message=v.message, related=v.related
            )
            for v in outcome.errors
        ],
    )


@router.get("/api/config/deprecations", response_model=list[DeprecationResponse])
async def get_deprecations(request: Request) -> list[DeprecationResponse]:
    return [
        DeprecationResponse(field=n.field, message=n.message)
        for n in _environment(request).deprecations
    ]


@router.get("/api/config/schema")
async def get_schema(request: Request) -> dict[str, Any]:
    environment = _environment(request)
    return {"name": environment.schema.name, "fields": describe_schema(environment.schema)}
