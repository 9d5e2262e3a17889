"""
TipMate Backend — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between the calculator and
       the backend.
How:   FastAPI validates request bodies against these models, serializes
       responses by alias (camelCase on the wire) and builds the OpenAPI docs
       from them.

Wire format (camelCase) ↔ Python attributes (snake_case):
    customerName ↔ customer_name, billAmount ↔ bill_amount, ...
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class TipCalculationCreate(BaseModel):
    """
    Payload of POST /api/tip-calculations.

    Every field is optional at this layer: presence and positivity are
    checked by the service so that a missing name answers with the
    documented 400 body. Fields the service does not check (tipAmount,
    totalAmount, tipPercentage) are enforced by the storage layer.
    NaN and Infinity are refused for tipAmount and totalAmount here; a
    non-finite billAmount is reported by the service like a missing one.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    customer_name: Optional[str] = Field(default=None, description="Customer name")
    mobile_number: Optional[str] = Field(default=None, description="Customer mobile number")
    bill_amount: Optional[float] = Field(default=None, description="Pre-tip bill amount")
    tip_amount: Optional[float] = Field(default=None, allow_inf_nan=False, description="Tip amount")
    total_amount: Optional[float] = Field(
        default=None, allow_inf_nan=False, description="Bill plus tip"
    )
    tip_percentage: Optional[int] = Field(default=None, description="Tip as whole percent of bill")
    date: Optional[datetime] = Field(
        default=None,
        description="When the calculation was made. Defaults to the insertion time.",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class TipCalculationResponse(BaseModel):
    """
    A stored tip calculation, including server-assigned `id` and `date`.

    Returned by both GET (as array items) and POST (201 body).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: uuid.UUID = Field(description="Unique record identifier")
    customer_name: str
    mobile_number: str
    bill_amount: float
    tip_amount: float
    total_amount: float
    tip_percentage: int
    date: datetime = Field(description="Creation timestamp (UTC, ISO 8601)")

    @field_validator("date")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """SQLite hands back naive datetimes; they are stored as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class ErrorResponse(BaseModel):
    """
    Error body used by every failing response.

    Example:
        {"error": "Missing required fields"}
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    connector_state: str = Field(
        description="Connector lifecycle state: uninitialized, connecting, connected"
    )
    uptime_seconds: float = Field(description="Seconds since service started")
