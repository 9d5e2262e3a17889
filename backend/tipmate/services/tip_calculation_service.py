"""
TipMate Backend — Tip Calculation Service
===========================================

What:  Business logic behind the tip-calculations resource: validate and
       insert a record, list the most recent records.
How:   Receives the DatabaseConnector for every call, connects (a no-op once
       connected), runs the query in a connector session and converts any
       storage failure into DatabaseError with a generic message.
Who:   Called by the route handlers in routes/tip_calculations.py.

Create flow (POST /api/tip-calculations):
    ┌──────────┐    ┌────────────┐    ┌────────────┐    ┌──────────┐
    │ Payload  │───▶│  Validate  │───▶│  Connect   │───▶│  Insert  │
    │ (Route)  │    │ (400 here) │    │ (shared)   │    │  (DB)    │
    └──────────┘    └────────────┘    └────────────┘    └──────────┘

    Validation runs before any database work, so a rejected payload never
    touches storage.
"""

import logging
import math
from typing import List

from sqlalchemy import desc, select

from tipmate.database import DatabaseConnector
from tipmate.exceptions import DatabaseError, ValidationError
from tipmate.models.tip_calculation import TipCalculation
from tipmate.schemas.tip_calculation import (
    TipCalculationCreate,
    TipCalculationResponse,
)

logger = logging.getLogger(__name__)

# Number of records returned by the history listing
RECENT_LIMIT = 10

LIST_FAILED_MESSAGE = "Failed to fetch tip calculations"
CREATE_FAILED_MESSAGE = "Failed to create tip calculation"


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


class TipCalculationService:
    """
    Stateless service for tip calculation records.

    Responsibilities:
        - validate_create(): presence/positivity checks on a create payload
        - create(): validated insert, returns the stored record
        - list_recent(): newest-first listing, capped at RECENT_LIMIT
    """

    def validate_create(self, payload: TipCalculationCreate) -> None:
        """
        Check the fields the API contract requires.

        Rules:
            customerName  present and not blank
            mobileNumber  present and not blank
            billAmount    present, finite and > 0

        Raises:
            ValidationError: one or more rules failed (→ 400)
        """
        missing = []
        if _is_blank(payload.customer_name):
            missing.append("customerName")
        if _is_blank(payload.mobile_number):
            missing.append("mobileNumber")
        bill = payload.bill_amount
        if bill is None or not math.isfinite(bill) or bill <= 0:
            missing.append("billAmount")

        if missing:
            raise ValidationError(fields=missing)

    async def create(
        self,
        connector: DatabaseConnector,
        payload: TipCalculationCreate,
    ) -> TipCalculationResponse:
        """
        Validate and persist a new tip calculation.

        The id and, when the payload has none, the date are assigned on
        insert. Amounts are stored as sent; the service does not recompute
        totals or percentages.

        Returns:
            TipCalculationResponse for the stored record

        Raises:
            ValidationError: payload failed validate_create (no write)
            DatabaseError: connect or insert failed (transaction rolled back)
        """
        self.validate_create(payload)

        record = TipCalculation(
            customer_name=payload.customer_name,
            mobile_number=payload.mobile_number,
            bill_amount=payload.bill_amount,
            tip_amount=payload.tip_amount,
            total_amount=payload.total_amount,
            tip_percentage=payload.tip_percentage,
        )
        if payload.date is not None:
            record.date = payload.date

        try:
            await connector.connect()
            async with connector.session() as db:
                db.add(record)
                # Flush assigns id/date and surfaces NOT NULL violations here
                await db.flush()
                response = TipCalculationResponse.model_validate(record)
        except Exception as e:
            logger.error("Error creating tip calculation: %s", str(e), exc_info=True)
            raise DatabaseError(
                message=CREATE_FAILED_MESSAGE,
                context={"error_type": type(e).__name__},
            ) from e

        logger.info(
            "Tip calculation %s created (bill=%.2f, tip=%s)",
            response.id,
            response.bill_amount,
            response.tip_amount,
        )
        return response

    async def list_recent(
        self,
        connector: DatabaseConnector,
        limit: int = RECENT_LIMIT,
    ) -> List[TipCalculationResponse]:
        """
        Return the most recent tip calculations, newest first.

        Query plan:
            SELECT ... FROM tip_calculations ORDER BY date DESC LIMIT :limit
            → idx_tip_calculations_date

        Raises:
            DatabaseError: connect or query failed
        """
        limit = max(1, min(limit, RECENT_LIMIT))
        try:
            await connector.connect()
            async with connector.session() as db:
                result = await db.execute(
                    select(TipCalculation)
                    .order_by(desc(TipCalculation.date))
                    .limit(limit)
                )
                records = list(result.scalars().all())
                return [TipCalculationResponse.model_validate(r) for r in records]
        except Exception as e:
            logger.error("Error fetching tip calculations: %s", str(e), exc_info=True)
            raise DatabaseError(
                message=LIST_FAILED_MESSAGE,
                context={"error_type": type(e).__name__},
            ) from e


# ── Singleton Instance ────────────────────────────────────────────────────
tip_calculation_service = TipCalculationService()
