"""
TipMate Backend — Tip Calculations Route Handlers
===================================================

What:  GET /api/tip-calculations (recent history) and
       POST /api/tip-calculations (create).
How:   Thin handlers: pull the connector from app state, delegate to
       TipCalculationService, set the status code. Errors are turned into
       responses by the global handlers in main.py.
Who:   Called by the calculator UI (tipmate.ui.client).
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, status

from tipmate.database import DatabaseConnector
from tipmate.schemas.tip_calculation import (
    ErrorResponse,
    TipCalculationCreate,
    TipCalculationResponse,
)
from tipmate.services.tip_calculation_service import tip_calculation_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Tip Calculations"])


def get_connector(request: Request) -> DatabaseConnector:
    """FastAPI dependency returning the application's DatabaseConnector."""
    return request.app.state.connector


@router.get(
    "/tip-calculations",
    response_model=List[TipCalculationResponse],
    responses={
        200: {"description": "Up to 10 most recent calculations, newest first"},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="List recent tip calculations",
)
async def list_tip_calculations(
    connector: DatabaseConnector = Depends(get_connector),
) -> List[TipCalculationResponse]:
    """Return the 10 most recent tip calculations ordered by date descending."""
    return await tip_calculation_service.list_recent(connector)


@router.post(
    "/tip-calculations",
    response_model=TipCalculationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "The created record, with id and date"},
        400: {"description": "Missing or invalid required fields", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Create a tip calculation",
)
async def create_tip_calculation(
    payload: TipCalculationCreate,
    connector: DatabaseConnector = Depends(get_connector),
) -> TipCalculationResponse:
    """
    Store a new tip calculation.

    Requires a non-empty customerName and mobileNumber and a billAmount
    greater than zero; anything else answers 400 without writing.
    """
    return await tip_calculation_service.create(connector, payload)
