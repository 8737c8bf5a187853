"""Simulation extraction endpoint.

Endpoints:
- POST /api/extract - Evaluate note text into {extraction, simulation}

Any failure answers with the same opaque body, ``{"error": "Processing failed"}``:
400 when ``notes`` is missing or not a string, 500 otherwise.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, StrictStr

from loomin.core.exceptions import InvalidNotesError
from loomin.core.logging import get_logger
from loomin.simulation.pipeline import SimulationPipeline

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["simulation"])

PROCESSING_FAILED = {"error": "Processing failed"}


# =============================================================================
# REQUEST MODELS (Rule #7: Validation)
# =============================================================================


class ExtractRequest(BaseModel):
    """Body of POST /api/extract."""

    notes: StrictStr = Field(..., description="Raw note text")


def processing_failed(status_code: int) -> JSONResponse:
    """The opaque failure response."""
    return JSONResponse(status_code=status_code, content=PROCESSING_FAILED)


def get_pipeline(request: Request) -> SimulationPipeline:
    """Pipeline built once by the application lifespan."""
    return request.app.state.pipeline


# =============================================================================
# ENDPOINT HANDLERS
# =============================================================================


@router.post("/extract")
async def extract(
    body: ExtractRequest,
    pipeline: SimulationPipeline = Depends(get_pipeline),
) -> Any:
    """Evaluate a note and return its extraction and simulation verdict."""
    try:
        result = await pipeline.evaluate(body.notes)
    except InvalidNotesError as e:
        logger.warning("Rejected notes", error=str(e))
        return processing_failed(400)
    except Exception as e:
        logger.exception("Extraction request failed", error=str(e))
        return processing_failed(500)

    return result.to_dict()
