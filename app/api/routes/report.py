from __future__ import annotations

from fastapi import APIRouter, HTTPException

from app.models.schemas import ReportRequest, ReportResponse
from app.services.citations import build_report_payload

router = APIRouter(prefix="/api/report", tags=["report"])


@router.post("/citations", response_model=ReportResponse)
async def report_citations(request: ReportRequest):
    """Format a research answer and its citations for the report renderer."""
    if not request.response and not request.document_analysis:
        raise HTTPException(status_code=400, detail="No content provided for report generation")
    return build_report_payload(
        request.response,
        [c.model_dump() for c in request.citations],
        request.document_analysis,
    )
