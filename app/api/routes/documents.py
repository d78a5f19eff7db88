from __future__ import annotations

from fastapi import APIRouter, HTTPException

from app.models.schemas import DocumentAnalysisResponse, DocumentAnalyzeRequest
from app.services import document_analyzer

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.post("/analyze", response_model=DocumentAnalysisResponse)
async def analyze_document(request: DocumentAnalyzeRequest):
    """Analyze text already extracted from an uploaded document."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="No document text provided")
    return document_analyzer.analyze(request.text).to_dict()
