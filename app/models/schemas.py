from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.models.research import DocumentContext


# --- Requests ---


class DocumentContextPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str = ""
    topics: list[str] = Field(default_factory=list)
    word_count: int = Field(default=0, alias="wordCount")

    def to_context(self) -> DocumentContext:
        return DocumentContext(
            summary=self.summary,
            topics=list(self.topics),
            word_count=self.word_count,
        )


class ResearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")
    document_context: DocumentContextPayload | None = Field(
        default=None, alias="documentContext"
    )


class DocumentAnalyzeRequest(BaseModel):
    text: str


class CitationModel(BaseModel):
    title: str = ""
    authors: str = ""
    source: str = ""
    link: str = "#"
    date: str = ""


class ReportCitationModel(CitationModel):
    type: str | None = None


class ReportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str = ""
    document_analysis: str | None = Field(default=None, alias="documentAnalysis")
    citations: list[ReportCitationModel] = Field(default_factory=list)


# --- Responses ---


class ResearchResponse(BaseModel):
    response: str
    citations: list[CitationModel]


class ProgressStep(BaseModel):
    step: str
    source: str | None = None
    timestamp: str


class StatusResponse(BaseModel):
    sessionId: str
    steps: list[ProgressStep]
    complete: bool


class DocumentAnalysisResponse(BaseModel):
    summary: str
    wordCount: int
    paragraphCount: int
    topics: list[str]


class ReportResponse(BaseModel):
    queryResults: str
    documentAnalysis: str | None = None
    citations: list[str]

