"""
ngle_analyzer/api/routers/analysis.py

API router for requesting syntactic analyses.
"""

from fastapi import APIRouter, HTTPException, Request, status

from ngle_analyzer.agents.errors import (
    AnalyzerError,
    ConfigurationError,
)
from ngle_analyzer.agents.sentence_analyzer import SentenceAnalyzer
from ngle_analyzer.api.schemas import (
    SentenceAnalysisRequest,
    SentenceAnalysisResponse,
    ServiceStatusResponse,
)
from ngle_analyzer.utils.logger import get_logger

router = APIRouter(prefix="/analysis", tags=["Analysis"])

logger = get_logger()


def get_analyzer(request: Request) -> SentenceAnalyzer:
    """Returns the analyzer created at application startup."""
    return request.app.state.analyzer


@router.get("/status", response_model=ServiceStatusResponse, summary="Service Status")
async def service_status(request: Request):
    analyzer = get_analyzer(request)
    if not analyzer.is_configured():
        return ServiceStatusResponse(configured=False)
    return ServiceStatusResponse(
        configured=True,
        provider=analyzer.agent.get_provider_name(),
        model=analyzer.agent.get_model_name(),
    )


@router.post(
    "/sentence",
    response_model=SentenceAnalysisResponse,
    summary="Analyze Sentence",
)
async def analyze_sentence(payload: SentenceAnalysisRequest, request: Request):
    """
    Requests the syntactic analysis of one sentence.

    Returns `available: false` with a null analysis when the service replied
    with an empty or malformed tree.

    Raises:
        HTTPException(503): If the text completion service is not configured.
        HTTPException(502): If the service failed (credential, network or
        exhausted retries); the detail carries the user-facing message.
    """
    analyzer = get_analyzer(request)
    try:
        analysis = await analyzer.analyze(payload.sentence)
    except ConfigurationError as e:
        logger.error(f"Analysis requested but service is not configured: {e}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except AnalyzerError as e:
        logger.error(f"Analysis failed for '{payload.sentence[:50]}': {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if analysis is None:
        logger.warning(f"Analysis unavailable for '{payload.sentence[:50]}'")
        return SentenceAnalysisResponse(sentence=payload.sentence, available=False)

    return SentenceAnalysisResponse(
        sentence=payload.sentence, available=True, analysis=analysis.to_wire()
    )
