import logging
from typing import Callable

from fastapi import APIRouter, Depends, Request

from core.llm import TextGenerator
from routers.deps import get_generator_resolver, require_auth, resolve_tenant
from schemas.analysis import AnalyzeResponse
from schemas.request import AnalyzeRequest
from services.analysis import run_analysis

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_auth)],
)
def analyze(
    body: AnalyzeRequest,
    request: Request,
    tenant_id: str = Depends(resolve_tenant),
    resolve_generator: Callable[[], TextGenerator] = Depends(get_generator_resolver),
):
    analyze_request = body.model_copy(
        update={
            "request_id": body.request_id or request.state.request_id,
            "tenant_id": body.tenant_id or tenant_id,
        }
    )
    logger.info(
        "Processing analysis request: request_id=%s tenant_id=%s use_case=%s mode=%s",
        analyze_request.request_id,
        analyze_request.tenant_id,
        analyze_request.use_case,
        analyze_request.mode,
    )
    return run_analysis(analyze_request, resolve_generator)
