from fastapi import APIRouter, Depends

from core import config
from core.llm import LLM_MODELS
from core.providers import provider_status
from routers.deps import require_auth
from schemas.health import ModelOut, ModelsResponse

router = APIRouter()


@router.get("/models", response_model=ModelsResponse, dependencies=[Depends(require_auth)])
def list_models():
    models = [
        ModelOut(
            name=model.name,
            provider=model.provider,
            default=model.name == config.DEFAULT_LLM_MODEL,
            max_tokens=model.max_tokens,
            context_window=model.context_window,
            status=provider_status(model.provider),
        )
        for model in LLM_MODELS.values()
    ]
    return ModelsResponse(
        models=models,
        default_provider=config.DEFAULT_LLM_PROVIDER,
        default_model=config.DEFAULT_LLM_MODEL,
    )
