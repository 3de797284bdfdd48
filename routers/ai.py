# routers/ai.py
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from auth.deps import get_current_user
from dependencies import get_ai_service
from schemas.ai import (
    AutofillResponse,
    ChatRequest,
    ChatResponse,
    FertilizerSuggestionRequest,
    FertilizerSuggestionResponse,
    IdentifyResponse,
)
from services.ai_service import AIService
from services.errors import AIServiceError

router = APIRouter(
    prefix="/ai",
    tags=["AI"],
    dependencies=[Depends(get_current_user)],
)


# -------------------------
# utils
# -------------------------
def _read_image(image: Optional[UploadFile]) -> bytes:
    if image is None or not image.filename:
        raise HTTPException(status_code=400, detail="Image file is required.")
    if image.content_type and not image.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Uploaded file must be an image.")

    data = image.file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Image file is required.")
    return data


# -------------------------
# endpoints
# -------------------------
@router.post("/chat", response_model=ChatResponse)
def chat(body: ChatRequest, ai: AIService = Depends(get_ai_service)):
    try:
        return {"response": ai.chat(body.prompt, body.history)}
    except AIServiceError as e:
        raise HTTPException(status_code=500, detail=e.message)


@router.post("/identify", response_model=IdentifyResponse)
def identify(image: Optional[UploadFile] = File(None), ai: AIService = Depends(get_ai_service)):
    """写真から種を推定 {name, match(%)}"""
    data = _read_image(image)
    try:
        return ai.identify(data, image.content_type)
    except AIServiceError as e:
        raise HTTPException(status_code=500, detail=e.message)


@router.post("/autofill", response_model=AutofillResponse, response_model_exclude_none=True)
def autofill(image: Optional[UploadFile] = File(None), ai: AIService = Depends(get_ai_service)):
    """写真から追加フォームのケア項目を推定"""
    data = _read_image(image)
    try:
        return ai.autofill(data, image.content_type)
    except AIServiceError as e:
        raise HTTPException(status_code=500, detail=e.message)


@router.post("/fertilizer-suggestion", response_model=FertilizerSuggestionResponse)
def fertilizer_suggestion(
    body: FertilizerSuggestionRequest,
    ai: AIService = Depends(get_ai_service),
):
    try:
        return {"suggestion": ai.fertilizer_suggestion(body.name, body.scientific_name)}
    except AIServiceError as e:
        raise HTTPException(status_code=500, detail=e.message)
