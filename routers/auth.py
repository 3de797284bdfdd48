from fastapi import APIRouter, Depends, HTTPException, status

from config import Settings
from dependencies import get_app_settings, get_store
from schemas.auth import SignInRequest, SignUpRequest, TokenResponse
from services import auth_service
from services.errors import ValidationError
from services.store import PlantPalStore

# ここで /auth プレフィックスを付ける
router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


@router.post("/signin", response_model=TokenResponse)
def sign_in(
    body: SignInRequest,
    store: PlantPalStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    try:
        token = auth_service.sign_in(store, settings, body.email, body.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return {"token": token}


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def sign_up(
    body: SignUpRequest,
    store: PlantPalStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    新規登録してそのままトークンを返す
    （同じメールが既にあれば 400、トークンは出さない）
    """
    try:
        token = auth_service.sign_up(store, settings, body.fullname, body.email, body.password)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return {"token": token}
