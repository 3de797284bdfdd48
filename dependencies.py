# dependencies.py
# create_app() で app.state に載せたものを Depends で取り出す
from fastapi import Request

from config import Settings
from services.ai_service import AIService
from services.store import PlantPalStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> PlantPalStore:
    return request.app.state.store


def get_ai_service(request: Request) -> AIService:
    return request.app.state.ai
