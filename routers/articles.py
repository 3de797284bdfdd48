from typing import List

from fastapi import APIRouter, Depends

from auth.deps import get_current_user
from dependencies import get_store
from schemas.article import Article
from services.store import PlantPalStore

router = APIRouter(
    prefix="/articles",
    tags=["Articles"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[Article])
def get_articles(store: PlantPalStore = Depends(get_store)):
    """読み取り専用の参考記事"""
    return store.articles.list()
