from typing import Literal, Optional

from schemas.base import CamelModel


class Article(CamelModel):
    id: Optional[int] = None
    title: str
    category: str
    type: Literal["Guide", "Article"]
    description: str
    image: str
    link: str = "#"
    content: str  # **bold** / *italic* / "*   " 箇条書きのみ
