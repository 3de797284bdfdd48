from sqlalchemy import Column, Integer, String, Text
from db.database import Base


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    category = Column(String)
    type = Column(String)  # Guide / Article
    description = Column(Text)
    image = Column(String)
    link = Column(String)
    content = Column(Text)
