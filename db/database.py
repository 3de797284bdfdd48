# db/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


def make_engine(database_url: str, echo: bool = False):
    if not database_url:
        raise RuntimeError("DATABASE_URL is not set in environment variables")

    connect_args = {}
    if database_url.startswith("sqlite"):
        # TestClient / uvicorn のスレッドプールから触るため
        connect_args["check_same_thread"] = False

    return create_engine(database_url, echo=echo, connect_args=connect_args)


def make_session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine) -> None:
    # models を import しておく（create_all がテーブルを認識するため）
    from models.user import User  # noqa: F401
    from models.plant import Plant  # noqa: F401
    from models.journal_entry import JournalEntry  # noqa: F401
    from models.article import Article  # noqa: F401

    Base.metadata.create_all(bind=engine)
