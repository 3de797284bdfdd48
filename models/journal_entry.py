from sqlalchemy import Column, Integer, String, Text, DateTime
from db.database import Base
from datetime import datetime


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    content = Column(Text, default="")
    date = Column(DateTime(timezone=True), default=datetime.utcnow)

    # 添付は1件だけ（無ければ全部 NULL）
    file_name = Column(String)
    file_type = Column(String)  # image / document
    file_url = Column(String)
