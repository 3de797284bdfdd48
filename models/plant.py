from sqlalchemy import Column, Integer, String, Text, DateTime
from db.database import Base
from datetime import datetime


class Plant(Base):
    __tablename__ = "plants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    scientific_name = Column(String, default="")
    image = Column(String, default="")
    light = Column(String, default="Medium")  # Low / Medium / Bright
    health = Column(String, default="healthy")  # healthy / attention
    location = Column(String, default="")

    watering_frequency = Column(Integer, nullable=False)
    last_watered = Column(DateTime(timezone=True), default=datetime.utcnow)
    fertilizing_frequency = Column(Integer, nullable=False)
    last_fertilized = Column(DateTime(timezone=True), default=datetime.utcnow)
    grooming_frequency = Column(Integer, nullable=False)
    last_groomed = Column(DateTime(timezone=True), default=datetime.utcnow)

    sunlight = Column(String, default="")
    humidity = Column(String, default="")
    notes = Column(Text)
    fertilizer_details = Column(Text)
