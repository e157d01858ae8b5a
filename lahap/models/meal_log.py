# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from lahap.models.database import Base
from lahap.utils.encryption import EncryptedText  # 🔐
import enum

class MealTime(enum.Enum):
    BREAKFAST = "BREAKFAST"
    LUNCH = "LUNCH"
    DINNER = "DINNER"

class ChildResponse(enum.Enum):
    FINISHED = "FINISHED"
    PARTIALLY = "PARTIALLY"
    REFUSED = "REFUSED"

class MealLog(Base):
    __tablename__ = "meal_logs"

    id = Column(Integer, primary_key=True, index=True)
    child_id = Column(Integer, ForeignKey("children.id"), nullable=False, index=True)

    photo = Column(String, nullable=True)
    food_name = Column(String, nullable=False)
    meal_time = Column(Enum(MealTime), nullable=False)
    child_response = Column(Enum(ChildResponse), nullable=False)
    notes = Column(EncryptedText, nullable=True)  # 🔐 Encrypted

    logged_at = Column(DateTime, default=datetime.utcnow, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    child = relationship("Child", back_populates="meal_logs")
