# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from lahap.models.database import Base
import enum

class Gender(enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"

class MealDuration(enum.Enum):
    LESS_THAN_10 = "LESS_THAN_10"
    TEN_TO_TWENTY = "TEN_TO_TWENTY"
    TWENTY_TO_THIRTY = "TWENTY_TO_THIRTY"
    MORE_THAN_30 = "MORE_THAN_30"

class TexturePreference(enum.Enum):
    PUREED = "PUREED"
    SOFT_MASHED = "SOFT_MASHED"
    SEMI_CHUNKY = "SEMI_CHUNKY"
    SOLID_FINGER_FOOD = "SOLID_FINGER_FOOD"

class EatingPatternChange(enum.Enum):
    NO = "NO"
    SLIGHTLY = "SLIGHTLY"
    MODERATELY = "MODERATELY"
    SIGNIFICANTLY = "SIGNIFICANTLY"

class WeightEnergyLevel(enum.Enum):
    NORMAL_WEIGHT = "NORMAL_WEIGHT"
    WEIGHT_STAGNANT = "WEIGHT_STAGNANT"
    WEIGHT_DECREASING = "WEIGHT_DECREASING"


class Child(Base):
    __tablename__ = "children"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    photo = Column(String, nullable=True)
    name = Column(String, nullable=False)
    gender = Column(Enum(Gender), nullable=False)
    age = Column(Integer, nullable=False)  # months
    height = Column(Float, nullable=False)
    weight = Column(Float, nullable=False)

    favorite_food = Column(String, nullable=True)
    hated_food = Column(String, nullable=True)
    food_allergies = Column(JSON, default=list)
    refusal_behaviors = Column(JSON, default=list)

    meal_duration = Column(Enum(MealDuration), nullable=False)
    texture_preference = Column(Enum(TexturePreference), nullable=False)
    eating_pattern_change = Column(Enum(EatingPatternChange), nullable=False)
    weight_energy_level = Column(Enum(WeightEnergyLevel), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="children")
    meal_logs = relationship("MealLog", back_populates="child", cascade="all, delete-orphan")
    reports = relationship("Report", back_populates="child", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Child id={self.id} user_id={self.user_id} age={self.age}m>"
