# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from lahap.models.database import Base
import enum

class ReportType(enum.Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"

class ReportStatus(enum.Enum):
    GENERATED = "GENERATED"
    VIEWED = "VIEWED"
    ARCHIVED = "ARCHIVED"

class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    child_id = Column(Integer, ForeignKey("children.id"), nullable=False, index=True)
    report_type = Column(Enum(ReportType), nullable=False)
    period = Column(String, nullable=False)  # e.g. "2024-03-05", "2024-W01", "2024-03"
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)

    summary = Column(JSON, nullable=False)
    insights = Column(JSON, default=list)
    recommendations = Column(JSON, default=list)
    meal_details = Column(JSON, default=list)  # snapshot of the meal logs in range

    total_meals = Column(Integer, default=0)
    meals_finished = Column(Integer, default=0)
    meals_partial = Column(Integer, default=0)
    meals_refused = Column(Integer, default=0)

    status = Column(Enum(ReportStatus), default=ReportStatus.GENERATED, nullable=False)
    generated_at = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    child = relationship("Child", back_populates="reports")

    __table_args__ = (UniqueConstraint("child_id", "report_type", "period", name="uq_child_report_period"),)

    def __repr__(self):
        return f"<Report id={self.id} {self.report_type.value} {self.period} status={self.status.value}>"
