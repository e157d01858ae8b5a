# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class ReportGenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    child_id: Optional[int] = Field(None, alias="childId")
    report_type: Optional[str] = Field(None, alias="reportType")
    start_date: Optional[datetime] = Field(None, alias="startDate")
    end_date: Optional[datetime] = Field(None, alias="endDate")
