# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Periodic feeding reports.

A report aggregates a child's meal logs inside one DAILY / WEEKLY / MONTHLY
period into counters, a summary, rule-based insights and recommendations,
plus a snapshot of the meals themselves. There is at most one report per
(child, type, period); regenerating overwrites it in place.
"""

import logging
from collections import Counter
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from lahap.models.child import Child, TexturePreference
from lahap.models.meal_log import MealLog, ChildResponse
from lahap.models.report import Report, ReportType, ReportStatus
from lahap.services.child_service import child_brief, get_owned_child
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import Forbidden, NotFound, ValidationFailed
from lahap.utils.time_utils import isoformat_or_none, to_naive_utc
from lahap.utils.validation_utils import parse_enum, parse_optional_enum

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

# Insight thresholds (percent)
GOOD_FINISHED_RATE = 70
LOW_FINISHED_RATE = 50
HIGH_REFUSED_RATE = 30
# Recommendation thresholds
PORTION_REFUSED_RATE = 20
TEXTURE_PROGRESSION_AGE_MONTHS = 12


# ---------------------- PERIOD LABELS ----------------------
def period_label(report_type: ReportType, start: datetime) -> str:
    """
    DAILY -> 2024-03-05, WEEKLY -> 2024-W01, MONTHLY -> 2024-03.

    Weekly labels use the ISO-8601 week-numbering year, so 2024-12-30 is
    2025-W01 and 2021-01-01 is 2020-W53.
    """
    if report_type == ReportType.DAILY:
        return start.strftime("%Y-%m-%d")
    if report_type == ReportType.WEEKLY:
        iso_year, iso_week, _ = start.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    return start.strftime("%Y-%m")


# ---------------------- SUMMARY ----------------------
def format_rate(part: int, total: int) -> str:
    if total <= 0:
        return "0"
    rate = (Decimal(part) * 100 / Decimal(total)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return str(rate)


def most_common(values: Iterable[str]) -> str:
    """Most frequent value; ties go to the lexicographically smallest one."""
    counts = Counter(values)
    if not counts:
        return NOT_AVAILABLE
    return min(counts, key=lambda value: (-counts[value], value))


def build_summary(meal_logs: List[MealLog]) -> dict:
    total = len(meal_logs)
    finished = sum(1 for log in meal_logs if log.child_response == ChildResponse.FINISHED)
    partial = sum(1 for log in meal_logs if log.child_response == ChildResponse.PARTIALLY)
    refused = sum(1 for log in meal_logs if log.child_response == ChildResponse.REFUSED)

    return {
        "totalMeals": total,
        "mealsFinished": finished,
        "mealsPartial": partial,
        "mealsRefused": refused,
        "finishedRate": format_rate(finished, total),
        "refusedRate": format_rate(refused, total),
        "mostCommonMealTime": most_common(log.meal_time.value for log in meal_logs),
        "mostCommonResponse": most_common(log.child_response.value for log in meal_logs),
    }


# ---------------------- INSIGHTS & RECOMMENDATIONS ----------------------
def build_insights(summary: dict, child: Child) -> List[dict]:
    insights = []
    finished_rate = float(summary["finishedRate"])
    refused_rate = float(summary["refusedRate"])

    if finished_rate >= GOOD_FINISHED_RATE:
        insights.append({
            "type": "positive",
            "message": f"{child.name} is doing great! They finished {summary['finishedRate']}% of their meals.",
        })
    elif finished_rate < LOW_FINISHED_RATE:
        insights.append({
            "type": "concern",
            "message": (
                f"{child.name} finished only {summary['finishedRate']}% of meals. "
                "Consider consulting with a pediatrician."
            ),
        })

    if refused_rate > HIGH_REFUSED_RATE:
        insights.append({
            "type": "concern",
            "message": (
                f"High meal refusal rate ({summary['refusedRate']}%). "
                "This may indicate food preferences or feeding difficulties."
            ),
        })

    if summary["mostCommonResponse"] == ChildResponse.REFUSED.value:
        insights.append({
            "type": "concern",
            "message": "Most common response is refusal. Try offering preferred foods or changing meal presentation.",
        })

    return insights


def build_recommendations(summary: dict, child: Child) -> List[dict]:
    recommendations = []

    if float(summary["refusedRate"]) > PORTION_REFUSED_RATE:
        recommendations.append({
            "category": "Feeding Strategy",
            "suggestion": "Try offering small portions and allowing the child to ask for more.",
        })
        recommendations.append({
            "category": "Environment",
            "suggestion": "Minimize distractions during mealtime (TV, toys, etc).",
        })

    if child.texture_preference == TexturePreference.PUREED and child.age > TEXTURE_PROGRESSION_AGE_MONTHS:
        recommendations.append({
            "category": "Texture Progression",
            "suggestion": "Gradually introduce more textured foods to support oral motor development.",
        })

    recommendations.append({
        "category": "Variety",
        "suggestion": "Offer a variety of colors and food groups to ensure balanced nutrition.",
    })
    recommendations.append({
        "category": "Routine",
        "suggestion": "Maintain consistent meal times to establish a healthy eating routine.",
    })

    return recommendations


def snapshot_meal(log: MealLog) -> dict:
    return {
        "photo": log.photo,
        "foodName": log.food_name,
        "mealTime": log.meal_time.value,
        "childResponse": log.child_response.value,
        "loggedAt": isoformat_or_none(log.logged_at),
    }


def serialize_report(report: Report) -> dict:
    return {
        "id": report.id,
        "childId": report.child_id,
        "reportType": report.report_type.value,
        "period": report.period,
        "startDate": isoformat_or_none(report.start_date),
        "endDate": isoformat_or_none(report.end_date),
        "summary": report.summary,
        "insights": report.insights or [],
        "recommendations": report.recommendations or [],
        "mealDetails": report.meal_details or [],
        "totalMeals": report.total_meals,
        "mealsFinished": report.meals_finished,
        "mealsPartial": report.meals_partial,
        "mealsRefused": report.meals_refused,
        "status": report.status.value,
        "generatedAt": isoformat_or_none(report.generated_at),
        "createdAt": isoformat_or_none(report.created_at),
        "updatedAt": isoformat_or_none(report.updated_at),
        "child": child_brief(report.child),
    }


# ---------------------- GENERATE (UPSERT) ----------------------
def generate_report(
    db: Session,
    ctx: RequestContext,
    child_id: Optional[int],
    report_type: Optional[str],
    start_date: Optional[datetime],
    end_date: Optional[datetime],
) -> dict:
    if not child_id or not report_type or not start_date or not end_date:
        raise ValidationFailed("Missing required fields")

    kind = parse_enum(ReportType, report_type, "Invalid report type")
    child = get_owned_child(db, ctx, child_id)

    start = to_naive_utc(start_date)
    end = to_naive_utc(end_date)
    period = period_label(kind, start)

    meal_logs = (
        db.query(MealLog)
        .filter(
            MealLog.child_id == child.id,
            MealLog.logged_at >= start,
            MealLog.logged_at <= end,
        )
        .order_by(MealLog.logged_at.asc(), MealLog.id.asc())
        .all()
    )

    summary = build_summary(meal_logs)
    fields = {
        "start_date": start,
        "end_date": end,
        "summary": summary,
        "insights": build_insights(summary, child),
        "recommendations": build_recommendations(summary, child),
        "meal_details": [snapshot_meal(log) for log in meal_logs],
        "total_meals": summary["totalMeals"],
        "meals_finished": summary["mealsFinished"],
        "meals_partial": summary["mealsPartial"],
        "meals_refused": summary["mealsRefused"],
        "status": ReportStatus.GENERATED,
    }

    report = (
        db.query(Report)
        .filter_by(child_id=child.id, report_type=kind, period=period)
        .first()
    )

    if report:
        for key, value in fields.items():
            setattr(report, key, value)
        logger.info(f"♻️ Regenerated {kind.value} report {period} for child {child.id}")
    else:
        report = Report(child_id=child.id, report_type=kind, period=period, **fields)
        db.add(report)
        logger.info(f"📊 Generated {kind.value} report {period} for child {child.id}")

    db.commit()
    db.refresh(report)
    return serialize_report(report)


# ---------------------- READ / VIEW ----------------------
def _get_owned_report(db: Session, ctx: RequestContext, report_id: int) -> Report:
    report = db.query(Report).filter(Report.id == report_id).first()
    if not report:
        raise NotFound("Report not found")
    if report.child.user_id != ctx.user_id:
        raise Forbidden("Forbidden")
    return report


def list_reports(db: Session, ctx: RequestContext, child_id: Optional[int], report_type: Optional[str] = None) -> list:
    if not child_id:
        raise ValidationFailed("childId is required")

    child = get_owned_child(db, ctx, child_id)
    query = db.query(Report).filter(Report.child_id == child.id)

    kind = parse_optional_enum(ReportType, report_type)
    if kind:
        query = query.filter(Report.report_type == kind)

    reports = query.order_by(Report.generated_at.desc(), Report.id.desc()).all()
    return [serialize_report(r) for r in reports]


def get_report(db: Session, ctx: RequestContext, report_id: int) -> dict:
    report = _get_owned_report(db, ctx, report_id)

    # First read by the owner marks it as seen
    if report.status == ReportStatus.GENERATED:
        report.status = ReportStatus.VIEWED
        db.commit()
        db.refresh(report)

    return serialize_report(report)


def delete_report(db: Session, ctx: RequestContext, report_id: int) -> None:
    report = _get_owned_report(db, ctx, report_id)
    db.delete(report)
    db.commit()
