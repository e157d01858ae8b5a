# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from datetime import datetime

import pytest

from lahap.models.child import Child, TexturePreference
from lahap.models.meal_log import MealLog, MealTime, ChildResponse
from lahap.models.report import ReportType
from lahap.services.report_service import (
    build_insights,
    build_recommendations,
    build_summary,
    format_rate,
    most_common,
    period_label,
)


def _logs(*pairs):
    return [MealLog(meal_time=mt, child_response=cr, food_name="rice") for mt, cr in pairs]


def _child(name="Sari", age=18, texture=TexturePreference.SOFT_MASHED):
    return Child(name=name, age=age, texture_preference=texture)


@pytest.mark.parametrize(
    "report_type, start, expected",
    [
        (ReportType.DAILY, datetime(2024, 3, 5, 10, 30), "2024-03-05"),
        (ReportType.MONTHLY, datetime(2024, 3, 5), "2024-03"),
        (ReportType.WEEKLY, datetime(2024, 1, 1), "2024-W01"),
        (ReportType.WEEKLY, datetime(2024, 3, 5), "2024-W10"),
        (ReportType.WEEKLY, datetime(2024, 12, 30), "2025-W01"),
        (ReportType.WEEKLY, datetime(2021, 1, 1), "2020-W53"),
    ],
)
def test_period_label(report_type, start, expected):
    assert period_label(report_type, start) == expected


def test_format_rate():
    assert format_rate(0, 0) == "0"
    assert format_rate(8, 10) == "80.0"
    assert format_rate(1, 3) == "33.3"
    assert format_rate(2, 3) == "66.7"
    # exact halves round up
    assert format_rate(1, 16) == "6.3"
    assert format_rate(5, 16) == "31.3"


def test_most_common_empty_and_ties():
    assert most_common([]) == "N/A"
    assert most_common(["LUNCH", "DINNER", "LUNCH"]) == "LUNCH"
    # tie goes to the lexicographically smallest value
    assert most_common(["LUNCH", "BREAKFAST"]) == "BREAKFAST"


def test_summary_counts_and_rates():
    logs = _logs(
        *[(MealTime.LUNCH, ChildResponse.FINISHED)] * 8,
        (MealTime.DINNER, ChildResponse.PARTIALLY),
        (MealTime.BREAKFAST, ChildResponse.REFUSED),
    )
    summary = build_summary(logs)

    assert summary == {
        "totalMeals": 10,
        "mealsFinished": 8,
        "mealsPartial": 1,
        "mealsRefused": 1,
        "finishedRate": "80.0",
        "refusedRate": "10.0",
        "mostCommonMealTime": "LUNCH",
        "mostCommonResponse": "FINISHED",
    }


def test_summary_without_meals():
    summary = build_summary([])
    assert summary["totalMeals"] == 0
    assert summary["finishedRate"] == "0"
    assert summary["refusedRate"] == "0"
    assert summary["mostCommonMealTime"] == "N/A"
    assert summary["mostCommonResponse"] == "N/A"


def test_insights_for_good_eater():
    summary = build_summary(_logs(
        *[(MealTime.LUNCH, ChildResponse.FINISHED)] * 8,
        (MealTime.DINNER, ChildResponse.PARTIALLY),
        (MealTime.BREAKFAST, ChildResponse.REFUSED),
    ))
    insights = build_insights(summary, _child())

    assert insights == [{
        "type": "positive",
        "message": "Sari is doing great! They finished 80.0% of their meals.",
    }]


def test_insights_for_frequent_refusal():
    summary = build_summary(_logs(
        (MealTime.LUNCH, ChildResponse.REFUSED),
        (MealTime.LUNCH, ChildResponse.REFUSED),
        (MealTime.DINNER, ChildResponse.FINISHED),
    ))
    insights = build_insights(summary, _child())

    assert [i["type"] for i in insights] == ["concern", "concern", "concern"]
    assert insights[0]["message"].startswith("Sari finished only 33.3% of meals.")
    assert "66.7%" in insights[1]["message"]
    assert insights[2]["message"].startswith("Most common response is refusal.")


def test_insights_middle_band_has_no_finish_rate_message():
    summary = build_summary(_logs(
        (MealTime.LUNCH, ChildResponse.FINISHED),
        (MealTime.LUNCH, ChildResponse.FINISHED),
        (MealTime.LUNCH, ChildResponse.FINISHED),
        (MealTime.DINNER, ChildResponse.PARTIALLY),
        (MealTime.DINNER, ChildResponse.PARTIALLY),
    ))
    assert summary["finishedRate"] == "60.0"
    assert build_insights(summary, _child()) == []


def test_insights_without_meals():
    insights = build_insights(build_summary([]), _child())
    assert len(insights) == 1
    assert insights[0]["message"] == "Sari finished only 0% of meals. Consider consulting with a pediatrician."


def test_recommendations_always_include_variety_and_routine():
    recs = build_recommendations(build_summary([]), _child())
    assert [r["category"] for r in recs] == ["Variety", "Routine"]


def test_recommendations_for_refusals_and_pureed_toddler():
    summary = build_summary(_logs(
        (MealTime.LUNCH, ChildResponse.REFUSED),
        (MealTime.LUNCH, ChildResponse.FINISHED),
        (MealTime.LUNCH, ChildResponse.FINISHED),
    ))
    recs = build_recommendations(summary, _child(age=14, texture=TexturePreference.PUREED))

    assert [r["category"] for r in recs] == [
        "Feeding Strategy",
        "Environment",
        "Texture Progression",
        "Variety",
        "Routine",
    ]


def test_pureed_infant_gets_no_texture_progression():
    recs = build_recommendations(build_summary([]), _child(age=12, texture=TexturePreference.PUREED))
    assert "Texture Progression" not in [r["category"] for r in recs]
