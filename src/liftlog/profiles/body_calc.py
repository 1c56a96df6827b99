"""Energy balance calculator.

Calculates BMR (Basal Metabolic Rate), TDEE (Total Daily Energy Expenditure)
and the weight-change rate implied by a daily calorie intake.

Uses Mifflin-St Jeor equation for BMR as it's widely validated for
calculating resting metabolic rate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from liftlog.tracking.models import ActivityLevel, Sex, UserSettings
from liftlog.units import inches_to_cm, lbs_to_kg, parse_num

# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.ATHLETE: 1.9,
}

# Alternate spellings accepted from hosts and older records
ACTIVITY_ALIASES = {
    "very": ActivityLevel.VERY_ACTIVE,
    "active": ActivityLevel.VERY_ACTIVE,
    "lightly_active": ActivityLevel.LIGHT,
    "very-active": ActivityLevel.VERY_ACTIVE,
}

# Energetic equivalence of one pound of body mass
KCAL_PER_LB = 3500.0


@dataclass
class EnergyReport:
    """Energy balance at a given intake."""

    bmr: float
    tdee: float
    intake: float
    activity_level: ActivityLevel
    daily_balance: float       # intake - TDEE (kcal/day, + surplus / - deficit)
    lbs_per_day: float         # + gain / - loss
    weight_lbs: float

    @property
    def lbs_per_week(self) -> float:
        return self.lbs_per_day * 7

    def summary(self) -> str:
        """Human-readable summary of the balance."""
        if self.lbs_per_week > 0:
            direction = "gain"
        elif self.lbs_per_week < 0:
            direction = "loss"
        else:
            direction = "maintain"
        lines = [
            f"BMR: {self.bmr:.0f} kcal/day",
            f"TDEE ({self.activity_level.value}): {self.tdee:.0f} kcal/day",
            f"Intake: {self.intake:.0f} kcal/day ({self.daily_balance:+.0f} vs TDEE)",
            f"Projected {direction}: {abs(self.lbs_per_week):.2f} lb/week",
        ]
        return "\n".join(lines)


def parse_activity_level(value: Any) -> ActivityLevel:
    """Parse an activity level string. Unknown levels default to moderate."""
    if isinstance(value, ActivityLevel):
        return value
    key = str(value or "").strip().lower()
    if key in ACTIVITY_ALIASES:
        return ACTIVITY_ALIASES[key]
    try:
        return ActivityLevel(key)
    except ValueError:
        return ActivityLevel.MODERATE


def basal_metabolic_rate(
    sex: Sex,
    age: float,
    height_cm: float,
    weight_kg: float,
) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        sex: Biological sex
        age: Age in years
        height_cm: Height in centimeters
        weight_kg: Weight in kilograms

    Returns:
        BMR in calories per day
    """
    bmr = (10 * weight_kg) + (6.25 * height_cm) - (5 * age)
    if Sex.parse(sex) == Sex.MALE:
        return bmr + 5
    return bmr - 161


def calculate_bmr(
    age: int,
    sex: Sex,
    height_inches: float,
    weight_lbs: float,
) -> float:
    """Mifflin-St Jeor BMR from imperial inputs.

    Args:
        age: Age in years
        sex: Biological sex
        height_inches: Height in inches
        weight_lbs: Weight in pounds

    Returns:
        BMR in calories per day
    """
    return basal_metabolic_rate(
        sex, age, inches_to_cm(height_inches), lbs_to_kg(weight_lbs)
    )


def total_daily_expenditure(bmr: float, activity_level: Any) -> float:
    """Calculate Total Daily Energy Expenditure.

    Args:
        bmr: Basal Metabolic Rate
        activity_level: ActivityLevel or its string name (unknown -> moderate)

    Returns:
        TDEE in calories per day
    """
    multiplier = ACTIVITY_MULTIPLIERS[parse_activity_level(activity_level)]
    return bmr * multiplier


def daily_energy_balance(intake: float, tdee: float) -> float:
    """Signed daily balance: positive is a surplus, negative a deficit."""
    return intake - tdee


def mass_change_rate(daily_balance: float) -> float:
    """Convert a daily calorie balance to pounds per day (3500 kcal = 1 lb)."""
    return daily_balance / KCAL_PER_LB


def energy_report(
    settings: UserSettings,
    weight_lbs: float,
    activity_level: Any = ActivityLevel.MODERATE,
    intake: Optional[float] = None,
) -> EnergyReport:
    """Energy balance for a user at a given weight and intake.

    Height, age and sex come from settings. When no intake is given the user
    is assumed to eat at maintenance, i.e. intake = TDEE.
    """
    level = parse_activity_level(activity_level)
    bmr = calculate_bmr(settings.age, settings.sex, settings.height_inches, weight_lbs)
    tdee = total_daily_expenditure(bmr, level)
    kcal = parse_num(intake)
    if not kcal:
        kcal = tdee
    balance = daily_energy_balance(kcal, tdee)
    return EnergyReport(
        bmr=bmr,
        tdee=tdee,
        intake=kcal,
        activity_level=level,
        daily_balance=balance,
        lbs_per_day=mass_change_rate(balance),
        weight_lbs=weight_lbs,
    )
