"""
Age-category eligibility checks used when an athlete is nominated.
"""

from datetime import date

from ..models import AgeCategory


def age_on(date_of_birth: date, on: date) -> int:
    age = on.year - date_of_birth.year
    if (on.month, on.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def age_category_for(date_of_birth: date, on: date | None = None) -> AgeCategory:
    age = age_on(date_of_birth, on or date.today())

    if age <= 18:
        return AgeCategory.SUB_JUNIORS
    if age <= 23:
        return AgeCategory.JUNIORS
    if age >= 70:
        return AgeCategory.MASTERS_4
    if age >= 60:
        return AgeCategory.MASTERS_3
    if age >= 50:
        return AgeCategory.MASTERS_2
    if age >= 40:
        return AgeCategory.MASTERS_1
    return AgeCategory.OPEN


def is_eligible_for_age_category(
    date_of_birth: date, category: AgeCategory, on: date | None = None
) -> bool:
    # Everyone may lift in the open category
    if category == AgeCategory.OPEN:
        return True
    return age_category_for(date_of_birth, on) == category
