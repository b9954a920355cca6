"""
Combo availability schedule.

Templates can be offered always, on certain weekdays (0 = Sunday), or on
certain dates of the month. A missing day/date list means no restriction;
an empty list matches no day, so the combo is not offered until one is ticked.
"""

from datetime import date

from ..schemas.combos import ComboTemplate, ScheduleType


def weekday_sunday_first(day: date) -> int:
    """0 = Sunday ... 6 = Saturday (date.weekday() has Monday = 0)."""
    return (day.weekday() + 1) % 7


def is_combo_active_on(template: ComboTemplate, day: date) -> bool:
    """True when the template's schedule offers it on the given day."""
    if template.schedule_type == ScheduleType.DAYS_OF_WEEK:
        if template.schedule_days is None:
            return True
        return weekday_sunday_first(day) in template.schedule_days
    if template.schedule_type == ScheduleType.DATES_OF_MONTH:
        if template.schedule_dates is None:
            return True
        return day.day in template.schedule_dates
    return True


def is_combo_offered(template: ComboTemplate, today: date | None = None) -> bool:
    """Active flag and schedule together."""
    return template.is_active and is_combo_active_on(template, today or date.today())
