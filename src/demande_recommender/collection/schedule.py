"""
Schedule Preferences - Which Open Slots Suit the Client.

A slot suits the client when its local start time matches any of the
preferences chosen at intake:

    am       starts before 12:00
    pm       starts from 12:00 to before 17:00
    evening  starts at 17:00 or later
    weekend  falls on a Saturday or Sunday

No preference, or "other" (free-text detail handled by staff), leaves
every slot eligible.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import AbstractSet

from demande_recommender.domain.entities import SchedulePreference

NOON_HOUR = 12
EVENING_HOUR = 17


def filters_slots(preferences: AbstractSet[SchedulePreference]) -> bool:
    """True if the preferences restrict which slots count."""
    return bool(preferences) and SchedulePreference.OTHER not in preferences


def matches_preference(local_start: datetime, preference: SchedulePreference) -> bool:
    """Check one preference against a slot start in clinic local time."""
    hour = local_start.hour
    if preference is SchedulePreference.AM:
        return hour < NOON_HOUR
    if preference is SchedulePreference.PM:
        return NOON_HOUR <= hour < EVENING_HOUR
    if preference is SchedulePreference.EVENING:
        return hour >= EVENING_HOUR
    if preference is SchedulePreference.WEEKEND:
        return local_start.weekday() >= 5
    return True


def matches_schedule(
    slot_start: datetime,
    preferences: AbstractSet[SchedulePreference],
    clinic_tz: tzinfo,
) -> bool:
    """
    Check whether a slot suits the client.

    Args:
        slot_start: Aware slot start time
        preferences: Client schedule preferences
        clinic_tz: Time zone the preferences are expressed in

    Returns:
        True if the slot matches any preference (or none apply)
    """
    if not filters_slots(preferences):
        return True
    local_start = slot_start.astimezone(clinic_tz)
    return any(matches_preference(local_start, p) for p in preferences)
