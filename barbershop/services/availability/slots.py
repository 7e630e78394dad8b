# barbershop/services/availability/slots.py
"""Time-of-day arithmetic shared by the availability and booking code"""


def time_to_minutes(value) -> int:
    """Convert "HH:MM" to minutes since midnight; malformed input gives 0"""
    if not value:
        return 0
    try:
        hours, minutes = str(value).split(":")[:2]
        return int(hours) * 60 + int(minutes)
    except (TypeError, ValueError):
        return 0


def minutes_to_time(total_minutes: int) -> str:
    """Inverse of time_to_minutes"""
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def intervals_overlap(start_a: int, duration_a: int, start_b: int, duration_b: int) -> bool:
    """
    True when [start_a, start_a + duration_a) and [start_b, start_b + duration_b)
    intersect. Touching intervals do not overlap.
    """
    return start_a < start_b + duration_b and start_b < start_a + duration_a
