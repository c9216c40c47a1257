HOURS_PER_DAY = 24


def contains_hour(start: int, end: int, hour: int) -> bool:
    """
    True if ``hour`` falls in ``[start, end)`` on a 24h clock.

    ``end <= start`` wraps past midnight (22 -> 6 covers 22..5). A rule that
    ends at 0 is read as "through 23" rather than as a wrap, so 19 -> 0
    covers 19..23 and not hour 0. ``start == end`` covers the whole day.
    """
    if end == 0 and start > 0:
        return hour >= start
    if start < end:
        return start <= hour < end
    return hour >= start or hour < end


def segments(start: int, end: int) -> list[tuple[int, int]]:
    """The non-wrapping ``[a, b)`` pieces covered by ``start -> end``, as read by ``contains_hour``."""
    if start == end:
        return [(0, HOURS_PER_DAY)]
    if end == 0:
        return [(start, HOURS_PER_DAY)]
    if start < end:
        return [(start, end)]
    return [(0, end), (start, HOURS_PER_DAY)]


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """
    True if two half-open hour ranges share at least one hour.

    Adjacent ranges ([6, 12) and [12, 17)) do not overlap. A wrapping range is
    split into [0, end) and [start, 24) and each half is checked.
    """
    return any(
        a_start < b_end and b_start < a_end
        for a_start, a_end in segments(start1, end1)
        for b_start, b_end in segments(start2, end2)
    )
