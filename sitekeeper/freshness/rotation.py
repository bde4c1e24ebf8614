"""Daily rotation of the homepage tip and document insight.

The index is the day of the year modulo seven. Because the year restarts at
day 1, the rotation phase shifts at each year boundary (one extra step after
a leap year). The shift is accepted, not corrected.
"""

from datetime import date

from sitekeeper.consts import DOCUMENT_INSIGHTS, HOMEPAGE_TIPS


def day_of_year(day: date) -> int:
    """1 for January 1st."""
    return day.timetuple().tm_yday


def rotation_index(day: date) -> int:
    return day_of_year(day) % len(HOMEPAGE_TIPS)


def daily_texts(day: date) -> tuple[str, str]:
    """Homepage tip and document insight for a date.

    Returns:
        Tuple of (homepage tip, document insight).
    """
    index = rotation_index(day)
    return HOMEPAGE_TIPS[index], DOCUMENT_INSIGHTS[index]


def main() -> None:
    """Print one week of rotation."""
    from datetime import timedelta

    start = date.today()
    print("Daily Rotation")
    print("=" * 50)
    for offset in range(7):
        day = start + timedelta(days=offset)
        tip, insight = daily_texts(day)
        print(f"\n{day.isoformat()} (index {rotation_index(day)})")
        print(f"  Homepage: {tip}")
        print(f"  Document: {insight}")


if __name__ == "__main__":
    main()
