"""
Calendrier de la journee commerciale.

Une journee commerciale commence a l'heure de coupure (5h00 par defaut)
et se termine a la meme heure le lendemain: une vente a 2h du matin
appartient a la journee de la veille.

Les timestamps aware sont convertis dans le fuseau du restaurant; un
timestamp naive est pris comme heure locale.
"""
from datetime import date, datetime, time, timedelta, tzinfo
from typing import List, Optional, Tuple

from restopos.core.config import get_settings


def _settings_cutoff(cutoff_hour: Optional[int], cutoff_minute: Optional[int]) -> Tuple[int, int]:
    settings = get_settings()
    hour = settings.BUSINESS_DAY_CUTOFF_HOUR if cutoff_hour is None else cutoff_hour
    minute = settings.BUSINESS_DAY_CUTOFF_MINUTE if cutoff_minute is None else cutoff_minute
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        raise ValueError(f"Heure de coupure invalide: {hour:02d}:{minute:02d}")
    return hour, minute


def to_local(ts: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Heure murale locale du restaurant."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(tz or get_settings().business_tz)


def business_date(
    ts: datetime,
    cutoff_hour: Optional[int] = None,
    cutoff_minute: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> date:
    """
    Journee commerciale a laquelle appartient un instant.

    Avant l'heure de coupure, l'instant appartient a la veille.

    Examples:
        2024-01-15 02:00 -> 2024-01-14
        2024-01-15 05:00 -> 2024-01-15
    """
    hour, minute = _settings_cutoff(cutoff_hour, cutoff_minute)
    local = to_local(ts, tz)
    if (local.hour, local.minute) < (hour, minute):
        return local.date() - timedelta(days=1)
    return local.date()


def business_day_range(
    day: date,
    cutoff_hour: Optional[int] = None,
    cutoff_minute: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> Tuple[datetime, datetime]:
    """
    Intervalle semi-ouvert [debut, fin) d'une journee commerciale.

    Les bornes sont aware dans le fuseau du restaurant (ou dans `tz`).
    """
    hour, minute = _settings_cutoff(cutoff_hour, cutoff_minute)
    zone = tz or get_settings().business_tz
    cutoff = time(hour, minute)
    start = datetime.combine(day, cutoff, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), cutoff, tzinfo=zone)
    return start, end


def last_n_business_days(
    n: int,
    cutoff_hour: Optional[int] = None,
    cutoff_minute: Optional[int] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> List[date]:
    """Les n dernieres journees commerciales, la plus ancienne en premier."""
    if n < 1:
        raise ValueError(f"n doit etre >= 1, recu: {n}")
    zone = tz or get_settings().business_tz
    current = business_date(now or datetime.now(zone), cutoff_hour, cutoff_minute, tz=zone)
    return [current - timedelta(days=offset) for offset in range(n - 1, -1, -1)]


def is_within_business_day(ts: datetime, start: datetime, end: datetime) -> bool:
    """start <= ts < end."""
    return start <= ts < end
