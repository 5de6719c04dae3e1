"""
Turns care protocol intervals into calendar due dates.

The resolver is deliberately permissive: intervals are resolved in the order
given, negative offsets simply land before the reference date, and nothing is
sorted. Callers that want to surface malformed protocols run
``validate_interval_ordering`` explicitly.
"""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from pendulum import Date

from .dates import DateLike, add_days, to_date
from .models import (
    AdministeredCareEvent,
    CareProtocol,
    CareStatus,
    DueDate,
    Interval,
    ProposedDueDate,
)

DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30
DAYS_PER_WEEK = 7


@dataclass(frozen=True)
class IntervalIssue:
    """A problem spotted in a protocol's interval list."""

    index: int
    offset_days: int
    message: str


class ProtocolIntervalResolver:
    """
    Resolves protocol intervals against a reference date.

    Stateless: every method works only on its arguments.
    """

    def resolve_due_dates(
        self,
        reference_date: DateLike,
        intervals: Sequence[Interval],
    ) -> List[Date]:
        """
        Anchor each interval on the reference date.

        Args:
            reference_date: Usually the date the care was given
            intervals: Protocol intervals, in protocol order

        Returns:
            One date per interval, in the same order
        """
        reference = to_date(reference_date)
        return [add_days(reference, interval.offset_days) for interval in intervals]

    def propose_due_dates(
        self,
        protocol: CareProtocol,
        reference_date: DateLike,
    ) -> List[ProposedDueDate]:
        """Pair each protocol interval with its suggested due date."""
        dates = self.resolve_due_dates(reference_date, protocol.intervals)
        return [
            ProposedDueDate(interval=interval, due=DueDate.suggested(due))
            for interval, due in zip(protocol.intervals, dates)
        ]

    def suggest_next_due_date(
        self,
        protocol: CareProtocol,
        reference_date: DateLike,
    ) -> Optional[Date]:
        """
        Suggest the next reminder date for a protocol.

        The last interval is the recurring booster, so it is the one used.
        Returns None for single-dose protocols without intervals.
        """
        if not protocol.intervals:
            return None
        return add_days(reference_date, protocol.intervals[-1].offset_days)

    def confirm_reminder(
        self,
        event: AdministeredCareEvent,
        date_performed: DateLike,
        *,
        new_event_id: str,
        new_next_due: Optional[DateLike] = None,
        protocol: Optional[CareProtocol] = None,
    ) -> Tuple[AdministeredCareEvent, AdministeredCareEvent]:
        """
        Record that a reminder dose was given.

        The next due date of the new event is, in order of preference: the
        staff-entered date, the protocol suggestion anchored on
        ``date_performed``, the parent's existing due date.

        Returns:
            (updated parent event, new reminder event)
        """
        performed = to_date(date_performed)

        next_due: Optional[DueDate]
        if new_next_due is not None:
            next_due = DueDate.manual(to_date(new_next_due))
        else:
            suggestion = self.suggest_next_due_date(protocol, performed) if protocol else None
            next_due = DueDate.suggested(suggestion) if suggestion is not None else event.next_due

        reminder = AdministeredCareEvent(
            id=new_event_id,
            protocol_name=event.protocol_name,
            kind=event.kind,
            date_given=performed,
            next_due=next_due,
            status=CareStatus.COMPLETED,
            original_event_id=event.id,
            species=event.species,
        )

        parent_updates = {"status": CareStatus.COMPLETED}
        if new_next_due is not None:
            parent_updates["next_due"] = next_due

        return replace(event, **parent_updates), reminder


def find_protocol(
    protocols: Iterable[CareProtocol],
    name: str,
    species: str,
) -> Optional[CareProtocol]:
    """Return the first active protocol registered for name and species."""
    for protocol in protocols:
        if protocol.is_active and protocol.matches(name, species):
            return protocol
    return None


def validate_interval_ordering(intervals: Sequence[Interval]) -> List[IntervalIssue]:
    """
    Report negative offsets and decreasing steps, without changing anything.

    An empty result means the interval list is well formed.
    """
    issues: List[IntervalIssue] = []

    for index, interval in enumerate(intervals):
        if interval.offset_days < 0:
            issues.append(
                IntervalIssue(
                    index=index,
                    offset_days=interval.offset_days,
                    message=f"Interval {index} has a negative offset ({interval.offset_days} days)",
                )
            )

        if index > 0:
            previous = intervals[index - 1].offset_days
            if interval.offset_days < previous:
                issues.append(
                    IntervalIssue(
                        index=index,
                        offset_days=interval.offset_days,
                        message=(
                            f"Interval {index} ({interval.offset_days} days) is due before "
                            f"interval {index - 1} ({previous} days)"
                        ),
                    )
                )

    return issues


def humanize_offset(offset_days: int) -> str:
    """
    Express a day count in the largest unit that divides it exactly.

    365 -> "1 an", 30 -> "1 mois", 14 -> "2 semaines", 40 -> "40 jours".
    """
    if offset_days > 0:
        if offset_days % DAYS_PER_YEAR == 0:
            years = offset_days // DAYS_PER_YEAR
            return f"{years} an" if years == 1 else f"{years} ans"
        if offset_days % DAYS_PER_MONTH == 0:
            return f"{offset_days // DAYS_PER_MONTH} mois"
        if offset_days % DAYS_PER_WEEK == 0:
            weeks = offset_days // DAYS_PER_WEEK
            return f"{weeks} semaine" if weeks == 1 else f"{weeks} semaines"

    return f"{offset_days} jour" if offset_days == 1 else f"{offset_days} jours"


def describe_offset(offset_days: int) -> str:
    """Long form used in the protocol editor, e.g. "1 an et 5 jours"."""
    if offset_days >= DAYS_PER_YEAR:
        years, remaining = divmod(offset_days, DAYS_PER_YEAR)
        unit = "an" if years == 1 else "ans"
        if remaining == 0:
            return f"{years} {unit}"
        return f"{years} {unit} et {remaining} jours"

    if offset_days >= DAYS_PER_MONTH:
        months, remaining = divmod(offset_days, DAYS_PER_MONTH)
        if remaining == 0:
            return f"{months} mois"
        return f"{months} mois et {remaining} jours"

    return f"{offset_days} jours"


def care_status(
    next_due: Optional[DueDate],
    today: DateLike,
    upcoming_window_days: int = 7,
) -> CareStatus:
    """
    Classify a care event by its next due date.

    Events without a due date are complete; a due date before today is
    overdue; one inside the upcoming window is upcoming.
    """
    if next_due is None:
        return CareStatus.COMPLETED

    reference = to_date(today)
    if next_due.value < reference:
        return CareStatus.OVERDUE
    if next_due.value < add_days(reference, upcoming_window_days):
        return CareStatus.UPCOMING
    return CareStatus.SCHEDULED
