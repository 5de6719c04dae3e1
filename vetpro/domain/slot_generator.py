"""
Core business logic for enumerating bookable appointment slots.

Pure domain logic: the clinic configuration and the booked appointments are
passed in explicitly, nothing is fetched or cached.
"""

from typing import List, Sequence

from .dates import (
    DateLike,
    add_days,
    minutes_to_time,
    time_to_minutes,
    to_date,
    to_date_string,
    weekday_name,
)
from .exceptions import ScheduleConfigurationError
from .models import BookedAppointment, DaySlots, ScheduleConfiguration, TimeSlot


class DailyScheduleSlotGenerator:
    """
    Generates time slots for a clinic's working days.

    Algorithm:
    1. Convert opening and closing times to minutes since midnight
    2. Step from opening by ``slot_duration`` while strictly before closing
    3. Flag slots inside ``[lunch_break_start, lunch_break_end)``
    4. Flag slots whose exact (date, time) strings are booked

    Bookings block only the slot they start in; appointment duration is not
    taken into account.
    """

    def __init__(self, config: ScheduleConfiguration):
        self.config = config

    def generate_time_slots(
        self,
        date: DateLike,
        booked_appointments: Sequence[BookedAppointment],
    ) -> List[TimeSlot]:
        """
        Generate all slots for a single day.

        Args:
            date: Day to generate; strings are matched against bookings as-is
            booked_appointments: Appointments already recorded

        Returns:
            Slots in increasing time order, empty if the opening hours are
            missing, malformed or inverted

        Raises:
            ScheduleConfigurationError: If ``slot_duration`` is not positive
        """
        self._check_slot_duration()

        opening = time_to_minutes(self.config.opening_time)
        closing = time_to_minutes(self.config.closing_time)

        if opening is None or closing is None or closing <= opening:
            return []

        date_key = date if isinstance(date, str) else to_date_string(date)
        booked_times = {
            appointment.time
            for appointment in booked_appointments
            if appointment.date == date_key
        }

        lunch_start = time_to_minutes(self.config.lunch_break_start)
        lunch_end = time_to_minutes(self.config.lunch_break_end)
        has_lunch = lunch_start is not None and lunch_end is not None

        slots: List[TimeSlot] = []
        for minutes in range(opening, closing, self.config.slot_duration):
            time = minutes_to_time(minutes)
            is_lunch_break = has_lunch and lunch_start <= minutes < lunch_end
            is_booked = time in booked_times

            slots.append(
                TimeSlot(
                    time=time,
                    is_available=not is_booked and not is_lunch_break,
                    is_lunch_break=is_lunch_break,
                )
            )

        return slots

    def generate_date_range_slots(
        self,
        start_date: DateLike,
        end_date: DateLike,
        booked_appointments: Sequence[BookedAppointment],
    ) -> List[DaySlots]:
        """
        Generate slots for every working day between two dates, inclusive.

        Non-working days are left out entirely. Each day only sees the
        bookings made for that date.
        """
        self._check_slot_duration()

        days: List[DaySlots] = []
        current = to_date(start_date)
        end = to_date(end_date)

        while current <= end:
            if self.is_working_day(current):
                date_key = to_date_string(current)
                bookings_for_day = [
                    appointment for appointment in booked_appointments
                    if appointment.date == date_key
                ]
                days.append(
                    DaySlots(
                        date=date_key,
                        slots=self.generate_time_slots(date_key, bookings_for_day),
                    )
                )

            current = add_days(current, 1)

        return days

    def is_slot_available(
        self,
        date: DateLike,
        time: str,
        booked_appointments: Sequence[BookedAppointment],
    ) -> bool:
        """
        Check whether a given start time can be booked.

        A time that is not on a slot boundary never matches and is reported
        as unavailable.
        """
        for slot in self.generate_time_slots(date, booked_appointments):
            if slot.time == time:
                return slot.is_available
        return False

    def is_working_day(self, date: DateLike) -> bool:
        """Check if the clinic opens on the given date's weekday."""
        return weekday_name(date) in self.config.working_days

    def _check_slot_duration(self) -> None:
        duration = self.config.slot_duration
        if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
            raise ScheduleConfigurationError(
                f"slot_duration must be a positive number of minutes, got {duration!r}"
            )
