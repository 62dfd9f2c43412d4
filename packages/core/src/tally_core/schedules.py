"""Bracket schedule lookup.

The computation core never fetches or hardcodes jurisdiction data. Schedules
arrive through any object satisfying :class:`ScheduleProvider`; the in-memory
provider here is filled by the caller, typically from the request layer's
response.

Example:
    provider = InMemoryScheduleProvider.from_mapping([
        {
            "tax_year": 2024,
            "filing_status": "single",
            "brackets": [
                {"lower_bound": "0", "upper_bound": "11000", "rate": "0.10"},
                {"lower_bound": "11000", "upper_bound": None, "rate": "0.12"},
            ],
        },
    ])
    schedule = provider.get_schedule(2024, FilingStatus.SINGLE)
"""

from typing import Any, Iterable, Mapping, Protocol, Union, runtime_checkable

import structlog

from .brackets import validate_schedule
from .exceptions import InvalidInputError, ScheduleNotFoundError
from .models import BracketSchedule, FilingStatus

logger = structlog.get_logger()

ScheduleKey = tuple[int, FilingStatus]


@runtime_checkable
class ScheduleProvider(Protocol):
    """Anything that can resolve a bracket schedule for a lookup key.

    Implementations must raise :class:`ScheduleNotFoundError` on a miss and
    must never substitute a schedule for a different key.
    """

    def get_schedule(
        self,
        tax_year: int,
        filing_status: FilingStatus,
    ) -> BracketSchedule:
        ...


class InMemoryScheduleProvider:
    """Schedule provider backed by a dictionary keyed by (tax year, filing status)."""

    def __init__(self, schedules: Iterable[BracketSchedule] = ()):
        self._schedules: dict[ScheduleKey, BracketSchedule] = {}
        for schedule in schedules:
            self.register(schedule)

    @classmethod
    def from_mapping(
        cls,
        raw_schedules: Iterable[Mapping[str, Any]],
    ) -> "InMemoryScheduleProvider":
        """Build a provider from plain dictionaries, as returned by an API.

        Raises:
            InvalidInputError: If an entry does not parse, with ``field``
                prefixed by the entry's position, e.g.
                ``schedules[0].brackets[1].rate``.
        """
        schedules = []
        for i, raw in enumerate(raw_schedules):
            try:
                schedules.append(BracketSchedule.model_validate(raw))
            except InvalidInputError as exc:
                field = f"schedules[{i}].{exc.field}" if exc.field else f"schedules[{i}]"
                raise InvalidInputError(
                    f"{field}: {exc.constraint}",
                    field=field,
                    value=exc.value,
                    constraint=exc.constraint,
                    details=dict(exc.details),
                ) from None
        return cls(schedules)

    def register(self, schedule: BracketSchedule) -> None:
        """Validate and store a schedule, replacing any with the same key."""
        validate_schedule(schedule)
        self._schedules[schedule.key] = schedule
        logger.debug(
            "schedule_registered",
            tax_year=schedule.tax_year,
            filing_status=schedule.filing_status.value,
            brackets=len(schedule.brackets),
        )

    def get_schedule(
        self,
        tax_year: int,
        filing_status: Union[FilingStatus, str],
    ) -> BracketSchedule:
        try:
            status = FilingStatus(filing_status)
        except ValueError:
            raise InvalidInputError(
                f"Unknown filing status: {filing_status}",
                field="filing_status",
                value=filing_status,
                constraint=", ".join(s.value for s in FilingStatus),
            ) from None
        schedule = self._schedules.get((tax_year, status))
        if schedule is None:
            logger.warning(
                "schedule_not_found",
                tax_year=tax_year,
                filing_status=status.value,
            )
            raise ScheduleNotFoundError(
                f"No bracket schedule for {tax_year}/{status.value}",
                tax_year=tax_year,
                filing_status=status.value,
            )
        return schedule

    @property
    def keys(self) -> list[ScheduleKey]:
        """Registered lookup keys, sorted by year then status."""
        return sorted(self._schedules, key=lambda k: (k[0], k[1].value))

    def __len__(self) -> int:
        return len(self._schedules)
