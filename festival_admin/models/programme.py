"""Programme data model."""
import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from festival_admin.utils.config import EndBeforeStartPolicy
from festival_admin.utils.date_utils import (
    normalize_schedule,
    parse_calendar_date,
    parse_timestamp,
    to_iso_utc,
    to_local_time_string,
)


@dataclass
class Programme:
    """Scheduled festival session as stored by the API."""

    id: str
    name: str
    day_number: int
    date: dt.date
    start_datetime: dt.datetime
    end_datetime: dt.datetime
    venue: str

    def __post_init__(self):
        """Validate programme data after initialization."""
        if not self.id or not str(self.id).strip():
            raise ValueError("Programme ID cannot be empty")

        if self.start_datetime.tzinfo is None or self.end_datetime.tzinfo is None:
            raise ValueError("Programme timestamps must be timezone-aware")

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def choice_label(self) -> str:
        """Label used when picking programmes for a speaker."""
        return f"Day {self.day_number} - {self.name}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], tz: dt.tzinfo) -> "Programme":
        """
        Build a Programme from an API record.

        Args:
            data: JSON object returned by the API (``_id`` or ``id``)
            tz: Timezone used to read full-timestamp dates

        Raises:
            ValueError: If a required key is missing or malformed
        """
        try:
            return cls(
                id=str(data.get("_id") or data["id"]),
                name=data["name"],
                day_number=int(data["day_number"]),
                date=parse_calendar_date(data["date"], tz),
                start_datetime=parse_timestamp(data["start_datetime"]),
                end_datetime=parse_timestamp(data["end_datetime"]),
                venue=data.get("venue", ""),
            )
        except KeyError as e:
            raise ValueError(f"Missing required programme field: {e.args[0]}") from e
        except TypeError as e:
            raise ValueError(f"Malformed programme record: {e}") from e


@dataclass
class ProgrammeDraft:
    """Unsaved programme form values."""

    name: str = ""
    day_number: int = 1
    date: Optional[dt.date] = field(default_factory=dt.date.today)
    start_time: str = ""
    end_time: str = ""
    venue: str = ""

    @classmethod
    def from_programme(cls, programme: Programme, tz: dt.tzinfo) -> "ProgrammeDraft":
        """Load a stored programme into the form, showing times in ``tz``."""
        return cls(
            name=programme.name,
            day_number=programme.day_number,
            date=programme.date,
            start_time=to_local_time_string(programme.start_datetime, tz),
            end_time=to_local_time_string(programme.end_datetime, tz),
            venue=programme.venue,
        )

    def as_form_values(self) -> Dict[str, Any]:
        """Values keyed by the field names the validation schema uses."""
        return {
            "name": self.name,
            "day_number": self.day_number,
            "date": self.date,
            "start_datetime": self.start_time,
            "end_datetime": self.end_time,
            "venue": self.venue,
        }

    def to_payload(
        self,
        tz: dt.tzinfo,
        policy: EndBeforeStartPolicy = EndBeforeStartPolicy.REJECT,
    ) -> Dict[str, Any]:
        """
        JSON body for POST/PUT /programmes.

        Raises:
            ScheduleError: If the end is not after the start under REJECT
        """
        start, end = normalize_schedule(self.date, self.start_time, self.end_time, tz, policy)
        return {
            "name": self.name,
            "day_number": self.day_number,
            "date": self.date.isoformat(),
            "start_datetime": to_iso_utc(start),
            "end_datetime": to_iso_utc(end),
            "venue": self.venue,
        }
