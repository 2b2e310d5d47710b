"""
Event storage for the simple events endpoint.

The in-memory store lives as long as the process: appended events vanish on
restart and ids are only unique within one process.
"""

import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

EventRecord = Dict[str, Any]


def iso_utc(dt: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision, e.g.
    "2025-01-01T10:00:00.000Z".
    """
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def seed_events(now: Optional[datetime] = None) -> List[EventRecord]:
    """
    Build the three sample events, scheduled relative to `now`.
    """
    now = now or datetime.now(timezone.utc)

    def window(days_ahead: int, hours: int) -> Dict[str, str]:
        start = now + timedelta(days=days_ahead)
        return {"startDate": iso_utc(start), "endDate": iso_utc(start + timedelta(hours=hours))}

    return [
        {
            "_id": "1",
            "title": "Community Garden Planting",
            "description": "Help plant vegetables in the community garden",
            "eventType": "environmental",
            "requiredSkills": ["gardening"],
            "location": {"address": "456 Garden St", "city": "New York", "state": "NY", "zipCode": "10002"},
            **window(2, 3),
            "duration": 3,
            "maxVolunteers": 15,
            "currentVolunteers": 8,
            "status": "upcoming",
            "organizer": {"name": "Jane Smith", "email": "jane@example.com", "phone": "555-1234"},
            "requirements": ["Bring gardening gloves", "Wear comfortable clothes"],
        },
        {
            "_id": "2",
            "title": "Food Bank Sorting",
            "description": "Sort and organize donated food items",
            "eventType": "community",
            "requiredSkills": ["organizing"],
            "location": {"address": "789 Charity Ave", "city": "New York", "state": "NY", "zipCode": "10003"},
            **window(5, 4),
            "duration": 4,
            "maxVolunteers": 20,
            "currentVolunteers": 12,
            "status": "upcoming",
            "organizer": {"name": "Mike Johnson", "email": "mike@example.com", "phone": "555-5678"},
            "requirements": ["Comfortable standing for long periods"],
        },
        {
            "_id": "3",
            "title": "Homeless Shelter Meal Prep",
            "description": "Help prepare meals for the homeless shelter",
            "eventType": "community",
            "requiredSkills": ["cooking", "food safety"],
            "location": {"address": "123 Shelter St", "city": "New York", "state": "NY", "zipCode": "10001"},
            **window(7, 5),
            "duration": 5,
            "maxVolunteers": 10,
            "currentVolunteers": 6,
            "status": "upcoming",
            "organizer": {"name": "Sarah Wilson", "email": "sarah@shelter.org", "phone": "555-9999"},
            "requirements": [
                "Food safety certification preferred",
                "Comfortable working in kitchen environment",
            ],
        },
    ]


class EventStore:
    """Storage interface used by the events routes."""

    def get(self) -> List[EventRecord]:
        raise NotImplementedError

    def add(self, event_data: EventRecord) -> EventRecord:
        raise NotImplementedError


class MemoryEventStore(EventStore):
    def __init__(self, seed: bool = True, now: Optional[datetime] = None) -> None:
        self._events: List[EventRecord] = seed_events(now) if seed else []

    def get(self) -> List[EventRecord]:
        return copy.deepcopy(self._events)

    def add(self, event_data: EventRecord) -> EventRecord:
        """
        Append a new event. The id is the next list position and the
        status/volunteer count always start fresh, whatever the caller sent.
        """
        new_event = {
            "_id": str(len(self._events) + 1),
            **event_data,
            "status": "upcoming",
            "currentVolunteers": 0,
        }
        self._events.append(new_event)
        return copy.deepcopy(new_event)
