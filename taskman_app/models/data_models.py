import datetime
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
NEUTRAL_TAG_COLOR = '#9ca3af'
DUE_SOON_WINDOW = datetime.timedelta(hours=24)


class InvalidTaskError(ValueError):
    """Raised when a task would be created or edited with an empty description."""


class Tag(str, Enum):
    NONE = 'None'
    SCHOOL = 'School'
    PERSONAL = 'Personal'
    WORK = 'Work'
    URGENT = 'Urgent'
    HEALTH = 'Health'
    SHOPPING = 'Shopping'
    OTHER = 'Other'

    @property
    def color(self) -> str:
        return _TAG_COLORS.get(self, NEUTRAL_TAG_COLOR)

    @classmethod
    def parse(cls, raw: str) -> Union['Tag', str]:
        """Return the matching Tag, or the raw string if it is not a known tag."""
        try:
            return cls(raw)
        except ValueError:
            return raw


_TAG_COLORS = {
    Tag.SCHOOL: '#3b82f6',
    Tag.PERSONAL: '#8b5cf6',
    Tag.WORK: '#f59e0b',
    Tag.URGENT: '#ef4444',
    Tag.HEALTH: '#10b981',
    Tag.SHOPPING: '#ec4899',
    Tag.OTHER: '#6b7280',
}


def tag_name(tag: Union[Tag, str]) -> str:
    return tag.value if isinstance(tag, Tag) else str(tag)


def tag_color(tag: Union[Tag, str]) -> str:
    """Badge colour for a tag; unknown tags read from disk get the neutral colour."""
    if isinstance(tag, Tag):
        return tag.color
    return NEUTRAL_TAG_COLOR


def now_seconds() -> datetime.datetime:
    # The file format stores whole seconds, so in-memory timestamps do too.
    return datetime.datetime.now().replace(microsecond=0)


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Task:
    id: str
    description: str
    created_at: datetime.datetime
    completed: bool = False
    completed_at: Optional[datetime.datetime] = None
    tag: Union[Tag, str] = Tag.NONE
    due_date: Optional[datetime.datetime] = None
    display_order: int = 0

    def __post_init__(self):
        if self.completed and self.completed_at is None:
            self.completed_at = now_seconds()
        elif not self.completed:
            self.completed_at = None

    @classmethod
    def create(cls, description: str) -> 'Task':
        """New task with a fresh id, stamped with the current time."""
        return cls(id=new_task_id(), description=description, created_at=now_seconds())

    def set_completed(self, completed: bool):
        if completed and not self.completed:
            self.completed_at = now_seconds()
        elif not completed:
            self.completed_at = None
        self.completed = completed

    def toggle_completed(self):
        self.set_completed(not self.completed)

    def is_overdue(self, now: Optional[datetime.datetime] = None) -> bool:
        if self.due_date is None or self.completed:
            return False
        now = now or datetime.datetime.now()
        return now > self.due_date

    def is_due_soon(self, now: Optional[datetime.datetime] = None) -> bool:
        """Due within the next 24 hours and not yet overdue."""
        if self.due_date is None or self.completed:
            return False
        now = now or datetime.datetime.now()
        return now < self.due_date < now + DUE_SOON_WINDOW

    @property
    def tag_color(self) -> str:
        return tag_color(self.tag)

    def __str__(self):
        return self.description


@dataclass
class TaskStats:
    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
    progress: float = 0.0
