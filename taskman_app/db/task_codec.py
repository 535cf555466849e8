"""
Task Codec - converts tasks to and from single lines of tasks.txt.

Line layout (current format):
    id|description|createdAt|completed|completedAt|tag|dueDate|displayOrder

Older files are still readable. Each historical layout is a LineFormat entry
in LINE_FORMATS, ordered from most to least specific; the first one whose
field count fits the line wins.
"""

import datetime
import logging
import re
from typing import Callable, List, NamedTuple, Optional

from taskman_app.models.data_models import (
    TIMESTAMP_FORMAT, Tag, Task, new_task_id, now_seconds, tag_name
)

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = '|'
NULL_TOKEN = 'null'
TIMESTAMP_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")
ORDER_RE = re.compile(r"-?[0-9]+")


class LineFormat(NamedTuple):
    name: str
    min_fields: int
    parse: Callable[[List[str]], Task]


def format_timestamp(value: Optional[datetime.datetime]) -> str:
    if value is None:
        return NULL_TOKEN
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(raw: str) -> datetime.datetime:
    # strptime alone also accepts unpadded fields like '2023-1-1 1:0:0'
    if not TIMESTAMP_RE.fullmatch(raw):
        raise ValueError(f"Not a yyyy-MM-dd HH:mm:ss timestamp: {raw!r}")
    return datetime.datetime.strptime(raw, TIMESTAMP_FORMAT)


def parse_optional_timestamp(raw: str) -> Optional[datetime.datetime]:
    if raw == NULL_TOKEN:
        return None
    return parse_timestamp(raw)


def parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value == 'true':
        return True
    if value == 'false':
        return False
    raise ValueError(f"Not a boolean: {raw!r}")


def parse_order(raw: str) -> int:
    if not ORDER_RE.fullmatch(raw):
        raise ValueError(f"Not a base-10 integer: {raw!r}")
    return int(raw)


def _require(value: str, what: str) -> str:
    if not value:
        raise ValueError(f"Empty {what}")
    return value


def _parse_current(parts: List[str]) -> Task:
    return Task(
        id=_require(parts[0], 'id'),
        description=_require(parts[1], 'description'),
        created_at=parse_timestamp(parts[2]),
        completed=parse_bool(parts[3]),
        completed_at=parse_optional_timestamp(parts[4]),
        tag=Tag.parse(parts[5]),
        due_date=parse_optional_timestamp(parts[6]),
        display_order=parse_order(parts[7]),
    )


def _parse_legacy(parts: List[str]) -> Task:
    # id|description|createdAt|completed|completedAt
    return Task(
        id=_require(parts[0], 'id'),
        description=_require(parts[1], 'description'),
        created_at=parse_timestamp(parts[2]),
        completed=parse_bool(parts[3]),
        completed_at=parse_optional_timestamp(parts[4]),
    )


def _parse_ancient(parts: List[str]) -> Task:
    # description|createdAt
    return Task(
        id=new_task_id(),
        description=parts[0],
        created_at=parse_timestamp(parts[1]),
    )


def _parse_bare(parts: List[str]) -> Task:
    return Task(id=new_task_id(), description=parts[0], created_at=now_seconds())


LINE_FORMATS = (
    LineFormat('current', 8, _parse_current),
    LineFormat('legacy', 5, _parse_legacy),
    LineFormat('ancient', 2, _parse_ancient),
    LineFormat('bare', 1, _parse_bare),
)


def encode_task(task: Task) -> str:
    """
    Serialize a task into one line (without the trailing newline).

    The description is written as-is; a '|' inside it will shift the fields
    when the line is read back.
    """
    fields = [
        task.id,
        task.description,
        format_timestamp(task.created_at),
        'true' if task.completed else 'false',
        format_timestamp(task.completed_at),
        tag_name(task.tag),
        format_timestamp(task.due_date),
        str(task.display_order),
    ]
    return FIELD_SEPARATOR.join(fields)


def match_format(field_count: int) -> Optional[LineFormat]:
    for line_format in LINE_FORMATS:
        if field_count >= line_format.min_fields:
            return line_format
    return None


def decode_task(line: str) -> Optional[Task]:
    """
    Parse one line into a Task.

    Args:
        line: A single line from the tasks file, newline already stripped

    Returns:
        Task object, or None if the line is empty or malformed
    """
    if not line:
        return None

    parts = line.split(FIELD_SEPARATOR)
    line_format = match_format(len(parts))
    if line_format is None:
        return None

    try:
        return line_format.parse(parts)
    except Exception as e:
        logger.debug("Could not parse %s-format line: %s", line_format.name, e)
        return None
