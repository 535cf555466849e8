"""
Task File Repository - loads and saves the whole task list as tasks.txt.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Union

from taskman_app.db.task_codec import decode_task, encode_task
from taskman_app.models.data_models import Task

logger = logging.getLogger(__name__)

ENCODING = 'utf-8'


class TaskFileRepository:
    """Handle reading and writing the flat, one-task-per-line task file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load_all(self) -> List[Task]:
        """
        Load every task in file order.

        Returns:
            List of Task objects; empty if the file does not exist

        Raises:
            OSError: The file exists but could not be read
        """
        tasks: List[Task] = []
        try:
            handle = self.path.open('rb')
        except FileNotFoundError:
            logger.info("No task file at %s, starting empty", self.path)
            return tasks

        with handle:
            for line_number, raw_line in enumerate(handle, start=1):
                # Decode per line so one bad byte only costs its own line
                try:
                    line = raw_line.rstrip(b'\r\n').decode(ENCODING)
                except UnicodeDecodeError:
                    logger.warning("Skipping undecodable line %d in %s: %r", line_number, self.path, raw_line)
                    continue
                if not line.strip():
                    continue

                task = decode_task(line)
                if task is None:
                    logger.warning("Skipping corrupted line %d in %s: %r", line_number, self.path, line)
                    continue
                tasks.append(task)

        logger.info("Loaded %d tasks from %s", len(tasks), self.path)
        return tasks

    def save_all(self, tasks: Iterable[Task]) -> int:
        """
        Overwrite the file with one encoded line per task.

        The file is written in place, so a failure part way through leaves it
        truncated at that point.

        Args:
            tasks: Tasks in the order they should be stored

        Returns:
            Number of tasks written

        Raises:
            OSError: The file could not be opened or written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        count = 0
        with self.path.open('w', encoding=ENCODING, newline='\n') as handle:
            for task in tasks:
                handle.write(encode_task(task))
                handle.write('\n')
                count += 1
            handle.flush()

        logger.info("Saved %d tasks to %s", count, self.path)
        return count
