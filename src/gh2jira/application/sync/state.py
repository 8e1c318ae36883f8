"""
Sync State - Persists the "since" cutoff between passes.

After a confirmed pass the next one only needs GitHub issues updated since
it started, so the time is written to a small JSON file:

    {"since": "2019-04-17T16:27:00+0000"}
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from ...core.exceptions import Gh2JiraError
from ...core.ports.clock import Clock
from ...core.ports.config_provider import SINCE_FORMAT


logger = logging.getLogger("StateStore")


class StateStore:
    """Reads and writes the last successful "since" timestamp."""

    def __init__(self, path: Path, clock: Clock):
        self.path = Path(path)
        self.clock = clock

    def load(self) -> Optional[datetime]:
        """
        Get the saved cutoff.

        Returns:
            The saved timestamp, or None if nothing usable was saved
        """
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return datetime.strptime(data["since"], SINCE_FORMAT)
        except (json.JSONDecodeError, OSError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable sync state in {self.path}: {e}")
            return None

    def save(self, moment: Optional[datetime] = None) -> datetime:
        """
        Record a cutoff, the clock's current time by default.

        Written through a temporary file so a crash never leaves half a file.

        Returns:
            The timestamp that was saved

        Raises:
            Gh2JiraError: If the file can't be written
        """
        moment = moment or self.clock.now()
        payload = json.dumps({"since": moment.strftime(SINCE_FORMAT)}, indent=2)

        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise Gh2JiraError(f"Failed to save sync state to {self.path}", cause=e) from e

        logger.debug(f"Saved sync cutoff {moment.strftime(SINCE_FORMAT)} to {self.path}")
        return moment
