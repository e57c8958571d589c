"""
Guess Ledger

Ordered, append-only history of the scored guesses of one session.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

from ..models.game import GuessRecord


class GuessLedger:
    """
    Append-only sequence of GuessRecord for a single session.

    The ledger does not know about session status; refusing guesses on a
    finished session is the state machine's job.
    """

    def __init__(self, session_id: str, records: Iterable[GuessRecord] = ()):
        self.session_id = session_id
        self._records: List[GuessRecord] = []
        for record in records:
            self.append(record)

    def append(self, record: GuessRecord) -> None:
        if record.session_id != self.session_id:
            raise ValueError(
                f"Guess {record.id} belongs to session {record.session_id}, not {self.session_id}"
            )
        self._records.append(record)

    def count(self) -> int:
        return len(self._records)

    def latest(self) -> Optional[GuessRecord]:
        return self._records[-1] if self._records else None

    def all(self) -> Tuple[GuessRecord, ...]:
        """Snapshot of all records in attempt order."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[GuessRecord]:
        return iter(self.all())
