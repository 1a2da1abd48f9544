from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from .model import AttendanceRecord, Mutation, RecordKey

Decision = Callable[[Optional[AttendanceRecord]], Mutation]


class AttendanceRepository(Protocol):
    def get(self, key: RecordKey) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def apply(self, key: RecordKey, decide: Decision) -> Mutation:
        """Read the record of ``key``, let ``decide`` choose a mutation and write it.

        The read and the write happen in one transaction. Exceptions raised by
        ``decide`` abort it without changes.
        """
        raise NotImplementedError

    def query(
        self,
        school_name: str,
        *,
        class_name: Optional[str] = None,
        subject: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        date: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
