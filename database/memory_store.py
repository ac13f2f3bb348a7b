"""
memory_store.py - 메모리 벡터 저장소
======================================
프로세스 메모리에 레코드를 보관하는 저장소입니다.
테스트나 DB 없이 빠르게 실험할 때 사용합니다.

여러 스레드가 동시에 insert / scan_all 해도 안전합니다.
scan_all은 호출 시점의 스냅샷을 돌려주므로, 읽는 도중 새 레코드가
추가되어도 반쯤 쓰인 레코드를 보게 되는 일은 없습니다.
"""

import threading
from typing import Sequence

from database.base import StoredRecord, VectorStore


class InMemoryVectorStore(VectorStore):
    def __init__(self, dimension: int | None = None):
        super().__init__(dimension)
        self._lock = threading.Lock()
        self._records: list[StoredRecord] = []

    def insert(self, chunk: str, embedding: Sequence[float]) -> int:
        with self._lock:
            self._check_record(chunk, embedding)
            record = StoredRecord(
                record_id=len(self._records) + 1,
                chunk=chunk,
                embedding=tuple(float(x) for x in embedding),
            )
            self._records.append(record)
            return record.record_id

    def scan_all(self) -> list[StoredRecord]:
        with self._lock:
            return list(self._records)

    def count(self) -> int:
        with self._lock:
            return len(self._records)
