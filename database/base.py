"""
base.py - 벡터 저장소 공통 인터페이스
=======================================
(청크 텍스트, 임베딩) 한 쌍을 StoredRecord 하나로 저장합니다.

규칙:
- 추가(insert)만 있고 수정/삭제는 없습니다.
- 한 저장소의 모든 임베딩은 같은 차원(D)이어야 합니다.
  D를 지정하지 않으면 처음 저장되는 레코드의 차원을 따릅니다.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from rag.errors import DimensionMismatchError, ValidationError


@dataclass(frozen=True)
class StoredRecord:
    """저장소에 들어 있는 레코드 하나"""

    record_id: int
    chunk: str
    embedding: tuple[float, ...]


class VectorStore(ABC):
    """벡터 저장소가 구현해야 하는 연산"""

    def __init__(self, dimension: int | None = None):
        self.dimension = dimension

    @abstractmethod
    def insert(self, chunk: str, embedding: Sequence[float]) -> int:
        """레코드 하나를 저장하고 ID를 반환합니다."""

    @abstractmethod
    def scan_all(self) -> list[StoredRecord]:
        """저장된 모든 레코드를 반환합니다. 순서는 의미 없습니다."""

    def count(self) -> int:
        return len(self.scan_all())

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _check_record(self, chunk: str, embedding: Sequence[float]):
        """저장 전에 청크와 임베딩 차원을 검사합니다."""
        if not chunk or not chunk.strip():
            raise ValidationError("chunk text is required")
        self._check_dimension(len(embedding))

    def _check_dimension(self, length: int):
        if self.dimension is None:
            if length == 0:
                raise DimensionMismatchError("embedding cannot be empty")
            self.dimension = length
        elif length != self.dimension:
            raise DimensionMismatchError(
                f"embedding has {length} dimensions, store expects {self.dimension}"
            )
