"""
retriever.py - 문서 검색기
============================
사용자의 질문과 가장 관련 있는 문서 조각을 찾아주는 모듈입니다.

[초보자 안내]
검색(Retrieval) 과정:
1. 금지 주제인지 먼저 확인합니다 (해당하면 여기서 끝, API 호출 없음)
2. 질문을 임베딩 벡터로 변환합니다
3. 저장소의 모든 청크와 코사인 유사도를 계산합니다
4. 유사도 높은 순으로 정렬하고, 임계값(기본 0.75)을 넘는 것만 남깁니다
5. 그중 상위 K개(기본 3개)를 반환합니다

결과가 하나도 없어도 오류가 아닙니다.
"데이터셋에서 답을 찾지 못함"이라는 정상 결과입니다.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Sequence

from config import Config
from rag.embedder import Embedder
from rag.errors import ValidationError
from rag.guardrail import GuardrailFilter
from rag.similarity import cosine_similarity
from utils.logger import get_logger

if TYPE_CHECKING:
    # database.base가 rag.errors를 가져오므로 실행 시점에는 순환 import가 됨
    from database.base import StoredRecord, VectorStore

logger = get_logger(__name__)

CONTEXT_SEPARATOR = "\n---\n"


@dataclass(frozen=True)
class ScoredChunk:
    """한 번의 검색 동안만 존재하는 (청크, 점수) 쌍"""

    chunk: str
    score: float


class RetrievalStatus(str, Enum):
    FOUND = "found"
    BLOCKED = "blocked"
    NO_RELEVANT_CONTENT = "no_relevant_content"


@dataclass
class RetrievalResult:
    status: RetrievalStatus
    chunks: list[ScoredChunk] = field(default_factory=list)
    blocked_term: str | None = None

    @property
    def texts(self) -> list[str]:
        return [c.chunk for c in self.chunks]

    @property
    def blocked(self) -> bool:
        return self.status is RetrievalStatus.BLOCKED


def rank_chunks(
    query_embedding: Sequence[float],
    records: Iterable[StoredRecord],
    threshold: float,
    top_k: int,
) -> list[ScoredChunk]:
    """
    모든 레코드에 점수를 매기고, 임계값을 넘는 상위 top_k개를 반환합니다.

    - 같은 점수끼리는 저장소에서 읽은 순서를 유지합니다 (안정 정렬).
    - 임계값과 정확히 같은 점수는 탈락합니다 (score > threshold).
    - NaN 점수는 항상 탈락합니다.
    """
    scored = [
        ScoredChunk(chunk=record.chunk, score=cosine_similarity(query_embedding, record.embedding))
        for record in records
    ]
    scored = [s for s in scored if not math.isnan(s.score)]
    scored.sort(key=lambda s: s.score, reverse=True)

    relevant = [s for s in scored if s.score > threshold]
    return relevant[: max(top_k, 0)]


class Retriever:
    """
    질문과 관련된 문서 청크를 검색하는 클래스

    사용 예시:
        retriever = Retriever(embedder, store)
        result = retriever.search("What colors are available?")
        for c in result.chunks:
            print(c.chunk, c.score)
    """

    def __init__(
        self,
        embedder: Embedder,
        store: VectorStore,
        guardrail: GuardrailFilter | None = None,
        threshold: float | None = None,
        top_k: int | None = None,
    ):
        self.embedder = embedder
        self.store = store
        self.guardrail = guardrail or GuardrailFilter()
        self.threshold = Config.RELEVANCE_THRESHOLD if threshold is None else threshold
        self.top_k = Config.TOP_K if top_k is None else top_k

    def search(self, query: str) -> RetrievalResult:
        """
        질문과 유사한 문서 청크를 검색합니다.

        Args:
            query: 사용자 질문

        Returns:
            RetrievalResult (found / blocked / no_relevant_content)

        Raises:
            ValidationError: 질문이 비어 있을 때
            RemoteFailure: 임베딩 API 또는 저장소 호출 실패
        """
        if not query or not query.strip():
            raise ValidationError("query is required")

        term = self.guardrail.matched_term(query)
        if term is not None:
            logger.info("금지 주제로 차단: %r (term=%r)", query, term)
            return RetrievalResult(status=RetrievalStatus.BLOCKED, blocked_term=term)

        query_embedding = self.embedder.embed_text(query)
        records = self.store.scan_all()
        chunks = rank_chunks(query_embedding, records, self.threshold, self.top_k)

        if not chunks:
            logger.info("관련 청크 없음 (전체 %d개 중)", len(records))
            return RetrievalResult(status=RetrievalStatus.NO_RELEVANT_CONTENT)

        logger.info(
            "상위 청크 %d개 선택 (전체 %d개, 최고 점수 %.3f)",
            len(chunks),
            len(records),
            chunks[0].score,
        )
        return RetrievalResult(status=RetrievalStatus.FOUND, chunks=chunks)

    def search_with_context(self, query: str) -> str:
        """
        검색 결과를 AI 모델에 전달하기 좋은 형태의 텍스트로 변환합니다.
        관련 청크가 없거나 차단된 경우 빈 문자열을 반환합니다.
        """
        return build_context(self.search(query))


def build_context(result: RetrievalResult) -> str:
    return CONTEXT_SEPARATOR.join(result.texts)
