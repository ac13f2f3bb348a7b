"""
rag 패키지
===========
RAG(Retrieval-Augmented Generation) 파이프라인의 핵심 모듈들을 제공합니다.

[초보자 안내]
RAG란?
- Retrieval: 질문과 관련된 문서 조각을 '검색'하고
- Augmented: 그 조각들을 AI 모델의 입력에 '추가'하여
- Generation: 정확한 답변을 '생성'하는 기술

RAG 파이프라인:
1. 청킹(Chunking): 질문/답변 줄을 묶어 검색 단위로 나누기
2. 임베딩(Embedding): 텍스트를 숫자 벡터로 변환하기
3. 검색(Retrieval): 금지 주제 확인 → 코사인 유사도 → 임계값 → 상위 K개
"""

from rag.chunker import Chunk, QAChunker
from rag.embedder import Embedder
from rag.guardrail import GuardrailFilter
from rag.retriever import RetrievalResult, RetrievalStatus, Retriever, ScoredChunk, rank_chunks
from rag.similarity import cosine_similarity

__all__ = [
    "Chunk",
    "QAChunker",
    "Embedder",
    "GuardrailFilter",
    "RetrievalResult",
    "RetrievalStatus",
    "Retriever",
    "ScoredChunk",
    "rank_chunks",
    "cosine_similarity",
]
