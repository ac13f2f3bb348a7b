"""
database 패키지
================
(청크, 임베딩) 레코드를 저장하고 전체를 읽어오는 벡터 저장소들입니다.

- InMemoryVectorStore: 메모리 저장소 (테스트/실험용)
- SupabaseVectorStore: Supabase 테이블 저장소 (운영용)
"""

from database.base import StoredRecord, VectorStore
from database.memory_store import InMemoryVectorStore

__all__ = ["StoredRecord", "VectorStore", "InMemoryVectorStore"]
