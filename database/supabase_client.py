"""
supabase_client.py - Supabase 벡터 저장소
==========================================
청크와 임베딩을 Supabase(PostgreSQL) 테이블에 저장하고 전부 읽어옵니다.

테이블 구조는 database/schema.sql 을 참고하세요:
    vectors(id, chunk, embedding)

[초보자 안내]
- 한 청크 = 한 행(row). 청크와 임베딩을 한 번의 insert로 같이 저장하므로
  "청크만 있고 임베딩은 없는" 행은 생기지 않습니다.
- PostgREST(Supabase API)는 한 번에 돌려주는 행 수가 제한되어 있어서
  전체 조회는 페이지 단위로 나누어 가져옵니다.
"""

import json
from typing import Sequence

import httpx
from postgrest.exceptions import APIError
from supabase import Client, ClientOptions, create_client

from config import Config
from database.base import StoredRecord, VectorStore
from rag.errors import StorageFailure, StorageTimeout
from utils.logger import get_logger

logger = get_logger(__name__)

PAGE_SIZE = 1000


def create_supabase_client() -> Client:
    """Config 값으로 Supabase 클라이언트를 만듭니다."""
    return create_client(
        Config.SUPABASE_URL,
        Config.SUPABASE_KEY,
        options=ClientOptions(postgrest_client_timeout=Config.REQUEST_TIMEOUT),
    )


def parse_embedding(value) -> tuple[float, ...]:
    """pgvector 문자열("[0.1,0.2]") 또는 JSON 배열을 float 튜플로 바꿉니다."""
    if isinstance(value, str):
        value = json.loads(value)
    return tuple(float(x) for x in value)


class SupabaseVectorStore(VectorStore):
    """Supabase 테이블 하나를 벡터 저장소로 사용하는 클래스"""

    def __init__(
        self,
        client: Client | None = None,
        table: str | None = None,
        dimension: int | None = None,
    ):
        super().__init__(dimension or Config.EMBEDDING_DIMENSION)
        self.client: Client = client or create_supabase_client()
        self.table = table or Config.SUPABASE_TABLE

    def _execute(self, query, action: str):
        try:
            return query.execute()
        except httpx.TimeoutException as e:
            raise StorageTimeout(f"{action} timed out on table '{self.table}'") from e
        except (APIError, httpx.HTTPError) as e:
            raise StorageFailure(f"{action} failed on table '{self.table}'") from e

    def _to_record(self, row: dict) -> StoredRecord:
        """조회한 행 하나를 StoredRecord로 바꿉니다. 깨진 행은 StorageFailure."""
        try:
            return StoredRecord(
                record_id=row["id"],
                chunk=row["chunk"],
                embedding=parse_embedding(row["embedding"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise StorageFailure(f"malformed row in table '{self.table}'") from e

    def insert(self, chunk: str, embedding: Sequence[float]) -> int:
        """청크 하나와 임베딩을 한 행으로 저장합니다."""
        self._check_record(chunk, embedding)
        data = {"chunk": chunk, "embedding": [float(x) for x in embedding]}
        result = self._execute(self.client.table(self.table).insert(data), "insert")
        if not result.data:
            raise StorageFailure(f"insert returned no row on table '{self.table}'")
        try:
            return result.data[0]["id"]
        except (KeyError, TypeError) as e:
            raise StorageFailure(f"insert returned a row without id on table '{self.table}'") from e

    def scan_all(self) -> list[StoredRecord]:
        """
        테이블의 모든 행을 페이지 단위로 읽어옵니다.

        서버의 최대 행 수(max rows)가 PAGE_SIZE보다 작을 수 있으므로
        빈 페이지가 나올 때까지 읽고, 다음 시작 위치는 실제로 받은 행 수만큼 옮깁니다.
        """
        records: list[StoredRecord] = []
        start = 0
        while True:
            query = (
                self.client.table(self.table)
                .select("id, chunk, embedding")
                .order("id")
                .range(start, start + PAGE_SIZE - 1)
            )
            result = self._execute(query, "scan")
            rows = result.data or []
            if not rows:
                break

            for row in rows:
                record = self._to_record(row)
                self._check_dimension(len(record.embedding))
                records.append(record)
            start += len(rows)

        logger.debug("'%s' 테이블에서 %d개 레코드 조회", self.table, len(records))
        return records

    def count(self) -> int:
        """저장된 레코드 수를 셉니다."""
        query = self.client.table(self.table).select("id", count="exact")
        result = self._execute(query, "count")
        return result.count or 0
