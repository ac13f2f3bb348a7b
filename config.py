"""
config.py - 프로젝트 설정 관리
================================
설정값을 두 가지 방식으로 읽습니다:
  1. Streamlit Cloud 배포 → st.secrets 에서 읽기
  2. 로컬 실행 → .env 파일에서 읽기

[초보자 안내]
- 로컬에서는 .env 파일에 API 키를 적어두면 됩니다.
- 검색 임계값(RELEVANCE_THRESHOLD), 반환 개수(TOP_K), 금지 주제
  (FORBIDDEN_TOPICS)도 여기서 바꿀 수 있습니다.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _get(key: str, default: str = "") -> str:
    """Streamlit Secrets → 환경변수 순서로 설정값을 찾습니다."""
    # 1순위: Streamlit Secrets (클라우드 배포 시)
    try:
        import streamlit as st

        if key in st.secrets:
            return str(st.secrets[key])
    except Exception:
        pass

    # 2순위: 환경변수 / .env 파일 (로컬 실행 시)
    return os.getenv(key, default)


def _get_list(key: str, default: str = "") -> list[str]:
    """쉼표로 구분된 설정값을 리스트로 읽습니다."""
    raw = _get(key, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    """모든 설정값을 한 곳에서 관리하는 클래스"""

    # --- OpenAI 설정 ---
    OPENAI_API_KEY: str = _get("OPENAI_API_KEY")
    # GitHub Models 등 OpenAI 호환 엔드포인트를 쓸 때만 지정
    OPENAI_BASE_URL: str = _get("OPENAI_BASE_URL")
    OPENAI_MAX_RETRIES: int = int(_get("OPENAI_MAX_RETRIES", "2"))

    # --- Supabase 설정 ---
    SUPABASE_URL: str = _get("SUPABASE_URL")
    SUPABASE_KEY: str = _get("SUPABASE_KEY")
    SUPABASE_TABLE: str = _get("SUPABASE_TABLE", "vectors")

    # --- 임베딩 설정 ---
    EMBEDDING_MODEL: str = _get("EMBEDDING_MODEL", "text-embedding-3-small")
    EMBEDDING_DIMENSION: int = int(_get("EMBEDDING_DIMENSION", "1536"))
    # EMBEDDING_DIMENSION을 직접 지정했을 때만 API에 dimensions를 보냅니다
    EMBEDDING_DIMENSION_EXPLICIT: bool = bool(_get("EMBEDDING_DIMENSION").strip())

    # --- 챗봇 모델 ---
    CHAT_MODEL: str = _get("CHAT_MODEL", "gpt-4o-mini")
    CHAT_TEMPERATURE: float = float(_get("CHAT_TEMPERATURE", "1.0"))
    CHAT_MAX_TOKENS: int = int(_get("CHAT_MAX_TOKENS", "1000"))

    # --- 외부 호출 제한 시간 (초) ---
    REQUEST_TIMEOUT: float = float(_get("REQUEST_TIMEOUT", "30"))

    # --- 청크 설정 ---
    MIN_CHUNK_LENGTH: int = int(_get("MIN_CHUNK_LENGTH", "20"))
    QUERY_MARKER: str = _get("QUERY_MARKER", "Query:")
    ANSWER_MARKER: str = _get("ANSWER_MARKER", "Response:")
    # 이보다 긴 청크는 다시 나눕니다 (0이면 나누지 않음)
    CHUNK_SIZE: int = int(_get("CHUNK_SIZE", "1000"))
    CHUNK_OVERLAP: int = int(_get("CHUNK_OVERLAP", "200"))

    # --- 검색 설정 ---
    RELEVANCE_THRESHOLD: float = float(_get("RELEVANCE_THRESHOLD", "0.75"))
    TOP_K: int = int(_get("TOP_K", "3"))
    FORBIDDEN_TOPICS: list[str] = _get_list(
        "FORBIDDEN_TOPICS", "bmw,ceo,president,weather,capital of"
    )

    # --- 적재(ingestion) 동시 실행 수 ---
    INGEST_WORKERS: int = int(_get("INGEST_WORKERS", "1"))

    # --- 로그 레벨 ---
    LOG_LEVEL: str = _get("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> list[str]:
        """필수 설정값이 모두 입력되었는지 검증합니다."""
        # 클래스 속성을 최신 값으로 갱신 (Streamlit은 런타임에 secrets가 로드됨)
        cls.OPENAI_API_KEY = _get("OPENAI_API_KEY")
        cls.SUPABASE_URL = _get("SUPABASE_URL")
        cls.SUPABASE_KEY = _get("SUPABASE_KEY")

        errors = []
        if not cls.OPENAI_API_KEY or cls.OPENAI_API_KEY.startswith("sk-여기"):
            errors.append("OPENAI_API_KEY가 설정되지 않았습니다.")
        if not cls.SUPABASE_URL or "여기에" in cls.SUPABASE_URL:
            errors.append("SUPABASE_URL이 설정되지 않았습니다.")
        if not cls.SUPABASE_KEY or "여기에" in cls.SUPABASE_KEY:
            errors.append("SUPABASE_KEY가 설정되지 않았습니다.")
        if not -1.0 <= cls.RELEVANCE_THRESHOLD <= 1.0:
            errors.append("RELEVANCE_THRESHOLD는 -1 ~ 1 사이여야 합니다.")
        if cls.TOP_K < 1:
            errors.append("TOP_K는 1 이상이어야 합니다.")
        if cls.MIN_CHUNK_LENGTH < 1:
            errors.append("MIN_CHUNK_LENGTH는 1 이상이어야 합니다.")
        if cls.INGEST_WORKERS < 1:
            errors.append("INGEST_WORKERS는 1 이상이어야 합니다.")
        return errors
