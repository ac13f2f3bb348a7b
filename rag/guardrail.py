"""
guardrail.py - 금지 주제 필터
===============================
데이터셋과 관계없는 질문(예: 날씨, 특정 브랜드, 인물)은
임베딩/검색을 하기 전에 바로 거절합니다.

임베딩 API를 부르지 않으니 비용도 들지 않습니다.
"""

from typing import Iterable

from config import Config


class GuardrailFilter:
    """대소문자 구분 없는 부분 문자열 매칭으로 금지 주제를 걸러냅니다."""

    def __init__(self, denylist: Iterable[str] | None = None):
        terms = Config.FORBIDDEN_TOPICS if denylist is None else denylist
        if isinstance(terms, str):
            # 문자열 하나 = 금지어 하나
            terms = (terms,)
        self.denylist = tuple(t.strip().lower() for t in terms if t and t.strip())

    def matched_term(self, query: str) -> str | None:
        """질문에 포함된 첫 번째 금지어를 반환합니다. 없으면 None."""
        lowered = (query or "").lower()
        for term in self.denylist:
            if term in lowered:
                return term
        return None

    def is_blocked(self, query: str) -> bool:
        return self.matched_term(query) is not None
