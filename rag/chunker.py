"""
chunker.py - 문서 텍스트 분할기
=================================
PDF에서 추출한 텍스트를 검색에 쓸 청크(조각)로 나눕니다.

[초보자 안내]
우리 데이터셋은 질문/답변 형식으로 되어 있습니다:
    Query: What colors are available?
    Response: Red and blue.

질문 줄과 답변 줄을 따로 저장하면 "질문만 있는 청크"와
"답변만 있는 청크"가 생겨서 검색 품질이 떨어집니다.
그래서 질문 줄을 만나면 바로 다음 줄과 합쳐 하나의 청크로 만듭니다.

분할 규칙:
1. 줄 단위로 나누고 앞뒤 공백 제거, 빈 줄은 버리기
2. "Query:"로 시작하면 다음 줄과 합치기 (두 줄을 모두 소비)
3. "Response:"로 시작하는 줄이 혼자 나오면 버리기
4. 나머지 줄은 그대로 청크 후보
5. 최소 길이(기본 20자)보다 짧은 후보는 버리기

너무 긴 후보(CHUNK_SIZE 초과)는 RecursiveCharacterTextSplitter로
한 번 더 나눕니다. 임베딩 모델의 입력 길이 제한 때문입니다.
"""

from dataclasses import dataclass
from typing import Iterator

from langchain_text_splitters import RecursiveCharacterTextSplitter

from config import Config


@dataclass(frozen=True)
class Chunk:
    """하나의 청크(텍스트 조각)를 나타내는 데이터 클래스"""

    text: str
    source_ordinal: int = 0

    def __repr__(self) -> str:
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"Chunk(len={len(self.text)}, preview='{preview}')"


class QAChunker:
    """
    질문/답변 형식의 텍스트를 청크로 분할하는 클래스

    사용 예시:
        chunker = QAChunker()
        chunks = chunker.split_text("Query: 색상은?\\nResponse: 빨강과 파랑")
    """

    def __init__(
        self,
        min_length: int | None = None,
        query_marker: str | None = None,
        answer_marker: str | None = None,
        max_chunk_chars: int | None = None,
        chunk_overlap: int | None = None,
    ):
        """
        Args:
            min_length: 청크 최소 길이 (글자 수). None이면 config에서 가져옴
            query_marker: 질문 줄 접두어
            answer_marker: 답변 줄 접두어
            max_chunk_chars: 이보다 긴 청크는 다시 분할 (0이면 분할 안 함)
            chunk_overlap: 재분할 시 겹침 크기
        """
        self.min_length = Config.MIN_CHUNK_LENGTH if min_length is None else min_length
        self.query_marker = query_marker or Config.QUERY_MARKER
        self.answer_marker = answer_marker or Config.ANSWER_MARKER
        self.max_chunk_chars = (
            Config.CHUNK_SIZE if max_chunk_chars is None else max_chunk_chars
        )
        overlap = Config.CHUNK_OVERLAP if chunk_overlap is None else chunk_overlap

        self.splitter = None
        if self.max_chunk_chars > 0:
            self.splitter = RecursiveCharacterTextSplitter(
                chunk_size=self.max_chunk_chars,
                chunk_overlap=min(overlap, self.max_chunk_chars // 2),
                separators=[". ", "; ", ", ", " ", ""],
                length_function=len,
            )

    def iter_candidates(self, text: str) -> Iterator[tuple[str, int]]:
        """
        최소 길이 검사 전의 청크 후보를 (텍스트, 줄 번호) 로 하나씩 돌려줍니다.
        """
        if not text:
            return

        lines = [line.strip() for line in text.splitlines()]
        lines = [line for line in lines if line]

        i = 0
        while i < len(lines):
            line = lines[i]
            if line.startswith(self.query_marker):
                # 마지막 줄이 질문이면 빈 답변과 짝지음
                answer = lines[i + 1] if i + 1 < len(lines) else ""
                yield f"{line} {answer}".strip(), i
                i += 2
                continue
            if not line.startswith(self.answer_marker):
                yield line, i
            i += 1

    def _pieces(self, candidate: str) -> list[str]:
        if self.splitter is None or len(candidate) <= self.max_chunk_chars:
            return [candidate]
        pieces = (piece.strip() for piece in self.splitter.split_text(candidate))
        return [piece for piece in pieces if piece]

    def _scan(self, text: str) -> Iterator[tuple[str, int, bool]]:
        for candidate, ordinal in self.iter_candidates(text):
            for piece in self._pieces(candidate):
                yield piece, ordinal, len(piece) >= self.min_length

    def iter_chunks(self, text: str) -> Iterator[Chunk]:
        """최소 길이를 통과한 청크만 순서대로 돌려주는 제너레이터"""
        for piece, ordinal, accepted in self._scan(text):
            if accepted:
                yield Chunk(text=piece, source_ordinal=ordinal)

    def split_text(self, text: str) -> list[Chunk]:
        """
        텍스트를 청크로 분할합니다.

        Args:
            text: PDF 등에서 추출한 전체 텍스트

        Returns:
            Chunk 객체 리스트 (빈 텍스트면 빈 리스트)
        """
        return list(self.iter_chunks(text))

    def partition(self, text: str) -> tuple[list[Chunk], list[str]]:
        """
        청크와, 너무 짧아서 버려진 후보 텍스트를 함께 반환합니다.
        적재 결과 보고용입니다.
        """
        chunks: list[Chunk] = []
        skipped: list[str] = []
        for piece, ordinal, accepted in self._scan(text):
            if accepted:
                chunks.append(Chunk(text=piece, source_ordinal=ordinal))
            else:
                skipped.append(piece)
        return chunks, skipped
