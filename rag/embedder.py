"""
embedder.py - 텍스트 임베딩 생성기
=====================================
텍스트를 숫자 벡터(임베딩)로 변환합니다.

[초보자 안내]
임베딩(Embedding)이란?
- 텍스트의 '의미'를 숫자 배열로 표현한 것
- 예: "고양이" → [0.23, -0.45, 0.67, ...] (1536개의 숫자)
- 의미가 비슷한 텍스트는 비슷한 숫자 배열을 가짐

임베딩 API는 외부 서비스라서 실패할 수 있습니다.
- 제한 시간 초과 → EmbeddingTimeout
- 그 밖의 API 오류 → EmbeddingFailure
OpenAI 클라이언트가 속도 제한(429) 등은 max_retries 만큼 자동 재시도합니다.
"""

import openai
from openai import OpenAI

from config import Config
from rag.errors import (
    DimensionMismatchError,
    EmbeddingFailure,
    EmbeddingTimeout,
    ValidationError,
)
from utils.logger import get_logger

logger = get_logger(__name__)


class Embedder:
    """
    OpenAI API를 사용하여 텍스트를 임베딩 벡터로 변환하는 클래스

    사용 예시:
        with Embedder() as embedder:
            vector = embedder.embed_text("안녕하세요")
    """

    def __init__(
        self,
        client: OpenAI | None = None,
        model: str | None = None,
        dimension: int | None = None,
    ):
        self.client = client or OpenAI(
            api_key=Config.OPENAI_API_KEY,
            base_url=Config.OPENAI_BASE_URL or None,
            timeout=Config.REQUEST_TIMEOUT,
            max_retries=Config.OPENAI_MAX_RETRIES,
        )
        self.model = model or Config.EMBEDDING_MODEL
        self.dimension = dimension or Config.EMBEDDING_DIMENSION
        # dimensions 파라미터는 차원을 직접 지정한 경우에만 보냄
        self.send_dimensions = dimension is not None or Config.EMBEDDING_DIMENSION_EXPLICIT

    def embed_text(self, text: str) -> list[float]:
        """
        하나의 텍스트를 임베딩 벡터로 변환합니다.

        Args:
            text: 변환할 텍스트

        Returns:
            임베딩 벡터 (float 리스트, 길이 = EMBEDDING_DIMENSION)

        Raises:
            ValidationError: 빈 텍스트
            EmbeddingTimeout / EmbeddingFailure: API 호출 실패
            DimensionMismatchError: 모델이 설정과 다른 차원을 돌려줄 때
        """
        text = (text or "").replace("\n", " ").strip()
        if not text:
            raise ValidationError("cannot embed empty text")

        params = {"input": text, "model": self.model}
        if self.send_dimensions:
            params["dimensions"] = self.dimension

        try:
            response = self.client.embeddings.create(**params)
        except openai.APITimeoutError as e:
            raise EmbeddingTimeout(f"embedding request timed out ({self.model})") from e
        except openai.OpenAIError as e:
            raise EmbeddingFailure(f"embedding request failed ({self.model})") from e

        embedding = list(response.data[0].embedding)
        if len(embedding) != self.dimension:
            raise DimensionMismatchError(
                f"model {self.model} returned {len(embedding)} dimensions, "
                f"expected {self.dimension}"
            )
        logger.debug("임베딩 생성: %d자 → %d차원", len(text), len(embedding))
        return embedding

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
