"""
errors.py - RAG 파이프라인 예외 정의
======================================
검색/적재 과정에서 발생할 수 있는 오류를 종류별로 나눕니다.

[초보자 안내]
- "차단됨(blocked)"과 "관련 문서 없음"은 오류가 아닙니다.
  정상적인 결과의 한 종류이므로 예외가 아니라 RetrievalStatus로 표현합니다.
- 임베딩 API나 DB가 응답하지 않는 경우(RemoteFailure)는 오류입니다.
  이것을 "관련 문서 없음"으로 바꿔 버리면 장애가 숨겨집니다.

예외 계층:
    RAGError
    ├── ValidationError
    ├── DimensionMismatchError
    ├── DegenerateVectorError
    ├── IngestionError
    └── RemoteFailure
        ├── RemoteTimeout
        ├── EmbeddingFailure  ── EmbeddingTimeout
        ├── StorageFailure    ── StorageTimeout
        └── CompletionFailure ── CompletionTimeout
"""


class RAGError(Exception):
    """이 프로젝트의 모든 예외의 기반 클래스"""


class ValidationError(RAGError):
    """필수 입력(질문, 청크 텍스트)이 없거나 비어 있을 때"""


class DimensionMismatchError(RAGError):
    """
    벡터 차원이 서로 맞지 않을 때.

    한 저장소 안의 모든 임베딩은 같은 차원이어야 합니다.
    임베딩 모델 설정이 잘못된 경우이므로 복구하지 않고 그대로 올립니다.
    """


class DegenerateVectorError(RAGError):
    """노름(norm)이 0인 벡터로 코사인 유사도를 계산하려 할 때 (strict 모드)"""


class IngestionError(RAGError):
    """
    적재 도중 실패했을 때.

    이미 저장된 청크는 되돌리지 않습니다. ``report`` 에 실패 직전까지의
    결과가 담겨 있습니다.
    """

    def __init__(self, message: str, report):
        super().__init__(message)
        self.report = report


class RemoteFailure(RAGError):
    """외부 서비스(임베딩 API, DB, 챗 API) 호출 실패"""


class RemoteTimeout(RemoteFailure):
    """외부 서비스 호출이 제한 시간을 넘겼을 때"""


class EmbeddingFailure(RemoteFailure):
    pass


class EmbeddingTimeout(EmbeddingFailure, RemoteTimeout):
    pass


class StorageFailure(RemoteFailure):
    pass


class StorageTimeout(StorageFailure, RemoteTimeout):
    pass


class CompletionFailure(RemoteFailure):
    pass


class CompletionTimeout(CompletionFailure, RemoteTimeout):
    pass
