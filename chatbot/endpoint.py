"""
endpoint.py - 요청 처리 함수
==============================
HTTP 서버(또는 CLI, Streamlit)가 호출하는 요청 처리 함수입니다.
웹 프레임워크에 묶이지 않도록 dict를 받아 EndpointResponse를 돌려줍니다.

응답 규칙:
- 질문 누락/빈 질문 → 400, kind="validation_error"
- 금지 주제 → 200, blocked=True + 고정 문구
- 관련 자료 없음 → 200, 빈 chunks + 고정 문구
- 외부 서비스 장애 → 500, 일반적인 오류 문구
  (내부 예외 메시지는 로그에만 남기고 응답에는 넣지 않습니다)
"""

from dataclasses import dataclass, field

from chatbot.chat import BLOCKED_MESSAGE, NOT_FOUND_MESSAGE, RAGChatbot
from rag.errors import RAGError, ValidationError
from rag.retriever import RetrievalStatus, Retriever
from utils.logger import get_logger

logger = get_logger(__name__)

RETRIEVAL_FAILED_MESSAGE = "Failed to retrieve context"
CHAT_FAILED_MESSAGE = "Failed to get response from AI"


@dataclass
class EndpointResponse:
    status_code: int
    body: dict = field(default_factory=dict)


def _read_query(payload: dict | None) -> tuple[str, str | None]:
    payload = payload or {}
    query = payload.get("query", payload.get("prompt"))
    if not isinstance(query, str) or not query.strip():
        raise ValidationError("query is required")
    system_message = payload.get("systemMessage")
    if system_message is not None and not isinstance(system_message, str):
        raise ValidationError("systemMessage must be a string")
    return query, system_message


def _validation_error(e: ValidationError) -> EndpointResponse:
    logger.info("잘못된 요청: %s", e)
    return EndpointResponse(400, {"error": str(e), "kind": "validation_error"})


def handle_retrieval(payload: dict | None, retriever: Retriever) -> EndpointResponse:
    """
    검색 요청을 처리합니다.

    입력: {"query": str, "systemMessage": str (선택)}
    출력: {"chunks": [str, ...], "blocked": bool, "message": str (선택)}
    """
    try:
        query, _ = _read_query(payload)
        result = retriever.search(query)
    except ValidationError as e:
        return _validation_error(e)
    except RAGError:
        logger.exception("검색 실패")
        return EndpointResponse(
            500, {"error": RETRIEVAL_FAILED_MESSAGE, "kind": "retrieval_failed"}
        )

    body = {"chunks": result.texts, "blocked": result.blocked}
    if result.status is RetrievalStatus.BLOCKED:
        body["message"] = BLOCKED_MESSAGE
    elif result.status is RetrievalStatus.NO_RELEVANT_CONTENT:
        body["message"] = NOT_FOUND_MESSAGE
    return EndpointResponse(200, body)


def handle_chat(payload: dict | None, chatbot: RAGChatbot) -> EndpointResponse:
    """
    챗봇 요청을 처리합니다.

    입력: {"query": str, "systemMessage": str (선택)}
    출력: {"aiResponse": str, "blocked": bool}
    """
    try:
        query, system_message = _read_query(payload)
        answer = chatbot.ask(query, system_message=system_message)
    except ValidationError as e:
        return _validation_error(e)
    except RAGError:
        logger.exception("챗봇 응답 실패")
        return EndpointResponse(500, {"error": CHAT_FAILED_MESSAGE, "kind": "retrieval_failed"})

    return EndpointResponse(
        200,
        {
            "aiResponse": answer.text,
            "blocked": answer.status is RetrievalStatus.BLOCKED,
        },
    )
