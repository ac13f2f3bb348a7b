"""
chat.py - RAG 기반 챗봇
=========================
사용자의 질문에 대해 저장된 데이터셋을 참고하여 답변하는 챗봇입니다.

[초보자 안내]
RAG 챗봇의 작동 방식:
1. 사용자가 질문을 입력합니다
2. 질문과 관련된 문서 조각을 검색합니다 (Retriever)
3. 검색된 조각들을 AI 모델에게 "참고자료"로 전달합니다
4. AI 모델이 참고자료만을 바탕으로 답변을 생성합니다

금지 주제 질문이나 관련 자료가 없는 질문에는 AI를 부르지 않고
정해진 문구로 바로 답합니다. 근거 없는 답을 지어내지 않기 위해서입니다.
"""

from dataclasses import dataclass, field

import openai
from openai import OpenAI

from config import Config
from rag.errors import CompletionFailure, CompletionTimeout
from rag.retriever import (
    CONTEXT_SEPARATOR,
    RetrievalResult,
    RetrievalStatus,
    Retriever,
)
from utils.logger import get_logger

logger = get_logger(__name__)

BLOCKED_MESSAGE = "Sorry, I can only answer questions based on the provided dataset."
NOT_FOUND_MESSAGE = "Sorry, I couldn't find the answer in the dataset."
FALLBACK_ANSWER = "I don't know."

DEFAULT_SYSTEM_MESSAGE = (
    "You are DOXSY.AI, an assistant. Use ONLY the context below to answer "
    "the user's question. If the answer is not in the context, say \"I don't know.\""
)


@dataclass
class ChatAnswer:
    """챗봇 답변과 그 근거가 된 검색 결과"""

    text: str
    status: RetrievalStatus
    sources: list[str] = field(default_factory=list)


def build_messages(
    question: str,
    chunks: list[str],
    system_message: str | None = None,
) -> list[dict]:
    """AI 모델에 보낼 메시지 목록을 만듭니다."""
    context = CONTEXT_SEPARATOR.join(chunks)
    return [
        {"role": "system", "content": system_message or DEFAULT_SYSTEM_MESSAGE},
        {"role": "system", "content": f"Here is the context:\n{context}"},
        {"role": "user", "content": f"Q: {question}"},
    ]


class RAGChatbot:
    """
    RAG 기반 챗봇 클래스

    사용 예시:
        chatbot = RAGChatbot(retriever)
        answer = chatbot.ask("What colors are available?")
        print(answer.text)
    """

    def __init__(
        self,
        retriever: Retriever,
        client: OpenAI | None = None,
        model: str | None = None,
    ):
        self.retriever = retriever
        self.client = client or OpenAI(
            api_key=Config.OPENAI_API_KEY,
            base_url=Config.OPENAI_BASE_URL or None,
            timeout=Config.REQUEST_TIMEOUT,
            max_retries=Config.OPENAI_MAX_RETRIES,
        )
        self.model = model or Config.CHAT_MODEL

    def _short_circuit(self, result: RetrievalResult) -> ChatAnswer | None:
        if result.status is RetrievalStatus.BLOCKED:
            return ChatAnswer(text=BLOCKED_MESSAGE, status=result.status)
        if result.status is RetrievalStatus.NO_RELEVANT_CONTENT:
            return ChatAnswer(text=NOT_FOUND_MESSAGE, status=result.status)
        return None

    def ask(self, question: str, system_message: str | None = None) -> ChatAnswer:
        """
        질문에 대해 답변합니다.

        Args:
            question: 사용자 질문
            system_message: 기본 시스템 프롬프트 대신 쓸 문구

        Returns:
            ChatAnswer

        Raises:
            ValidationError: 질문이 비어 있을 때
            RemoteFailure: 임베딩/저장소/챗 API 호출 실패
        """
        result = self.retriever.search(question)
        answer = self._short_circuit(result)
        if answer is not None:
            return answer

        messages = build_messages(question, result.texts, system_message)
        logger.debug("컨텍스트 전달:\n%s", messages[1]["content"])

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=Config.CHAT_TEMPERATURE,
                max_tokens=Config.CHAT_MAX_TOKENS,
                top_p=1.0,
            )
        except openai.APITimeoutError as e:
            raise CompletionTimeout(f"chat completion timed out ({self.model})") from e
        except openai.OpenAIError as e:
            raise CompletionFailure(f"chat completion failed ({self.model})") from e

        reply = response.choices[0].message.content if response.choices else None
        return ChatAnswer(
            text=reply or FALLBACK_ANSWER,
            status=result.status,
            sources=result.texts,
        )

    def stream_answer(self, question: str, system_message: str | None = None):
        """
        Streamlit 등 웹 UI용 스트리밍 제너레이터.
        yield로 한 조각씩 텍스트를 반환합니다.
        """
        result = self.retriever.search(question)
        answer = self._short_circuit(result)
        if answer is not None:
            yield answer.text
            return

        messages = build_messages(question, result.texts, system_message)
        try:
            stream = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=Config.CHAT_TEMPERATURE,
                max_tokens=Config.CHAT_MAX_TOKENS,
                top_p=1.0,
                stream=True,
            )
            for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                if delta.content:
                    yield delta.content
        except openai.APITimeoutError as e:
            raise CompletionTimeout(f"chat completion timed out ({self.model})") from e
        except openai.OpenAIError as e:
            raise CompletionFailure(f"chat completion failed ({self.model})") from e

    def close(self):
        self.client.close()
