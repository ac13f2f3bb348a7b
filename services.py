"""
services.py - 구성 요소 조립
==============================
임베딩 클라이언트, 벡터 저장소, 검색기, 챗봇을 한 번에 만들고 닫습니다.

전역 클라이언트를 두지 않고, 필요한 곳(CLI 명령, Streamlit 세션, 테스트)에서
직접 만들어 넘겨줍니다.

사용 예시:
    with build_services() as services:
        answer = services.chatbot.ask("What colors are available?")
"""

from dataclasses import dataclass

from chatbot.chat import RAGChatbot
from database.base import VectorStore
from database.supabase_client import SupabaseVectorStore
from rag.embedder import Embedder
from rag.guardrail import GuardrailFilter
from rag.retriever import Retriever
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RAGServices:
    embedder: Embedder
    store: VectorStore
    retriever: Retriever
    chatbot: RAGChatbot

    def close(self):
        self.chatbot.close()
        self.embedder.close()
        self.store.close()
        logger.debug("서비스 연결 종료")

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def build_services(
    embedder: Embedder | None = None,
    store: VectorStore | None = None,
) -> RAGServices:
    """Config 값으로 모든 구성 요소를 만듭니다. 인자로 넘긴 것은 그대로 사용합니다."""
    embedder = embedder or Embedder()
    store = store or SupabaseVectorStore()
    retriever = Retriever(embedder, store, GuardrailFilter())
    chatbot = RAGChatbot(retriever)
    logger.debug("서비스 준비 완료 (store=%s)", type(store).__name__)
    return RAGServices(embedder=embedder, store=store, retriever=retriever, chatbot=chatbot)
