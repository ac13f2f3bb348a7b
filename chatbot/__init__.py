"""
chatbot 패키지
===============
검색 결과로 프롬프트를 만들고 답변을 생성하는 챗봇과,
외부(HTTP/CLI/UI)에서 부르는 요청 처리 함수를 제공합니다.
"""

from chatbot.chat import ChatAnswer, RAGChatbot
from chatbot.endpoint import EndpointResponse, handle_chat, handle_retrieval

__all__ = ["ChatAnswer", "RAGChatbot", "EndpointResponse", "handle_chat", "handle_retrieval"]
