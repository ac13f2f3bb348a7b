"""
processors 패키지
==================
파일에서 텍스트를 추출하는 프로세서를 제공합니다.

[초보자 안내]
- 프로세서(processor): 파일을 읽어서 텍스트로 변환하는 역할
- 추출된 텍스트를 청크로 나누는 일은 rag.chunker가 맡습니다
"""

from processors.pdf_processor import PageContent, PDFProcessor

__all__ = ["PageContent", "PDFProcessor"]
