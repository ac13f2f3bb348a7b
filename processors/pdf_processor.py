"""
pdf_processor.py - PDF 파일 처리기
====================================
PDF 파일에서 텍스트를 추출합니다.

[초보자 안내]
- PyMuPDF(fitz): PDF 파일을 읽고 분석하는 강력한 Python 라이브러리
- 줄바꿈을 그대로 살려서 추출합니다. 청커가 줄 단위로
  "Query:" / "Response:" 쌍을 찾기 때문입니다.
"""

import os
from dataclasses import dataclass

import fitz  # PyMuPDF


@dataclass
class PageContent:
    """한 페이지에서 추출된 내용을 담는 데이터 클래스"""

    page_number: int
    text: str


class PDFProcessor:
    """
    PDF 파일에서 텍스트를 추출하는 프로세서

    사용 예시:
        processor = PDFProcessor()
        result = processor.process("dataset.pdf")
        print(result["full_text"])
    """

    def process(self, file_path: str) -> dict:
        """
        PDF 파일을 처리하여 텍스트를 추출합니다.

        Returns:
            dict: {
                "filename": 파일 이름,
                "file_type": "pdf",
                "file_size": 파일 크기,
                "page_count": 페이지 수,
                "pages": [PageContent, ...],
                "full_text": 전체 텍스트,
            }
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"파일을 찾을 수 없습니다: {file_path}")

        with fitz.open(file_path) as doc:
            pages = [
                PageContent(page_number=i + 1, text=page.get_text("text").strip())
                for i, page in enumerate(doc)
            ]

        return {
            "filename": os.path.basename(file_path),
            "file_type": "pdf",
            "file_size": os.path.getsize(file_path),
            "page_count": len(pages),
            "pages": pages,
            "full_text": "\n".join(p.text for p in pages),
        }
