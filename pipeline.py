"""
pipeline.py - 문서 적재 파이프라인
====================================
파일 읽기부터 벡터 저장소 저장까지의 전체 흐름을 관리합니다.
CLI(main.py)와 웹(app.py) 모두에서 사용할 수 있도록 콜백 방식으로 설계되었습니다.

[처리 흐름]
  파일 읽기 → 텍스트 추출 → 청크 분할 → (청크마다) 임베딩 생성 → 저장

[초보자 안내]
- 청크는 하나씩 임베딩하고 바로 저장합니다. 임베딩 API의 속도 제한을
  넘지 않기 위해서입니다. INGEST_WORKERS를 늘리면 그 수만큼 동시에 처리합니다.
- 중간에 실패해도 이미 저장된 청크는 그대로 남습니다 (되돌리지 않음).
  실패 시 IngestionError.report 에 그때까지의 결과가 들어 있습니다.
"""

import os
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable

from config import Config
from database.base import VectorStore
from database.supabase_client import SupabaseVectorStore
from processors.pdf_processor import PDFProcessor
from rag.chunker import Chunk, QAChunker
from rag.embedder import Embedder
from rag.errors import IngestionError, RAGError
from utils.logger import get_logger

logger = get_logger(__name__)

# 파일 확장자별 지원 형식
SUPPORTED_EXTENSIONS = {
    ".pdf": "pdf",
    ".txt": "text",
}

ProgressCallback = Callable[[int, str], None]


@dataclass
class IngestionReport:
    """적재 결과"""

    inserted: int = 0
    skipped: list[str] = field(default_factory=list)
    record_ids: list[int] = field(default_factory=list)


def get_file_type(file_path: str) -> str | None:
    """파일 확장자로 파일 종류를 판별합니다."""
    ext = os.path.splitext(file_path)[1].lower()
    return SUPPORTED_EXTENSIONS.get(ext)


def process_file(file_path: str) -> dict:
    """파일을 읽어서 텍스트를 추출합니다."""
    file_type = get_file_type(file_path)

    if file_type is None:
        ext = os.path.splitext(file_path)[1]
        raise ValueError(
            f"지원하지 않는 파일 형식입니다: {ext}\n"
            f"지원 형식: {', '.join(SUPPORTED_EXTENSIONS.keys())}"
        )

    if file_type == "pdf":
        return PDFProcessor().process(file_path)

    with open(file_path, "r", encoding="utf-8") as f:
        text = f.read()
    return {
        "filename": os.path.basename(file_path),
        "file_type": file_type,
        "file_size": os.path.getsize(file_path),
        "page_count": 1,
        "full_text": text,
    }


def _store_chunk(chunk: Chunk, embedder: Embedder, store: VectorStore) -> int:
    embedding = embedder.embed_text(chunk.text)
    record_id = store.insert(chunk.text, embedding)
    logger.debug("청크 저장 #%s: %s", record_id, chunk.text[:60])
    return record_id


def ingest_text(
    text: str,
    embedder: Embedder,
    store: VectorStore,
    chunker: QAChunker | None = None,
    workers: int | None = None,
    on_progress: ProgressCallback | None = None,
) -> IngestionReport:
    """
    텍스트를 청크로 나누어 임베딩과 함께 저장합니다.

    Args:
        text: 추출된 전체 텍스트
        embedder: 임베딩 생성기
        store: 벡터 저장소
        chunker: 청크 분할기. None이면 기본 설정으로 생성
        workers: 동시에 처리할 청크 수. None이면 Config.INGEST_WORKERS
        on_progress: 진행률 콜백 함수 (percent: 0~100, message: 상태 메시지)

    Returns:
        IngestionReport

    Raises:
        IngestionError: 중간에 실패한 경우 (이미 저장된 청크는 유지)
    """
    chunker = chunker or QAChunker()
    workers = max(1, workers or Config.INGEST_WORKERS)

    def report_progress(done: int, total: int):
        if on_progress and total:
            on_progress(int(done * 100 / total), f"{done}/{total}개 청크 저장")

    chunks, skipped = chunker.partition(text)
    report = IngestionReport(skipped=skipped)
    if skipped:
        logger.info("너무 짧은 청크 %d개 건너뜀", len(skipped))
    total = len(chunks)

    if workers == 1:
        for chunk in chunks:
            try:
                record_id = _store_chunk(chunk, embedder, store)
            except RAGError as e:
                raise IngestionError(
                    f"ingestion stopped after {report.inserted}/{total} chunks", report
                ) from e
            report.record_ids.append(record_id)
            report.inserted += 1
            report_progress(report.inserted, total)
    else:
        _ingest_concurrently(chunks, embedder, store, workers, report, report_progress)

    logger.info("적재 완료: %d개 저장, %d개 건너뜀", report.inserted, len(report.skipped))
    return report


def _ingest_concurrently(
    chunks: list[Chunk],
    embedder: Embedder,
    store: VectorStore,
    workers: int,
    report: IngestionReport,
    report_progress: Callable[[int, int], None],
):
    """
    최대 workers개의 청크를 동시에 처리합니다.
    하나가 실패하면 새 청크는 시작하지 않고, 실행 중인 것은 끝까지 기다립니다.
    """
    total = len(chunks)
    pending = iter(chunks)
    failure: BaseException | None = None

    with ThreadPoolExecutor(max_workers=workers) as pool:
        running = set()
        for chunk in pending:
            running.add(pool.submit(_store_chunk, chunk, embedder, store))
            if len(running) >= workers:
                break

        while running:
            done, running = wait(running, return_when=FIRST_COMPLETED)
            for future in done:
                error = future.exception()
                if error is not None:
                    failure = failure or error
                    continue
                report.record_ids.append(future.result())
                report.inserted += 1
                report_progress(report.inserted, total)

            if failure is None:
                for chunk in pending:
                    running.add(pool.submit(_store_chunk, chunk, embedder, store))
                    if len(running) >= workers:
                        break

    if failure is not None:
        if not isinstance(failure, RAGError):
            raise failure
        raise IngestionError(
            f"ingestion stopped after {report.inserted}/{total} chunks", report
        ) from failure


def ingest_file(
    file_path: str,
    embedder: Embedder | None = None,
    store: VectorStore | None = None,
    on_progress: ProgressCallback | None = None,
) -> dict:
    """
    파일을 처리하고 벡터 저장소에 저장하는 전체 파이프라인을 실행합니다.

    Args:
        file_path: 처리할 파일 경로
        embedder: 임베딩 생성기. None이면 Config로 생성
        store: 벡터 저장소. None이면 Supabase 저장소 생성
        on_progress: 진행률 콜백 함수 (percent: 0~100, message: 상태 메시지)
                     None이면 진행률을 출력하지 않습니다.

    Returns:
        처리 결과 딕셔너리
    """
    file_path = os.path.abspath(file_path)

    def report(percent: int, message: str):
        if on_progress:
            on_progress(percent, message)

    # --- 1단계: 텍스트 추출 ---
    report(5, "📄 파일에서 텍스트를 추출하는 중...")
    result = process_file(file_path)
    full_text = result.get("full_text", "")

    if not full_text.strip():
        return {"error": "파일에서 텍스트를 추출할 수 없습니다."}

    report(
        20,
        f"✅ 텍스트 추출 완료 — {len(full_text):,}자, "
        f"{result.get('page_count', 1)}페이지",
    )

    # --- 2단계: 청크 분할 + 임베딩 + 저장 ---
    owns_embedder = embedder is None
    owns_store = store is None
    embedder = embedder or Embedder()
    store = store or SupabaseVectorStore()

    def on_chunk_progress(percent: int, message: str):
        # 20% ~ 100% 구간에 청크 저장 진행률을 표시
        report(20 + percent * 80 // 100, f"💾 {message}")

    try:
        ingestion = ingest_text(
            full_text,
            embedder=embedder,
            store=store,
            on_progress=on_chunk_progress,
        )
    finally:
        if owns_embedder:
            embedder.close()
        if owns_store:
            store.close()

    report(100, "✅ 저장 완료!")

    return {
        "filename": result["filename"],
        "file_type": result["file_type"],
        "text_length": len(full_text),
        "page_count": result.get("page_count", 1),
        "chunk_count": ingestion.inserted,
        "skipped_count": len(ingestion.skipped),
        "skipped": ingestion.skipped,
    }
