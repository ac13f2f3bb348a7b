"""
main.py - 데이터셋 RAG 프로젝트 메인 엔트리포인트
===================================================
터미널에서 실행하는 CLI(명령줄 인터페이스)를 제공합니다.

[사용법]
  # 웹 UI 실행 (권장)
  streamlit run app.py

  # 데이터셋 적재 (텍스트 추출 → 분할 → 임베딩 → DB 저장)
  python main.py ingest dataset.pdf

  # 질문 하나에 답변
  python main.py ask "What colors are available?"

  # 검색 결과(청크)만 보기
  python main.py search "What colors are available?"

  # 챗봇 시작 (대화형)
  python main.py chat

  # 저장된 청크 수 보기
  python main.py count

  # 설정 확인
  python main.py check
"""

import os
import sys

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from config import Config
from pipeline import ingest_file
from rag.errors import IngestionError, RAGError, ValidationError
from rag.retriever import RetrievalStatus
from services import build_services

console = Console()


def print_banner():
    """프로그램 시작 배너를 출력합니다."""
    banner = """
╔══════════════════════════════════════════╗
║        📚 DOXSY 데이터셋 챗봇 📚        ║
║                                          ║
║  데이터셋을 적재하고 AI에게 질문하세요!  ║
╚══════════════════════════════════════════╝
    """
    console.print(banner, style="bold cyan")


def _config_ready() -> bool:
    errors = Config.validate()
    if errors:
        console.print("[red]❌ 먼저 설정을 완료해 주세요 (python main.py check)[/red]")
        return False
    return True


def cmd_check():
    """설정이 올바른지 확인합니다."""
    console.print("\n[bold]🔍 설정 확인 중...[/bold]\n")

    errors = Config.validate()
    if errors:
        console.print("[red]❌ 설정 오류:[/red]")
        for err in errors:
            console.print(f"  • {err}", style="red")
        console.print("\n[yellow]💡 .env 파일을 확인해 주세요.[/yellow]")
        return False

    console.print("[green]✅ 모든 설정이 정상입니다![/green]")

    table = Table(title="현재 설정")
    table.add_column("항목", style="cyan")
    table.add_column("값", style="green")
    table.add_row("임베딩 모델", Config.EMBEDDING_MODEL)
    table.add_row("임베딩 차원", str(Config.EMBEDDING_DIMENSION))
    table.add_row("챗봇 모델", Config.CHAT_MODEL)
    table.add_row("유사도 임계값", str(Config.RELEVANCE_THRESHOLD))
    table.add_row("반환 청크 수", str(Config.TOP_K))
    table.add_row("최소 청크 길이", f"{Config.MIN_CHUNK_LENGTH}자")
    table.add_row("금지 주제", ", ".join(Config.FORBIDDEN_TOPICS))
    table.add_row("Supabase 테이블", Config.SUPABASE_TABLE)
    table.add_row("Supabase URL", Config.SUPABASE_URL[:40] + "...")
    console.print(table)
    return True


def cmd_ingest(file_paths: list[str]):
    """파일을 처리해서 벡터 저장소에 적재합니다."""
    if not file_paths:
        console.print("[red]❌ 파일 경로를 지정해 주세요.[/red]")
        console.print("사용법: python main.py ingest dataset.pdf")
        return

    if not _config_ready():
        return

    for file_path in file_paths:
        if not os.path.exists(file_path):
            console.print(f"[red]❌ 파일을 찾을 수 없습니다: {file_path}[/red]")
            continue

        console.print(f"\n[bold]📤 파일 처리 시작: {os.path.basename(file_path)}[/bold]")

        def on_progress(percent, message):
            console.print(f"  [{percent:3d}%] {message}")

        try:
            result = ingest_file(file_path, on_progress=on_progress)
        except IngestionError as e:
            console.print(
                f"[red]❌ 적재 중단: {e}[/red]\n"
                f"   이미 저장된 청크 {e.report.inserted}개는 유지됩니다."
            )
            continue
        except (RAGError, ValueError) as e:
            console.print(f"[red]❌ 오류 발생: {e}[/red]")
            continue

        if "error" in result:
            console.print(f"[red]❌ 처리 실패: {result['error']}[/red]")
            continue

        console.print(
            Panel(
                f"[green]✅ 적재 완료![/green]\n\n"
                f"  파일명: {result['filename']}\n"
                f"  저장된 청크: {result['chunk_count']}개\n"
                f"  건너뛴 청크: {result['skipped_count']}개 "
                f"({Config.MIN_CHUNK_LENGTH}자 미만)",
                title="처리 결과",
                border_style="green",
            )
        )


def cmd_search(query: str):
    """검색된 청크와 점수를 표로 보여줍니다."""
    if not _config_ready():
        return

    with build_services() as services:
        try:
            result = services.retriever.search(query)
        except ValidationError as e:
            console.print(f"[red]❌ {e}[/red]")
            return
        except RAGError as e:
            console.print(f"[red]❌ 검색 실패: {e}[/red]")
            return

    if result.status is RetrievalStatus.BLOCKED:
        console.print(f"[yellow]🚫 차단된 주제입니다 ({result.blocked_term})[/yellow]")
        return
    if result.status is RetrievalStatus.NO_RELEVANT_CONTENT:
        console.print("[yellow]📭 관련 청크가 없습니다.[/yellow]")
        return

    table = Table(title=f"검색 결과 ({len(result.chunks)}개)")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("유사도", justify="right", style="green")
    table.add_column("청크")
    for i, scored in enumerate(result.chunks, 1):
        table.add_row(str(i), f"{scored.score:.3f}", scored.chunk)
    console.print(table)


def cmd_ask(question: str):
    """질문 하나에 답변합니다."""
    if not _config_ready():
        return

    with build_services() as services:
        try:
            answer = services.chatbot.ask(question)
        except ValidationError as e:
            console.print(f"[red]❌ {e}[/red]")
            return
        except RAGError as e:
            console.print(f"[red]❌ 답변 생성 실패: {e}[/red]")
            return

    console.print(Panel(answer.text, title="🤖 답변", border_style="blue"))


def cmd_count():
    """저장된 청크 수를 표시합니다."""
    if not _config_ready():
        return

    with build_services() as services:
        try:
            total = services.store.count()
        except RAGError as e:
            console.print(f"[red]❌ 데이터베이스 연결 오류: {e}[/red]")
            return

    if total == 0:
        console.print("[yellow]📭 저장된 청크가 없습니다.[/yellow]")
        console.print("python main.py ingest dataset.pdf 로 데이터셋을 추가해 보세요.")
    else:
        console.print(f"📚 저장된 청크: [bold]{total}[/bold]개 ({Config.SUPABASE_TABLE})")


def cmd_chat():
    """대화형 챗봇을 시작합니다."""
    if not _config_ready():
        return

    console.print(
        Panel(
            "[bold cyan]💬 RAG 챗봇 시작![/bold cyan]\n\n"
            "적재된 데이터셋을 바탕으로 질문에 답변합니다.\n"
            "종료하려면 'quit' 또는 'exit'를 입력하세요.",
            border_style="cyan",
        )
    )

    with build_services() as services:
        while True:
            try:
                console.print()
                question = console.input("[bold green]❓ 질문: [/bold green]").strip()

                if not question:
                    continue
                if question.lower() in ("quit", "exit", "종료", "q"):
                    console.print("[dim]👋 챗봇을 종료합니다.[/dim]")
                    break

                console.print("\n[bold blue]🤖 답변:[/bold blue]")
                for piece in services.chatbot.stream_answer(question):
                    print(piece, end="", flush=True)
                console.print()

            except KeyboardInterrupt:
                console.print("\n[dim]👋 챗봇을 종료합니다.[/dim]")
                break
            except RAGError as e:
                console.print(f"[red]❌ 오류: {e}[/red]")


def print_help():
    """도움말을 출력합니다."""
    help_text = """
## 사용법

| 명령어 | 설명 | 예시 |
|--------|------|------|
| `ingest` | 데이터셋 적재 | `python main.py ingest dataset.pdf` |
| `ask` | 질문 하나에 답변 | `python main.py ask "What colors?"` |
| `search` | 검색된 청크 보기 | `python main.py search "What colors?"` |
| `chat` | 대화형 챗봇 시작 | `python main.py chat` |
| `count` | 저장된 청크 수 | `python main.py count` |
| `check` | 설정 확인 | `python main.py check` |

## 지원 파일 형식
- **PDF**: .pdf
- **텍스트**: .txt

## 시작하기
1. `.env`에 API 키와 Supabase 정보 입력
2. `database/schema.sql`을 Supabase SQL Editor에서 실행
3. `python main.py check`로 설정 확인
4. `python main.py ingest dataset.pdf`로 데이터셋 적재
5. `python main.py chat`로 질문하기
    """
    console.print(Markdown(help_text))


def main():
    """메인 함수: 명령줄 인수를 파싱하여 적절한 명령을 실행합니다."""
    print_banner()

    if len(sys.argv) < 2:
        print_help()
        return

    command = sys.argv[1].lower()

    if command in ("ingest", "upload"):
        cmd_ingest(sys.argv[2:])
    elif command in ("ask", "search"):
        if len(sys.argv) < 3:
            console.print("[red]❌ 질문을 입력하세요.[/red]")
            console.print(f'사용법: python main.py {command} "질문"')
        elif command == "ask":
            cmd_ask(" ".join(sys.argv[2:]))
        else:
            cmd_search(" ".join(sys.argv[2:]))
    elif command == "chat":
        cmd_chat()
    elif command == "count":
        cmd_count()
    elif command == "check":
        cmd_check()
    elif command in ("help", "-h", "--help"):
        print_help()
    else:
        console.print(f"[red]❌ 알 수 없는 명령: {command}[/red]")
        print_help()


if __name__ == "__main__":
    main()
