"""
app.py - Streamlit 웹 애플리케이션
====================================
브라우저에서 데이터셋 적재와 RAG 챗봇을 사용할 수 있는 웹 UI입니다.

[실행 방법]
  streamlit run app.py

[초보자 안내]
- Streamlit: Python 코드만으로 웹 앱을 만들 수 있는 라이브러리
- st.session_state: 페이지가 새로고침되어도 데이터를 유지하는 저장소
- st.chat_message: 챗봇 UI를 쉽게 만들어주는 컴포넌트
"""

import os
import tempfile

import streamlit as st

from config import Config
from pipeline import SUPPORTED_EXTENSIONS, ingest_file
from rag.errors import IngestionError, RAGError
from services import RAGServices, build_services


# ──────────────────────────────────────────────
# 페이지 기본 설정
# ──────────────────────────────────────────────
st.set_page_config(
    page_title="DOXSY 데이터셋 챗봇",
    page_icon="📚",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ──────────────────────────────────────────────
# 세션 상태 초기화
# ──────────────────────────────────────────────
if "chat_messages" not in st.session_state:
    st.session_state.chat_messages = []

if "services" not in st.session_state:
    st.session_state.services = None


def get_services() -> RAGServices:
    """서비스 인스턴스를 가져오거나 생성합니다 (세션당 하나)."""
    if st.session_state.services is None:
        st.session_state.services = build_services()
    return st.session_state.services


def check_config() -> list[str]:
    """설정 검증 후 오류 목록을 반환합니다."""
    return Config.validate()


# ──────────────────────────────────────────────
# 사이드바: 네비게이션 + 설정 상태
# ──────────────────────────────────────────────
with st.sidebar:
    st.title("📚 DOXSY")
    st.caption("데이터셋 기반 AI 챗봇")

    st.divider()

    page = st.radio(
        "메뉴",
        ["💬 챗봇", "📤 데이터셋 적재", "⚙️ 설정"],
        label_visibility="collapsed",
    )

    st.divider()

    errors = check_config()
    if errors:
        st.error("⚠️ 설정 필요")
        for err in errors:
            st.caption(f"• {err}")
    else:
        st.success("✅ 설정 완료")


# ──────────────────────────────────────────────
# 페이지: 챗봇
# ──────────────────────────────────────────────
def page_chat():
    st.header("💬 데이터셋 기반 AI 챗봇")
    st.caption("적재된 데이터셋만을 바탕으로 질문에 답변합니다")

    if check_config():
        st.warning("먼저 ⚙️ 설정 페이지에서 API 키를 설정해 주세요.")
        return

    services = get_services()
    try:
        total = services.store.count()
        if total:
            st.info(f"📚 저장된 청크 {total}개")
        else:
            st.warning("📭 저장된 청크가 없습니다. 먼저 📤 데이터셋 적재에서 파일을 추가해 주세요.")
    except RAGError:
        st.error("데이터베이스에 연결할 수 없습니다.")

    col1, col2 = st.columns([6, 1])
    with col2:
        if st.button("🔄 대화 초기화", use_container_width=True):
            st.session_state.chat_messages = []
            st.rerun()

    for msg in st.session_state.chat_messages:
        with st.chat_message(msg["role"]):
            st.markdown(msg["content"])

    if question := st.chat_input("데이터셋에 대해 궁금한 것을 질문하세요..."):
        st.session_state.chat_messages.append({"role": "user", "content": question})
        with st.chat_message("user"):
            st.markdown(question)

        with st.chat_message("assistant"):
            try:
                response = st.write_stream(services.chatbot.stream_answer(question))
            except RAGError:
                response = "답변을 가져오지 못했습니다. 잠시 후 다시 시도해 주세요."
                st.error(response)

        st.session_state.chat_messages.append({"role": "assistant", "content": response})


# ──────────────────────────────────────────────
# 페이지: 데이터셋 적재
# ──────────────────────────────────────────────
def page_upload():
    st.header("📤 데이터셋 적재")
    st.caption("PDF/텍스트 파일을 청크로 나누고 임베딩하여 데이터베이스에 저장합니다")

    if check_config():
        st.warning("먼저 ⚙️ 설정 페이지에서 API 키를 설정해 주세요.")
        return

    uploaded_files = st.file_uploader(
        "파일을 드래그하거나 클릭하여 선택하세요",
        type=[ext.lstrip(".") for ext in SUPPORTED_EXTENSIONS],
        accept_multiple_files=True,
    )

    if not uploaded_files:
        st.info(
            "**사용 방법**\n\n"
            "1. 위 영역에 파일을 드래그하거나 클릭하여 선택합니다\n"
            "2. 'Query:' 줄은 바로 다음 'Response:' 줄과 합쳐 하나의 청크가 됩니다\n"
            f"3. {Config.MIN_CHUNK_LENGTH}자 미만의 줄은 저장하지 않습니다\n"
            "4. 저장이 완료되면 💬 챗봇에서 질문할 수 있습니다"
        )
        return

    if not st.button("🚀 처리 시작 — DB에 저장", type="primary", use_container_width=True):
        return

    services = get_services()
    success_count = 0
    fail_count = 0

    for idx, uploaded_file in enumerate(uploaded_files):
        st.divider()
        st.subheader(f"처리 중 ({idx + 1}/{len(uploaded_files)}): {uploaded_file.name}")

        progress_bar = st.progress(0)
        status_text = st.empty()

        def on_progress(percent: int, message: str):
            progress_bar.progress(percent)
            status_text.text(message)

        # 임시 파일로 저장 후 처리
        suffix = os.path.splitext(uploaded_file.name)[1]
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
            tmp.write(uploaded_file.getbuffer())
            tmp_path = tmp.name

        try:
            result = ingest_file(
                tmp_path,
                embedder=services.embedder,
                store=services.store,
                on_progress=on_progress,
            )
            if "error" in result:
                st.error(f"❌ 실패: {result['error']}")
                fail_count += 1
            else:
                st.success(
                    f"✅ **{uploaded_file.name}** 처리 완료!  \n"
                    f"저장: {result['chunk_count']}개 · "
                    f"건너뜀: {result['skipped_count']}개 · "
                    f"텍스트: {result['text_length']:,}자"
                )
                success_count += 1
        except IngestionError as e:
            st.error(f"❌ 적재 중단 — 이미 저장된 {e.report.inserted}개 청크는 유지됩니다.")
            fail_count += 1
        except (RAGError, ValueError) as e:
            st.error(f"❌ 오류 발생: {e}")
            fail_count += 1
        finally:
            os.unlink(tmp_path)

    st.divider()
    st.info(f"**처리 완료** — 성공: {success_count}개, 실패: {fail_count}개")


# ──────────────────────────────────────────────
# 페이지: 설정
# ──────────────────────────────────────────────
def page_settings():
    st.header("⚙️ 설정 확인")

    errors = check_config()
    if errors:
        st.error("❌ 아래 설정을 완료해 주세요:")
        for err in errors:
            st.markdown(f"- {err}")

        with st.expander("📄 .env 파일 예시"):
            st.code(
                "OPENAI_API_KEY=sk-실제API키\n"
                "SUPABASE_URL=https://프로젝트.supabase.co\n"
                "SUPABASE_KEY=실제anon키\n",
                language="bash",
            )
    else:
        st.success("✅ 모든 설정이 정상입니다!")

    st.divider()
    st.subheader("현재 설정값")

    col1, col2 = st.columns(2)
    with col1:
        st.metric("임베딩 모델", Config.EMBEDDING_MODEL)
        st.metric("임베딩 차원", Config.EMBEDDING_DIMENSION)
        st.metric("챗봇 모델", Config.CHAT_MODEL)
    with col2:
        st.metric("유사도 임계값", Config.RELEVANCE_THRESHOLD)
        st.metric("반환 청크 수 (K)", Config.TOP_K)
        st.metric("최소 청크 길이", f"{Config.MIN_CHUNK_LENGTH}자")

    st.caption(f"금지 주제: {', '.join(Config.FORBIDDEN_TOPICS)}")

    st.divider()
    st.subheader("🗄️ 데이터베이스 스키마")
    st.markdown("`database/schema.sql` 파일을 Supabase SQL Editor에서 실행해야 합니다.")

    if st.button("📋 schema.sql 내용 보기"):
        schema_path = os.path.join(os.path.dirname(__file__), "database", "schema.sql")
        try:
            with open(schema_path, "r", encoding="utf-8") as f:
                st.code(f.read(), language="sql")
        except FileNotFoundError:
            st.error("schema.sql 파일을 찾을 수 없습니다.")


# ──────────────────────────────────────────────
# 라우팅: 선택된 페이지 렌더링
# ──────────────────────────────────────────────
if page == "💬 챗봇":
    page_chat()
elif page == "📤 데이터셋 적재":
    page_upload()
elif page == "⚙️ 설정":
    page_settings()
