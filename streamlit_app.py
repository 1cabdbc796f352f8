"""
Streamlit web interface for the Napkin2Web sketch-to-code pipeline.

Upload a hand-drawn UI sketch, pick an output framework, refine the result
with natural-language edits and download it as a project archive. The live
preview is always static HTML shown in a device frame.
"""

import asyncio
import hashlib

import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv

from napkin2web.config import Settings
from napkin2web.errors import Napkin2WebError
from napkin2web.io.project_packager import ProjectPackager
from napkin2web.io.sketch_loader import ACCEPTED_SUFFIXES, SketchLoader
from napkin2web.models import Framework, PreviewDevice, SessionState, ViewportConfig
from napkin2web.rendering.preview_renderer import build_preview_document
from napkin2web.session import HttpConvertClient, LocalConvertClient, SyncController

# Load environment variables
load_dotenv()

# Page configuration
st.set_page_config(
    page_title="Napkin2Web",
    page_icon="✏️",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        margin-bottom: 1rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #666;
        margin-bottom: 2rem;
    }
    .device-label {
        font-weight: 600;
        color: #1f77b4;
    }
</style>
""", unsafe_allow_html=True)

FRAMEWORK_LABELS = {
    Framework.STATIC: "HTML + Tailwind",
    Framework.REACT: "React",
    Framework.NEXTJS: "Next.js",
}

CODE_LANGUAGES = {
    Framework.STATIC: "html",
    Framework.REACT: "tsx",
    Framework.NEXTJS: "tsx",
}

# Initialize session state
if "session" not in st.session_state:
    st.session_state.session = SessionState()
if "upload_digest" not in st.session_state:
    st.session_state.upload_digest = None


def get_controller(backend: str, api_url: str) -> SyncController:
    """Controller bound to the session state and the selected backend."""
    if backend == "HTTP API":
        client = HttpConvertClient(base_url=api_url)
    else:
        client = LocalConvertClient()
    return SyncController(client=client, state=st.session_state.session)


def main():
    """Main application entry point."""

    # Header
    st.markdown('<div class="main-header">✏️ Napkin2Web</div>', unsafe_allow_html=True)
    st.markdown(
        '<div class="sub-header">Turn hand-drawn interface sketches into working web code</div>',
        unsafe_allow_html=True
    )

    state = st.session_state.session

    try:
        settings = Settings.from_env()
    except Napkin2WebError as e:
        st.error(f"❌ {e.message}")
        return

    # Sidebar configuration
    with st.sidebar:
        st.header("⚙️ Configuration")

        backend = st.radio(
            "Backend",
            ["Local models", "HTTP API"],
            help="Call the models from this app, or go through a running /api/convert service"
        )
        api_url = st.text_input("API URL", value=settings.api_url, disabled=backend != "HTTP API")

        st.divider()

        st.subheader("Output")
        frameworks = list(Framework)
        framework = st.selectbox(
            "Framework",
            frameworks,
            index=frameworks.index(state.framework),
            format_func=lambda f: FRAMEWORK_LABELS[f],
            disabled=state.busy,
        )

        device = st.radio(
            "Preview device",
            list(PreviewDevice),
            format_func=lambda d: d.value.capitalize(),
            horizontal=True,
        )

        if state.notices:
            st.divider()
            for notice in state.notices:
                st.error(f"❌ {notice}")
            if st.button("Dismiss"):
                state.notices.clear()
                st.rerun()

    controller = get_controller(backend, api_url)

    if framework != state.framework:
        with st.spinner(f"🔄 Converting to {FRAMEWORK_LABELS[framework]}..."):
            asyncio.run(controller.switch_framework(framework))
        st.rerun()

    tab1, tab2, tab3 = st.tabs([
        "🎨 Studio",
        "📄 Code",
        "ℹ️ About"
    ])

    with tab1:
        studio_tab(controller, device)

    with tab2:
        code_tab(state)

    with tab3:
        about_tab()


def studio_tab(controller: SyncController, device: PreviewDevice):
    """Upload a sketch, see the preview and apply edits."""
    state = controller.state

    col1, col2 = st.columns([1, 2])

    with col1:
        st.subheader("📤 Sketch")
        sketch_file = st.file_uploader(
            "Upload a hand-drawn UI sketch",
            type=[suffix.lstrip(".") for suffix in ACCEPTED_SUFFIXES],
            key="sketch_upload",
            disabled=state.busy,
        )

        if sketch_file:
            data = sketch_file.getvalue()
            digest = hashlib.sha256(data).hexdigest()

            if digest != st.session_state.upload_digest:
                st.session_state.upload_digest = digest
                loader = SketchLoader()
                try:
                    loader.check_upload(data, sketch_file.name)
                    image = loader.to_data_uri(data)
                except Napkin2WebError as e:
                    st.error(f"❌ {e.message}")
                    image = None

                if image:
                    with st.spinner("🔄 Analyzing sketch and generating code..."):
                        asyncio.run(controller.generate_from_sketch(image))
                    st.rerun()

            st.image(data, caption="Uploaded sketch", width='stretch')

        if state.ui_description:
            with st.expander("🧭 UI Blueprint"):
                st.markdown(state.ui_description)

    with col2:
        viewport = ViewportConfig.for_device(device)
        st.markdown(
            f'<div class="device-label">{device.value.capitalize()} ({viewport.width}px)</div>',
            unsafe_allow_html=True
        )

        if state.preview_code or state.canonical_code:
            components.html(
                build_preview_document(state.preview_code, state.canonical_code),
                width=viewport.width,
                height=viewport.height,
                scrolling=True,
            )
        else:
            st.info("Upload a sketch to see the live preview.")

    st.divider()

    instruction = st.chat_input(
        "Describe a change, e.g. 'make the button blue'",
        disabled=state.busy or not state.canonical_code,
    )
    if instruction:
        with st.spinner("✏️ Applying edit..."):
            asyncio.run(controller.apply_edit(instruction))
        st.rerun()


def code_tab(state: SessionState):
    """Show and download the generated code."""
    st.header("📄 Generated Code")

    if not state.canonical:
        st.info("No code generated yet.")
        return

    framework = state.canonical.framework
    st.caption(f"Framework: {FRAMEWORK_LABELS[framework]}")
    st.code(state.canonical.source, language=CODE_LANGUAGES[framework])

    packager = ProjectPackager()
    st.download_button(
        "⬇️ Download Project",
        data=packager.build_zip(state.canonical.source, framework),
        file_name=packager.archive_name(framework),
        mime="application/zip",
        key="download_project_zip"
    )

    if state.preview_code and framework != Framework.STATIC:
        with st.expander("👁️ Preview HTML"):
            st.code(state.preview_code, language="html")


def about_tab():
    """About the project."""

    st.header("ℹ️ About Napkin2Web")

    st.markdown("""
    ### From napkin sketch to web code

    #### Pipeline Overview

    1. **Classify**: the upload is checked to be a UI sketch; photos and other images are rejected
    2. **Analyze**: the sketch is turned into a structured UI blueprint
    3. **Convert**: code is generated in the selected framework (HTML, React or Next.js)
    4. **Preview**: a static HTML version is kept for the live preview
    5. **Edit**: natural-language instructions refine the generated code

    Each request walks an ordered list of candidate models and falls back to the
    next one on failure, pausing briefly after rate-limit errors.

    #### Technology Stack

    - **LangChain**: LLM access (Gemini, OpenAI, Anthropic)
    - **LangGraph**: generate / switch / edit flows
    - **FastAPI**: `/api/convert` service
    - **Playwright**: preview screenshots
    - **Streamlit**: Web interface
    """)


if __name__ == "__main__":
    main()
