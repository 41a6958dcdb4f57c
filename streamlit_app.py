"""
Streamlit web interface for Prompt2App.

Describe an app (typed or dictated), generate a single-file HTML app with an
LLM, try it in a sandboxed live preview, read the code, and download it.
"""

from pathlib import Path

import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv

from prompt2app.config import DEFAULT_MODELS, Settings
from prompt2app.io.artifacts import ArtifactManager
from prompt2app.models import NotificationLevel
from prompt2app.pipeline.generation import AppGenerator
from prompt2app.rendering.preview import DEFAULT_PREVIEW_HEIGHT, build_preview_frame
from prompt2app.shell.controller import ShellController
from prompt2app.shell.dictation import get_recognizer

# Load environment variables
load_dotenv()

# Page configuration
st.set_page_config(
    page_title="Prompt2App",
    page_icon="⚡",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.2rem;
        color: #666;
        margin-bottom: 2rem;
    }
    .voice-note {
        font-size: 0.8rem;
        color: #888;
    }
</style>
""", unsafe_allow_html=True)

MODEL_OPTIONS = {
    "openai": ["gpt-4o", "gpt-4o-mini", "gpt-4.1"],
    "anthropic": ["claude-3-5-sonnet-latest", "claude-3-7-sonnet-latest"],
}

# Initialize session state
if "settings" not in st.session_state:
    st.session_state.settings = Settings.from_env()
if "controller" not in st.session_state:
    settings = st.session_state.settings
    try:
        recognizer = get_recognizer(settings)
    except ValueError:
        recognizer = None
    st.session_state.controller = ShellController(
        generator=AppGenerator.from_settings(settings),
        recognizer=recognizer,
    )
if "prompt_text" not in st.session_state:
    st.session_state.prompt_text = ""
if "pending_action" not in st.session_state:
    st.session_state.pending_action = None
if "last_saved_path" not in st.session_state:
    st.session_state.last_saved_path = None


def _controller() -> ShellController:
    return st.session_state.controller


def _sync_prompt():
    _controller().prompt = st.session_state.prompt_text


def _request(action: str):
    """Button callback: remember the action; it runs on the next script pass."""
    _sync_prompt()
    st.session_state.pending_action = action


def _on_dictation():
    """Recorder callback: transcribe the finished utterance into the prompt."""
    audio = st.session_state.get("dictation_audio")
    if audio is None:
        return
    controller = _controller()
    _sync_prompt()
    if controller.start_dictation():
        controller.finish_dictation(audio.getvalue(), filename=audio.name or "dictation.wav")
    st.session_state.prompt_text = controller.prompt


def _on_clear():
    _controller().clear()
    st.session_state.last_saved_path = None


def _on_saved():
    _controller().confirm_saved()


def show_notifications():
    for note in _controller().drain_notifications():
        message = f"**{note.title}**"
        if note.description:
            message += f" {note.description}"
        if note.level == NotificationLevel.ERROR:
            st.error(f"❌ {message}")
        elif note.level == NotificationLevel.SUCCESS:
            st.success(f"✅ {message}")
        else:
            st.info(f"ℹ️ {message}")


def main():
    """Main application entry point."""

    # Header
    st.markdown('<div class="main-header">⚡ Prompt2App</div>', unsafe_allow_html=True)
    st.markdown(
        '<div class="sub-header">Describe your app, and let AI craft the HTML preview for you.</div>',
        unsafe_allow_html=True
    )

    settings = st.session_state.settings

    # Sidebar configuration
    with st.sidebar:
        st.header("⚙️ Configuration")

        st.subheader("LLM Provider")
        providers = list(MODEL_OPTIONS)
        provider = st.selectbox(
            "Provider",
            providers,
            index=providers.index(settings.provider) if settings.provider in providers else 0,
            help="Select the LLM provider for generation"
        )

        model_options = list(MODEL_OPTIONS[provider])
        default_model = settings.model_name if provider == settings.provider and settings.model_name else DEFAULT_MODELS[provider]
        if default_model not in model_options:
            model_options.insert(0, default_model)
        model_name = st.selectbox("Model", model_options, index=model_options.index(default_model))

        temperature = st.slider(
            "Temperature",
            min_value=0.0,
            max_value=1.0,
            value=float(settings.temperature),
            step=0.1,
            help="Lower = more deterministic, Higher = more creative"
        )

        max_tokens = st.number_input(
            "Max Tokens",
            min_value=1024,
            max_value=32768,
            value=int(settings.max_tokens),
            step=512
        )

        st.divider()

        st.subheader("Output")
        save_to_disk = st.checkbox(
            "Save each generated app to disk",
            value=False,
            help="Writes generated.html and generation_log.json per app"
        )
        output_dir = st.text_input(
            "Output Directory",
            value=str(settings.output_dir),
            help="Directory to save generated files"
        )

    controller = _controller()
    controller.generator = AppGenerator.from_settings(
        settings,
        provider=provider,
        model_name=model_name,
        temperature=temperature,
        max_tokens=int(max_tokens),
    )

    tab1, tab2 = st.tabs(["✨ Create", "ℹ️ About"])

    with tab1:
        create_tab(save_to_disk, output_dir)

    with tab2:
        about_tab()


def create_tab(save_to_disk: bool, output_dir: str):
    """Prompt input, actions, preview and code."""

    controller = _controller()
    busy = st.session_state.pending_action is not None

    st.header("Describe Your App")
    st.caption("Enter a natural language prompt (e.g., 'a daily planner with voice reminders' or 'a basic calculator').")

    st.text_area(
        "App description prompt",
        key="prompt_text",
        height=140,
        placeholder="e.g., A simple to-do list app with add, remove, and mark as complete features...",
        on_change=_sync_prompt,
        label_visibility="collapsed",
    )

    voice_col, create_col = st.columns([1, 3])

    with voice_col:
        if controller.dictation_available:
            st.audio_input(
                "🎙️ Use Voice",
                key="dictation_audio",
                on_change=_on_dictation,
                disabled=busy,
            )
        else:
            st.button("🎙️ Use Voice", disabled=True, use_container_width=True)
            st.markdown(f'<div class="voice-note">{controller.dictation_note}</div>', unsafe_allow_html=True)

    with create_col:
        st.button(
            "⚡ Create App",
            type="primary",
            use_container_width=True,
            disabled=busy or not controller.can_generate,
            on_click=_request,
            args=("generate",),
        )

    # Run the requested generation with the trigger already disabled
    if busy:
        action = st.session_state.pending_action
        with st.spinner("🔄 Generating your app preview, please wait... This might take a moment."):
            if action == "regenerate":
                document = controller.regenerate()
            else:
                document = controller.generate()
        st.session_state.pending_action = None
        st.session_state.last_saved_path = None

        if document is not None and save_to_disk:
            try:
                artifact_manager = ArtifactManager(Path(output_dir))
                html_path = artifact_manager.save_html(document.document_id, document.code)
                artifact_manager.save_generation_log(document)
                st.session_state.last_saved_path = str(html_path)
            except OSError as e:
                st.warning(f"⚠️ Could not save to {output_dir}: {e}")
        st.rerun()

    show_notifications()

    document = controller.document
    if document is None:
        return

    st.divider()

    action_col1, action_col2, action_col3 = st.columns(3)
    with action_col1:
        st.button(
            "🔄 Regenerate",
            use_container_width=True,
            disabled=not controller.can_generate,
            on_click=_request,
            args=("regenerate",),
        )
    with action_col2:
        st.button(
            "🧹 Clear",
            use_container_width=True,
            disabled=not controller.can_clear,
            on_click=_on_clear,
        )
    with action_col3:
        artifact = controller.save()
        if artifact is not None:
            st.download_button(
                label="⬇️ Save HTML",
                data=artifact.data,
                file_name=artifact.file_name,
                mime=artifact.mime,
                use_container_width=True,
                key="download_html",
                on_click=_on_saved,
            )

    if st.session_state.last_saved_path:
        st.info(f"📁 Saved to: {st.session_state.last_saved_path}")

    preview_tab, code_tab, details_tab = st.tabs(["👁️ Preview", "💻 Code", "📋 Details"])

    with preview_tab:
        st.subheader("Live Preview")
        st.caption("This is an interactive HTML preview of the generated application.")
        components.html(
            build_preview_frame(document.code, height=DEFAULT_PREVIEW_HEIGHT),
            height=DEFAULT_PREVIEW_HEIGHT + 20,
        )

    with code_tab:
        st.subheader("Generated HTML Code")
        st.caption("Review the AI-generated HTML for the preview. You can save it locally.")
        st.code(document.code, language="html", line_numbers=True)

    with details_tab:
        meta_col1, meta_col2, meta_col3 = st.columns(3)
        with meta_col1:
            st.metric("Title", document.title or "Untitled")
            st.metric("Model", document.model_name)
        with meta_col2:
            st.metric("Timestamp", document.generation_timestamp.strftime("%Y-%m-%d %H:%M:%S"))
            if document.prompt_tokens:
                st.metric("Prompt Tokens", f"{document.prompt_tokens:,}")
        with meta_col3:
            if document.completion_tokens:
                st.metric("Completion Tokens", f"{document.completion_tokens:,}")
            if document.total_tokens:
                st.metric("Total Tokens", f"{document.total_tokens:,}")


def about_tab():
    """About the project."""

    st.header("ℹ️ About Prompt2App")

    st.markdown("""
    ### Natural language in, working web app out

    1. **Describe**: type a prompt, or record it with the voice recorder
    2. **Generate**: the prompt is embedded in a fixed instruction template and sent to the LLM
    3. **Preview**: the returned HTML runs in a sandboxed frame (scripts allowed, no access to this page)
    4. **Save**: download the exact document as `prompt2app_preview.html`

    #### Technology Stack

    - **LangChain**: LLM access (OpenAI / Anthropic)
    - **OpenAI Whisper**: voice dictation
    - **Streamlit**: Web interface
    - **Python 3.10+**
    """)


if __name__ == "__main__":
    main()
