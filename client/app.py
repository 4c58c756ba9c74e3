import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import streamlit as st

from radius.client.api import AgentApiClient
from radius.client.render import blocks_to_markdown, format_content, show_extras, speaker_label
from radius.client.session import SAMPLE_PROMPTS, ChatSession, ConversationMessage
from radius.settings import get_settings


def setup_client_logging(logs_dir: Path) -> logging.Logger:
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("radius.client")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    fh = RotatingFileHandler(logs_dir / "client.log", maxBytes=2_000_000, backupCount=3)
    fh.setFormatter(fmt)
    logger.addHandler(fh)
    return logger


settings = get_settings()
LOGGER = setup_client_logging(settings.log_dir)


@st.cache_resource
def get_api_client(base_url: str) -> AgentApiClient:
    LOGGER.info("Using chat API at %s", base_url)
    return AgentApiClient(base_url)


def render_message(message: ConversationMessage) -> None:
    avatar = "user" if message.role == "user" else "assistant"
    with st.chat_message(avatar):
        st.caption(speaker_label(message.role, settings.assistant_name))
        st.markdown(blocks_to_markdown(format_content(message.content)))

        if not show_extras(message):
            return
        if message.steps:
            with st.expander("Agent reasoning"):
                for step in message.steps:
                    st.markdown(f"**{step.title.upper()}**  \n{step.content}")
        if message.suggestions:
            st.caption("Follow-up ideas: " + " · ".join(message.suggestions))


def _on_send() -> None:
    st.session_state["chat"].begin(st.session_state.get("draft", ""))


def _on_prompt(prompt: str) -> None:
    session: ChatSession = st.session_state["chat"]
    session.select_prompt(prompt)
    st.session_state["draft"] = session.draft


st.set_page_config(page_title="Radius", page_icon="🧭", layout="centered")

if "chat" not in st.session_state:
    st.session_state["chat"] = ChatSession(assistant_name=settings.assistant_name)
chat: ChatSession = st.session_state["chat"]

st.caption("AGENTIC PROTOTYPE")
st.title("Meet your focused AI copilot")
st.write(
    "This lightweight agent analyses your prompt, decides which tools to use, and "
    "responds with clear next steps. Ask it to plan, reason, or compute. No API keys required."
)

for m in chat.messages:
    render_message(m)

thinking = st.empty()

with st.form("composer", clear_on_submit=True):
    st.text_area(
        f"Message {settings.assistant_name}",
        key="draft",
        placeholder="Ask for a plan, a calculation, or a creative brainstorm...",
        height=120,
        disabled=chat.pending,
    )
    st.form_submit_button(
        "Thinking..." if chat.pending else "Send",
        on_click=_on_send,
        disabled=chat.pending,
    )
    st.caption(
        f"{settings.assistant_name} picks tools automatically. "
        "Try combining tasks in one request."
    )

cols = st.columns(2)
for i, prompt in enumerate(SAMPLE_PROMPTS):
    cols[i % 2].button(
        prompt,
        key=f"sample-{i}",
        on_click=_on_prompt,
        args=(prompt,),
        disabled=chat.pending,
        use_container_width=True,
    )

if chat.pending:
    with thinking.container():
        with st.spinner("Thinking..."):
            chat.resolve(get_api_client(settings.api_base_url))
    st.rerun()
