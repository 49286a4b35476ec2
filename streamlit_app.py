"""Streamlit Web UI for prompt-refiner.

Two modes:
  A) Instant Polish   : paste a raw idea → Golden Prompt
  B) Alchemist Lab    : fill Task/Role/Context/Instructions/Format → Golden Prompt

Either result can go through the refinement loop: the model asks clarifying
questions, the user answers, and the prompt is regenerated.
"""

from __future__ import annotations

import asyncio
import logging
import os
import threading

logger = logging.getLogger(__name__)

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

# Streamlit Cloud: sync st.secrets → os.environ so backend clients can read them
for key in ("ANTHROPIC_API_KEY",):
    if key not in os.environ:
        try:
            os.environ[key] = st.secrets[key]
        except Exception:
            pass

from prompt_refiner.clients.llm_client import LLMClient
from prompt_refiner.config import load_config
from prompt_refiner.errors import MissingCredentialError, PromptRefinerError
from prompt_refiner.models.prompt import ImprovementRequest, StructuredFields
from prompt_refiner.pipeline.prompt_improver import PromptImprover

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Refine AI",
    page_icon=":sparkles:",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Runtime: one client and one event loop per process
# ---------------------------------------------------------------------------


@st.cache_resource
def _get_runtime() -> tuple[PromptImprover, asyncio.AbstractEventLoop]:
    config = load_config()
    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    improver = PromptImprover(
        llm,
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
    )
    # The async client must stay on a single loop across Streamlit reruns
    loop = asyncio.new_event_loop()
    threading.Thread(target=loop.run_forever, daemon=True, name="llm-loop").start()
    return improver, loop


def _run(coro):
    _, loop = _get_runtime()
    return asyncio.run_coroutine_threadsafe(coro, loop).result()


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

_DEFAULTS = {
    "improved_prompt": "",
    "explanation": "",
    "questions": [],
    "show_refine": False,
    "pending": None,  # action currently running; disables its trigger
    "error": None,
    "notice": None,
}
for _k, _v in _DEFAULTS.items():
    if _k not in st.session_state:
        st.session_state[_k] = _v


def _request(action: str) -> None:
    st.session_state.pending = action
    st.session_state.error = None
    st.session_state.notice = None


def _reset_refinement() -> None:
    st.session_state.show_refine = False
    st.session_state.questions = []
    for k in list(st.session_state.keys()):
        if isinstance(k, str) and k.startswith("answer_"):
            del st.session_state[k]
    st.session_state.pop("additional_instructions", None)


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

config = load_config()
max_chars = config.ui.max_input_chars

with st.sidebar:
    st.title("Refine AI")
    st.caption("Transmute vague ideas into magical prompts")

    mode = st.radio(
        "Mode",
        ["Instant Polish", "Alchemist Lab"],
        index=0,
        help="Instant: paste a raw idea. Alchemist: build from structured components.",
    )

    improver, _ = _get_runtime()
    if not improver.llm.has_credential:
        st.warning("ANTHROPIC_API_KEY is not set. Add it to .env or Streamlit secrets.")

# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

st.header("What do you want to create?")

if st.session_state.error:
    st.error(st.session_state.error)
if st.session_state.notice:
    st.success(st.session_state.notice)

if mode == "Instant Polish":
    idea = st.text_area(
        "Your idea",
        height=180,
        placeholder="e.g. I need a blog post about the future of AI in healthcare...",
        max_chars=max_chars,
    )
    request = ImprovementRequest(idea=idea)
else:
    col1, col2 = st.columns(2)
    with col1:
        task = st.text_input("Task", placeholder="What should the AI do?")
    with col2:
        role = st.text_input("Role", placeholder="Who is the AI acting as?")
    context = st.text_area("Context", placeholder="Background information, data, or constraints...", max_chars=max_chars)
    col3, col4 = st.columns(2)
    with col3:
        instructions = st.text_area("Specific Instructions", placeholder="Step-by-step requirements...")
    with col4:
        format_ = st.text_input("Format", placeholder="Table, Markdown, Code, etc.")
    request = ImprovementRequest(
        structured=StructuredFields(
            task=task, role=role, context=context, instructions=instructions, format=format_
        )
    )

busy = st.session_state.pending is not None
st.button(
    "Transmuting..." if st.session_state.pending == "generate" else "Transmute",
    type="primary",
    disabled=busy or request.is_empty,
    on_click=_request,
    args=("generate",),
)

if st.session_state.pending == "generate":
    try:
        with st.spinner("Transmuting..."):
            result = _run(improver.improve_prompt(request))
        if result is not None:
            st.session_state.improved_prompt = result.improved_prompt
            st.session_state.explanation = result.explanation
            _reset_refinement()
    except MissingCredentialError as e:
        st.session_state.error = str(e)
    except PromptRefinerError:
        logger.exception("Prompt generation failed")
        st.session_state.error = "Failed to generate prompt. Please try again."
    finally:
        st.session_state.pending = None
    st.rerun()

# ---------------------------------------------------------------------------
# Results (survive reruns; untouched when a later call fails)
# ---------------------------------------------------------------------------

if st.session_state.improved_prompt:
    st.divider()
    res_col, note_col = st.columns([2, 1])
    with res_col:
        st.subheader("Golden Prompt")
        st.code(st.session_state.improved_prompt, language="markdown")
        st.download_button(
            label="Download .md",
            data=st.session_state.improved_prompt.encode("utf-8"),
            file_name="golden_prompt.md",
            mime="text/markdown",
            type="secondary",
        )
    with note_col:
        st.subheader("Alchemist's Notes")
        st.info(st.session_state.explanation)

    if not st.session_state.show_refine:
        st.button(
            "Refine Further",
            disabled=busy,
            on_click=_request,
            args=("questions",),
        )

if st.session_state.pending == "questions":
    try:
        with st.spinner("Thinking of questions..."):
            qs = _run(improver.get_clarifying_questions(st.session_state.improved_prompt))
        st.session_state.questions = qs
        st.session_state.show_refine = True
    except MissingCredentialError as e:
        st.session_state.error = str(e)
    finally:
        st.session_state.pending = None
    st.rerun()

# ---------------------------------------------------------------------------
# Refinement loop
# ---------------------------------------------------------------------------

if st.session_state.show_refine:
    st.divider()
    st.subheader("Refinement Loop")
    st.caption("The AI has a few clarifying questions to perfect your prompt.")

    for i, q in enumerate(st.session_state.questions):
        st.text_input(q, key=f"answer_{i}")
    st.text_area(
        "Additional instructions (optional)",
        key="additional_instructions",
        placeholder="Anything else the prompt should cover...",
    )

    st.button(
        "Refining..." if st.session_state.pending == "refine" else "Refine Prompt",
        type="primary",
        disabled=busy,
        on_click=_request,
        args=("refine",),
    )

if st.session_state.pending == "refine":
    qs = list(st.session_state.questions)
    answers = [st.session_state.get(f"answer_{i}", "") for i in range(len(qs))]
    try:
        with st.spinner("Refining..."):
            result = _run(
                improver.refine_prompt(
                    st.session_state.improved_prompt,
                    qs,
                    answers,
                    st.session_state.get("additional_instructions", ""),
                )
            )
        st.session_state.improved_prompt = result.improved_prompt
        st.session_state.explanation = result.explanation
        _reset_refinement()
        st.session_state.notice = "Prompt refined successfully!"
    except MissingCredentialError as e:
        st.session_state.error = str(e)
    except PromptRefinerError:
        logger.exception("Prompt refinement failed")
        st.session_state.error = "Refinement failed. Please try again."
    finally:
        st.session_state.pending = None
    st.rerun()
