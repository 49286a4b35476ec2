"""Instruction templates sent to the model for improvement, questions and refinement."""

from __future__ import annotations

from collections.abc import Iterable

from prompt_refiner.models.prompt import SECTION_HEADERS

_SECTION_SKELETON = "\n".join(f"         # {h}\n         ..." for h in SECTION_HEADERS)

IMPROVE_TEMPLATE = """\
You are an Expert Prompt Engineer. Your goal is to take a vague prompt and rewrite it into a 'Golden Prompt' using the C-R-E-F Framework (Context, Role, Explicit Instructions, Format).

Input Prompt: "{idea}"

Instructions:
1. Analyze the intent of the input.
2. Diagnose missing variables (Context, Persona, Format).
3. Inject logical defaults for missing variables (e.g., if audience is missing, infer the most logical one).
4. Output the result in JSON format with exactly two keys: "improvedPrompt" and "explanation".
   - "improvedPrompt": A single string. The rewritten prompt MUST use the following Markdown structure with exact headers, in this order:
{skeleton}
   - "explanation": A "Why I Changed This" explanation card content (max 3 sentences).

Return ONLY raw JSON. Do not add any text before or after the JSON object."""

QUESTIONS_TEMPLATE = """\
You are an Expert Prompt Engineer.
Input Prompt: "{prompt}"

Your task is to identify 3 missing variables or ambiguities in the prompt that, if clarified, would significantly improve the output quality (e.g., Audience, Tone, Platform, Goal).

Output ONLY a JSON array of exactly 3 specific question strings. Nothing else.
Example: ["Who is the target audience?", "What is the desired tone?", "What platform is this for?"]"""

REFINE_TEMPLATE = """\
You are an Expert Prompt Engineer.
Original Prompt: "{prompt}"

User Clarifications:
{qa_pairs}

Instructions:
1. Rewrite the original prompt into a 'Golden Prompt' incorporating the user's clarifications.
2. Use the C-R-E-F Framework.
3. Output JSON with exactly two keys: "improvedPrompt" and "explanation".
   - "improvedPrompt": A single string. The rewritten prompt MUST use the following Markdown structure with exact headers, in this order:
{skeleton}
   - "explanation": Mention specifically which of the user's answers were used and how.

Return ONLY raw JSON. Do not add any text before or after the JSON object."""


def build_initial_improvement_instruction(raw_idea: str) -> str:
    return IMPROVE_TEMPLATE.format(idea=raw_idea, skeleton=_SECTION_SKELETON)


def build_clarifying_questions_instruction(current_prompt: str) -> str:
    return QUESTIONS_TEMPLATE.format(prompt=current_prompt)


def format_qa_pairs(qa_pairs: Iterable[tuple[str, str]]) -> str:
    """Render pairs as ``Q: ...`` / ``A: ...`` lines, one pair after another."""
    return "\n".join(f"Q: {q}\nA: {a}" for q, a in qa_pairs)


def build_refinement_instruction(
    original_prompt: str,
    qa_pairs: Iterable[tuple[str, str]],
) -> str:
    return REFINE_TEMPLATE.format(
        prompt=original_prompt,
        qa_pairs=format_qa_pairs(qa_pairs),
        skeleton=_SECTION_SKELETON,
    )
