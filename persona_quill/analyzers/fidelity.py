"""LLM-judged persona fidelity: how closely generated text matches a persona's samples."""
import json
from typing import Optional

from persona_quill.generation import make_client
from persona_quill.models import FidelityReport
from persona_quill.utils import llm_call_with_retry

SYSTEM_PROMPT = """
You are an expert content analyst specializing in writing style comparison.
You receive a persona name, a sample of that persona's original writing and a
piece of generated content. Judge how well the generated content matches the
writing style and persona characteristics of the original.

Return a JSON object with these fields:
- style_match: {score: 0-100, explanation}
- tone_consistency: {score: 0-100, explanation}
- vocabulary_match: {score: 0-100, explanation}
- structure_match: {score: 0-100, explanation}
- overall_score: 0-100
- strengths: list of strings
- improvements: list of strings
- persona_fidelity: assessment of how well it captures the persona
- recommendations: specific recommendations for improvement

Focus on voice, vocabulary and language patterns, structure and formatting,
engagement style, and domain expertise. Quote the generated content to
support your analysis.
Return only valid JSON, no markdown formatting.
"""

_SAMPLE_CHARS = 2000


def evaluate_fidelity(
    persona_name: str,
    original: str,
    generated: str,
    criteria: Optional[str] = None,
    *,
    provider: str = "openai",
    model: Optional[str] = None,
) -> FidelityReport:
    client, spec = make_client(provider)

    sample = original[:_SAMPLE_CHARS] + ("..." if len(original) > _SAMPLE_CHARS else "")
    user_content = (
        f"PERSONA: {persona_name}\n\n"
        f"ORIGINAL CONTENT SAMPLE:\n{sample}\n\n"
        f"GENERATED CONTENT TO EVALUATE:\n{generated}"
    )
    if criteria:
        user_content += f"\n\nSPECIFIC TEST CRITERIA: {criteria}"

    response = llm_call_with_retry(
        client.chat.completions.create,
        model=model or spec.default_model,
        temperature=0.3,
        response_format={"type": "json_object"},
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_content},
        ],
    )
    data = json.loads(response.choices[0].message.content)
    return FidelityReport.model_validate(data)
