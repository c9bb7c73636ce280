"""Tests for prompt synthesis across platforms, personas and content kinds."""
import pytest

from persona_quill.analyzers.profile import ProfileBuilder, enrich_built_in
from persona_quill.errors import InvalidWeight, MissingContent, UnknownPlatform
from persona_quill.models import ExtractedLink, PersonaWeight, SynthesisRequest
from persona_quill.platforms.specs import get_platform
from persona_quill.prompts.synthesizer import PromptSynthesizer, style_digest, synthesize, temperature_for

builder = ProfileBuilder()
ALICE = builder.build("alice", "Hey folks! Shipping is fun. Will you try it?", "posts")
BOB = builder.build("bob", "Furthermore, the methodology is empirical. Therefore we measure results.", "blogs")
BAP = builder.build("bap", "Community first, always.", overrides=enrich_built_in("bap"), kind="built-in")

ARTICLE = dict(title="New release", body="We released version 2 with faster builds and a new CLI.")


def request(**kwargs) -> SynthesisRequest:
    return SynthesisRequest(**{**ARTICLE, **kwargs})


# ── Links ────────────────────────────────────────────────────────────────────

def test_linkedin_renders_bare_url():
    prompt = synthesize(request(
        platform="linkedin",
        extracted_links=[ExtractedLink(url="https://x.com", text="source")],
    ))
    assert "https://x.com" in prompt
    assert "[source](https://x.com)" not in prompt
    assert "Include links as plain URLs without markdown formatting" in prompt


def test_markdown_platform_renders_links():
    prompt = synthesize(request(
        platform="medium",
        extracted_links=[ExtractedLink(url="https://x.com", text="source")],
    ))
    assert "[source](https://x.com)" in prompt
    assert "Format links using markdown: [text](url)" in prompt


def test_source_clause_only_when_requested():
    without = synthesize(request(platform="twitter", source_link="https://blog.example/post"))
    with_ = synthesize(request(platform="twitter", source_link="https://blog.example/post", include_source_link=True))
    assert "https://blog.example/post" not in without
    assert "Include the source article link (https://blog.example/post)" in with_


def test_keywords_rendered():
    prompt = synthesize(request(platform="linkedin", keywords=["devtools", " ", "cli"]))
    assert "Include these keywords naturally: devtools, cli." in prompt
    assert prompt.count("Include these keywords naturally") == 1
    assert "- Include these keywords naturally: devtools, cli." in prompt.split("FORMATTING RULES:")[1]


def test_platform_guidelines_listed_verbatim():
    prompt = synthesize(request(platform="tiktok"))
    assert "- Make it shareable" in prompt
    assert "Make it shareable" in get_platform("tiktok").constraints
    assert "Encourage engagement" in get_platform("hashnode").constraints
    assert "Create engaging post content" in get_platform("reddit").constraints
    assert "Format for developer audience" in get_platform("devto").constraints


# ── Templates ────────────────────────────────────────────────────────────────

def test_standard_prompt_without_personas():
    prompt = synthesize(request(platform="linkedin"))
    assert prompt.startswith("Create a LinkedIn post based on this article.")
    assert 'Article: "New release"' in prompt
    assert "FORMATTING RULES:" in prompt
    assert "Do not use emojis." in prompt


def test_post_type_prompt():
    prompt = synthesize(request(platform="linkedin", post_type="Tutorial"))
    assert "Educational tutorial style Characteristics:" in prompt
    assert "Style-Specific Requirements:" in prompt


def test_unknown_post_type_falls_back_to_standard():
    prompt = synthesize(request(platform="linkedin", post_type="haiku"))
    assert "Make it haiku style." in prompt


def test_single_persona_prompt():
    prompt = synthesize(request(platform="discord", personas=[PersonaWeight(profile=BAP)]))
    assert "PERSONA PROFILE: bap" in prompt
    assert "Description: Developer Advocate" in prompt
    assert "STYLE ANALYSIS:" in prompt
    assert style_digest(BAP.metrics) in prompt
    assert "Community first, always." in prompt


def test_blend_orders_personas_as_supplied():
    prompt = synthesize(request(
        platform="linkedin",
        personas=[PersonaWeight(profile=ALICE, weight=0.7), PersonaWeight(profile=BOB, weight=0.3)],
    ))
    a = prompt.index("### alice's Writing Style (70% influence):")
    b = prompt.index("### bob's Writing Style (30% influence):")
    assert a < b
    assert "70% of the content should reflect alice's voice and writing style" in prompt
    assert "30% of the content should reflect bob's voice and writing style" in prompt


def test_blend_does_not_sort_by_weight():
    prompt = synthesize(request(
        platform="linkedin",
        personas=[PersonaWeight(profile=BOB, weight=0.2), PersonaWeight(profile=ALICE, weight=0.8)],
    ))
    assert prompt.index("bob's Writing Style (20% influence)") < prompt.index("alice's Writing Style (80% influence)")


def test_blend_weights_are_not_normalized():
    prompt = synthesize(request(
        platform="linkedin",
        personas=[PersonaWeight(profile=ALICE, weight=2), PersonaWeight(profile=BOB, weight=1)],
    ))
    assert "(200% influence)" in prompt
    assert "(100% influence)" in prompt


def test_blend_custom_instructions():
    alice = ALICE.model_copy(update={"special_instructions": "Keep it light."})
    prompt = synthesize(request(
        platform="linkedin",
        personas=[PersonaWeight(profile=alice, weight=0.5), PersonaWeight(profile=BOB, weight=0.5)],
    ))
    assert "### Custom Instructions for alice (50% influence):\nKeep it light." in prompt
    assert "Custom Instructions for bob" not in prompt


def test_synthesis_is_deterministic():
    req = request(
        platform="reddit",
        keywords=["a", "b"],
        extracted_links=[ExtractedLink(url="https://x.com")],
        personas=[PersonaWeight(profile=ALICE, weight=0.6), PersonaWeight(profile=BOB, weight=0.4)],
    )
    assert synthesize(req) == synthesize(req.model_copy())
    assert PromptSynthesizer().synthesize(req) == synthesize(req)


def test_blog_kind_adds_long_form_clause():
    prompt = synthesize(request(platform="medium", kind="blog"))
    assert "long-form blog article" in prompt


def test_summary_ignores_platform():
    prompt = synthesize(request(kind="summary", keywords=["speed"], source_link="https://s.example"))
    assert prompt.startswith("Summarize the following article in 2-3 concise paragraphs.")
    assert "Include these keywords naturally: speed." in prompt
    assert "Source: https://s.example" in prompt


def test_diagram_template():
    prompt = synthesize(request(kind="diagram", platform="nowhere"))
    assert "Mermaid" in prompt
    assert "New release" in prompt
    assert temperature_for("diagram") == 0.3
    assert temperature_for("post") == 0.7


def test_comments_prompt_includes_persona_context():
    prompt = synthesize(request(kind="comments", personas=[PersonaWeight(profile=BAP)]))
    assert "PERSONA CONTEXT:" in prompt
    assert "in the style of bap" in prompt
    assert 'Title: "New release"' in prompt


# ── Errors ───────────────────────────────────────────────────────────────────

def test_unknown_platform():
    with pytest.raises(UnknownPlatform):
        synthesize(request(platform="myspace"))


def test_missing_platform():
    with pytest.raises(UnknownPlatform):
        synthesize(request())


@pytest.mark.parametrize("kind", ["post", "blog", "summary", "comments"])
def test_empty_body(kind):
    with pytest.raises(MissingContent):
        synthesize(request(platform="linkedin", kind=kind, body="  "))


def test_empty_diagram():
    with pytest.raises(MissingContent):
        synthesize(SynthesisRequest(kind="diagram"))


def test_invalid_weight():
    with pytest.raises(InvalidWeight):
        synthesize(request(platform="linkedin", personas=[PersonaWeight(profile=ALICE, weight=0)]))
