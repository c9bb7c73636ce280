import json
from unittest.mock import MagicMock, patch

import httpx
import pytest
from openai import RateLimitError

from persona_quill.analyzers.fidelity import evaluate_fidelity
from persona_quill.errors import ProviderNotConfigured
from persona_quill.generation import generate_text, make_client
from persona_quill.utils import llm_call_with_retry

REPORT = {
    "style_match": {"score": 82, "explanation": "Short punchy sentences."},
    "tone_consistency": {"score": 75, "explanation": "Upbeat."},
    "vocabulary_match": {"score": 70, "explanation": "Same jargon."},
    "structure_match": {"score": 60, "explanation": "Missing bullets."},
    "overall_score": 72,
    "strengths": ["voice"],
    "improvements": ["structure"],
    "persona_fidelity": "Mostly convincing.",
    "recommendations": "Add bullet points.",
}


def _rate_limit_error() -> RateLimitError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return RateLimitError("slow down", response=httpx.Response(429, request=request), body=None)


def test_generate_text_returns_content_unmodified(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    mock_client = MagicMock()
    mock_client.chat.completions.create.return_value.choices[0].message.content = "  Hello **world**\n"
    with patch("persona_quill.generation.OpenAI", return_value=mock_client):
        text = generate_text("Write a post", temperature=0.3)
    assert text == "  Hello **world**\n"
    kwargs = mock_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["temperature"] == 0.3
    assert kwargs["messages"] == [{"role": "user", "content": "Write a post"}]


def test_groq_provider_uses_its_base_url(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
    with patch("persona_quill.generation.OpenAI") as mock_openai:
        _, spec = make_client("groq")
    mock_openai.assert_called_once_with(api_key="gsk-test", base_url="https://api.groq.com/openai/v1")
    assert spec.default_model == "llama-3.3-70b-versatile"


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ProviderNotConfigured):
        generate_text("prompt")


def test_unknown_provider():
    with pytest.raises(ProviderNotConfigured):
        make_client("acme", api_key="x")


def test_retry_on_rate_limit():
    fn = MagicMock(side_effect=[_rate_limit_error(), "ok"])
    with patch("persona_quill.utils.retry.time.sleep") as sleep:
        assert llm_call_with_retry(fn, 1, max_retries=3, base_delay=2.0, flag=True) == "ok"
    assert fn.call_count == 2
    fn.assert_called_with(1, flag=True)
    sleep.assert_called_once_with(2.0)


def test_retry_gives_up():
    fn = MagicMock(side_effect=_rate_limit_error())
    with patch("persona_quill.utils.retry.time.sleep"):
        with pytest.raises(RateLimitError):
            llm_call_with_retry(fn, max_retries=2)
    assert fn.call_count == 2


def test_retry_does_not_catch_other_errors():
    fn = MagicMock(side_effect=ValueError("boom"))
    with pytest.raises(ValueError):
        llm_call_with_retry(fn)
    assert fn.call_count == 1


def test_evaluate_fidelity(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    mock_client = MagicMock()
    mock_client.chat.completions.create.return_value.choices[0].message.content = json.dumps(REPORT)
    with patch("persona_quill.generation.OpenAI", return_value=mock_client):
        report = evaluate_fidelity("alice", "x" * 2500, "Generated post", criteria="Keep it short")
    assert report.overall_score == 72
    assert report.style_match.score == 82
    kwargs = mock_client.chat.completions.create.call_args.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    user = kwargs["messages"][1]["content"]
    assert "PERSONA: alice" in user
    assert "x" * 2000 + "..." in user
    assert "x" * 2001 not in user
    assert "SPECIFIC TEST CRITERIA: Keep it short" in user
