"""Thin client for the external text-generation step.

The prompt goes in, the model's text comes out unmodified. Providers are
OpenAI-compatible chat endpoints distinguished only by base URL and key.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from openai import OpenAI

from persona_quill.errors import ProviderNotConfigured
from persona_quill.utils import llm_call_with_retry

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Provider:
    key_env: str
    default_model: str
    base_url: Optional[str] = None


PROVIDERS: dict[str, Provider] = {
    "openai": Provider(key_env="OPENAI_API_KEY", default_model="gpt-4o"),
    "groq": Provider(
        key_env="GROQ_API_KEY",
        default_model="llama-3.3-70b-versatile",
        base_url="https://api.groq.com/openai/v1",
    ),
}


def make_client(provider: str = "openai", api_key: Optional[str] = None) -> tuple[OpenAI, Provider]:
    spec = PROVIDERS.get(provider)
    if spec is None:
        raise ProviderNotConfigured(f"unknown provider {provider!r}; expected one of {', '.join(PROVIDERS)}")
    key = api_key or os.getenv(spec.key_env)
    if not key:
        raise ProviderNotConfigured(f"{spec.key_env} is not set")
    return OpenAI(api_key=key, base_url=spec.base_url), spec


def generate_text(
    prompt: str,
    *,
    provider: str = "openai",
    model: Optional[str] = None,
    temperature: float = 0.7,
    api_key: Optional[str] = None,
    max_retries: int = 4,
) -> str:
    client, spec = make_client(provider, api_key)
    model = model or spec.default_model
    _log.info("generating with %s/%s (prompt %d chars, temperature %.1f)", provider, model, len(prompt), temperature)
    response = llm_call_with_retry(
        client.chat.completions.create,
        max_retries=max_retries,
        model=model,
        temperature=temperature,
        messages=[{"role": "user", "content": prompt}],
    )
    return response.choices[0].message.content or ""
