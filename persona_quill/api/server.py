"""FastAPI server exposing persona analysis, storage and prompt synthesis."""
import asyncio
import json
import logging
import os
from typing import AsyncGenerator, Optional

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sse_starlette.sse import EventSourceResponse

from persona_quill import blender
from persona_quill.analyzers.fidelity import evaluate_fidelity
from persona_quill.analyzers.profile import ProfileBuilder
from persona_quill.analyzers.style_extractor import extract
from persona_quill.config import Settings, configure_logging
from persona_quill.errors import (
    InvalidBackup,
    InvalidWeight,
    MissingContent,
    NameReserved,
    PersonaNotFound,
    PersonaQuillError,
    ProviderNotConfigured,
    UnknownPlatform,
)
from persona_quill.generation import PROVIDERS, generate_text
from persona_quill.models import (
    ContentKind,
    ContentType,
    ExtractedLink,
    PersonaProfile,
    StyleMetrics,
    SynthesisRequest,
    WeightedPersonaRef,
)
from persona_quill.prompts.synthesizer import synthesize, temperature_for
from persona_quill.store import PersonaStore, make_store

_log = logging.getLogger(__name__)

settings = Settings.from_env()

app = FastAPI(title="persona-quill API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# ── Store ────────────────────────────────────────────────────────────────────

_store: Optional[PersonaStore] = None
_builder = ProfileBuilder()


def get_store() -> PersonaStore:
    global _store
    if _store is None:
        _store = make_store(settings.persona_store, db_path=settings.db_path)
    return _store


@app.on_event("startup")
async def _startup() -> None:
    configure_logging(settings.log_level)
    if settings.persona_store == "sqlite":
        _log.info("[store] backend=sqlite  db=%s", settings.db_path)
    else:
        _log.info("[store] backend=%s", settings.persona_store)


# ── Errors ───────────────────────────────────────────────────────────────────

_STATUS = {
    InvalidWeight: 400,
    UnknownPlatform: 400,
    MissingContent: 400,
    InvalidBackup: 400,
    PersonaNotFound: 404,
    NameReserved: 409,
    ProviderNotConfigured: 503,
}


@app.exception_handler(PersonaQuillError)
async def _persona_error(request: Request, exc: PersonaQuillError) -> JSONResponse:
    status = _STATUS.get(type(exc), 400)
    return JSONResponse(status_code=status, content={"detail": str(exc), "error": type(exc).__name__})


def _fix_hint(exc: Exception, provider: Optional[str] = None) -> str:
    msg = str(exc)
    if isinstance(exc, ProviderNotConfigured) or "API_KEY" in msg:
        key_env = PROVIDERS.get(provider or settings.llm_provider, PROVIDERS["openai"]).key_env
        return f"Set {key_env} in your .env file"
    if isinstance(exc, PersonaNotFound):
        return "Train the persona first: POST /api/personas"
    if isinstance(exc, UnknownPlatform):
        return "Use one of: linkedin, twitter, discord, instagram, facebook, medium, devto, hashnode, reddit, youtube, tiktok"
    if "Connection" in msg:
        return "Check your network connection to the LLM provider"
    return ""


# ── Request models ───────────────────────────────────────────────────────────

class AnalyzeRequest(BaseModel):
    text: str


class CreatePersonaRequest(BaseModel):
    name: str
    text: str
    content_type: ContentType = "mixed"
    instructions: Optional[str] = None


class InstructionsRequest(BaseModel):
    instructions: Optional[str] = None


class PromptRequest(BaseModel):
    platform: Optional[str] = None
    kind: ContentKind = "post"
    title: str = ""
    body: str = ""
    keywords: list[str] = []
    source_link: Optional[str] = None
    include_source_link: bool = False
    extracted_links: list[ExtractedLink] = []
    personas: list[WeightedPersonaRef] = []
    post_type: Optional[str] = None
    normalize: bool = False


class GenerateRequest(PromptRequest):
    provider: Optional[str] = None
    model: Optional[str] = None


class FidelityRequest(BaseModel):
    generated: str = Field(min_length=1)
    criteria: Optional[str] = None


def _summary(profile: PersonaProfile) -> dict:
    return {
        "name": profile.name,
        "kind": profile.kind,
        "content_type": profile.content_type,
        "description": profile.description,
        "word_count": profile.metrics.word_count,
        "created_at": profile.created_at.isoformat(),
    }


async def _build_request(req: PromptRequest, store: PersonaStore) -> SynthesisRequest:
    blender.validate(req.personas, blend=False)
    refs = blender.normalize(req.personas) if req.normalize else req.personas
    personas = await blender.resolve(refs, store)
    return SynthesisRequest(
        platform=req.platform,
        kind=req.kind,
        title=req.title,
        body=req.body,
        keywords=req.keywords,
        source_link=req.source_link,
        include_source_link=req.include_source_link,
        extracted_links=req.extracted_links,
        personas=personas,
        post_type=req.post_type,
    )


# ── Endpoints ────────────────────────────────────────────────────────────────

@app.get("/api/health")
def health():
    """Check that the configured provider's API key is set."""
    provider = PROVIDERS.get(settings.llm_provider)
    if provider is None or not os.getenv(provider.key_env):
        key_env = provider.key_env if provider else "LLM_PROVIDER"
        raise HTTPException(status_code=503, detail=f"{key_env} not set")
    return {"status": "ok", "provider": settings.llm_provider, "store": settings.persona_store}


@app.post("/api/analyze", response_model=StyleMetrics)
def analyze(req: AnalyzeRequest):
    """Compute style metrics for raw text without storing anything."""
    return extract(req.text)


@app.get("/api/personas")
async def list_personas(store: PersonaStore = Depends(get_store)):
    return [_summary(p) for p in await store.list()]


@app.post("/api/personas", status_code=201)
async def create_persona(req: CreatePersonaRequest, store: PersonaStore = Depends(get_store)):
    """Train a persona from raw text and store it, replacing any persona of the same name."""
    if not req.text.strip():
        raise MissingContent("training text is required")
    profile = _builder.build(req.name, req.text, req.content_type)
    if req.instructions:
        profile = profile.model_copy(update={"special_instructions": req.instructions})
    saved = await store.save(profile)
    return saved.model_dump(mode="json")


@app.post("/api/personas/import", status_code=201)
async def import_persona(record: dict, store: PersonaStore = Depends(get_store)):
    """Restore a persona from an exported backup record; metrics are recomputed."""
    profile = await store.import_backup(record)
    return _summary(profile)


@app.get("/api/personas/{name}")
async def get_persona(name: str, store: PersonaStore = Depends(get_store)):
    profile = await store.get(name)
    if profile is None:
        raise PersonaNotFound(f"persona {name!r} not found")
    return profile.model_dump(mode="json")


@app.delete("/api/personas/{name}")
async def delete_persona(name: str, store: PersonaStore = Depends(get_store)):
    if not await store.remove(name):
        raise PersonaNotFound(f"persona {name!r} not found")
    return {"deleted": name.lower()}


@app.patch("/api/personas/{name}/instructions")
async def update_instructions(name: str, req: InstructionsRequest, store: PersonaStore = Depends(get_store)):
    profile = await store.update_instructions(name, req.instructions)
    return _summary(profile) | {"special_instructions": profile.special_instructions}


@app.get("/api/personas/{name}/export")
async def export_persona(name: str, store: PersonaStore = Depends(get_store)):
    return await store.export(name)


@app.post("/api/personas/{name}/fidelity")
async def persona_fidelity(name: str, req: FidelityRequest, store: PersonaStore = Depends(get_store)):
    """Ask the LLM how closely ``generated`` matches the persona's training text."""
    profile = await store.get(name)
    if profile is None:
        raise PersonaNotFound(f"persona {name!r} not found")
    report = await asyncio.to_thread(
        evaluate_fidelity,
        profile.name,
        profile.raw_training_text,
        req.generated,
        req.criteria,
        provider=settings.llm_provider,
        model=settings.llm_model,
    )
    return report.model_dump()


@app.post("/api/prompts")
async def render_prompt(req: PromptRequest, store: PersonaStore = Depends(get_store)):
    """Render the generation prompt for a request without calling the LLM."""
    request = await _build_request(req, store)
    return {"prompt": synthesize(request), "temperature": temperature_for(req.kind)}


@app.post("/api/generate")
async def generate(req: GenerateRequest, store: PersonaStore = Depends(get_store)):
    """Stream SSE events: progress stages, then the generated text or an error."""
    provider = req.provider or settings.llm_provider
    model = req.model or settings.llm_model

    async def _generate() -> AsyncGenerator[dict, None]:
        try:
            yield {
                "event": "progress",
                "data": json.dumps({"stage": "resolving", "message": "Loading personas…"}),
            }
            request = await _build_request(req, store)

            yield {
                "event": "progress",
                "data": json.dumps({"stage": "synthesizing", "message": "Building prompt…"}),
            }
            prompt = synthesize(request)
            temperature = temperature_for(req.kind)

            yield {
                "event": "progress",
                "data": json.dumps({"stage": "generating", "message": f"Generating with {provider}…"}),
            }
            text = await asyncio.to_thread(
                generate_text,
                prompt,
                provider=provider,
                model=model,
                temperature=temperature,
                max_retries=settings.llm_max_retries,
            )
            result = {
                "content": text,
                "prompt": prompt,
                "kind": req.kind,
                "platform": req.platform,
                "personas": [p.profile.name for p in request.personas],
            }
            yield {"event": "result", "data": json.dumps(result, ensure_ascii=False)}

        except Exception as exc:
            _log.exception("generation failed")
            yield {
                "event": "error",
                "data": json.dumps({"error": str(exc), "fix": _fix_hint(exc, provider)}),
            }

    return EventSourceResponse(_generate())
