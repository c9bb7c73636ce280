from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ContentType = Literal["posts", "blogs", "mixed"]
ContentKind = Literal["post", "blog", "summary", "diagram", "comments"]
PersonaKind = Literal["trained", "built-in", "rss-author"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── Style metrics ────────────────────────────────────────────────────────────

class SentimentDistribution(_Frozen):
    positive: float = 0.0
    neutral: float = 100.0
    negative: float = 0.0


class SentimentProfile(_Frozen):
    dominant: Literal["positive", "neutral", "negative", "mixed"] = "neutral"
    distribution: SentimentDistribution = SentimentDistribution()
    emotional_range: tuple[str, ...] = ("neutral",)


class Readability(_Frozen):
    flesch_kincaid_grade: float
    avg_words_per_sentence: float
    avg_syllables_per_word: float
    complexity_level: Literal["elementary", "middle", "high-school", "college", "graduate"]


class SemanticCluster(_Frozen):
    topic: str
    matched_keywords: tuple[str, ...]
    frequency: int
    sentiment_label: str


class StylisticFingerprint(_Frozen):
    punctuation_patterns: tuple[str, ...] = ()
    capitalization_style: str = "standard"
    emphasis_markers: tuple[str, ...] = ()
    transition_words: tuple[str, ...] = ()


class TemporalPatterns(_Frozen):
    time_references: tuple[str, ...] = ()
    urgency_indicators: tuple[str, ...] = ()
    future_focus_score: float = 0.0  # percentage of words, 1 decimal


class StyleMetrics(_Frozen):
    word_count: int
    avg_post_length: int                 # words per paragraph
    common_topics: tuple[str, ...]
    key_phrases: tuple[str, ...]
    writing_complexity: Literal["simple", "moderate", "complex"]
    tone: tuple[str, ...]
    structure: tuple[str, ...]
    vocabulary: tuple[str, ...]
    sentence_length: Literal["short", "medium", "long", "mixed"]
    engagement: tuple[str, ...]
    sentiment: SentimentProfile
    readability: Readability
    semantic_clusters: tuple[SemanticCluster, ...]
    stylistic_fingerprint: StylisticFingerprint
    temporal_patterns: TemporalPatterns


# ── Personas ─────────────────────────────────────────────────────────────────

class PersonaOverrides(_Frozen):
    """Hand-authored metadata merged into a profile on top of computed metrics."""
    description: Optional[str] = None
    domain_tags: tuple[str, ...] = ()
    special_instructions: Optional[str] = None


class PersonaProfile(_Frozen):
    name: str
    raw_training_text: str
    metrics: StyleMetrics
    description: Optional[str] = None
    domain_tags: tuple[str, ...] = ()
    special_instructions: Optional[str] = None
    content_type: ContentType = "mixed"
    kind: PersonaKind = "trained"
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def is_built_in(self) -> bool:
        return self.kind == "built-in"


class WeightedPersonaRef(BaseModel):
    """Non-owning reference into the store plus a relative blend weight."""
    name: str
    weight: float = 1.0


class PersonaWeight(BaseModel):
    """A persona reference resolved against the store, ready for synthesis."""
    profile: PersonaProfile
    weight: float = 1.0


class PersonaBackup(BaseModel):
    """Serialized persona backup; camelCase on the wire."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    raw_content: str = Field(alias="rawContent")
    instructions: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")
    content_type: ContentType = Field("mixed", alias="contentType")
    version: str = "1.0"


# ── Platforms & synthesis ────────────────────────────────────────────────────

class PlatformSpec(_Frozen):
    id: str
    display_format: str
    supports_markdown_links: bool
    constraints: tuple[str, ...]


class ExtractedLink(_Frozen):
    url: str
    text: str = ""


class SynthesisRequest(BaseModel):
    platform: Optional[str] = None
    kind: ContentKind = "post"
    title: str = ""
    body: str = ""
    keywords: list[str] = []
    source_link: Optional[str] = None
    include_source_link: bool = False
    extracted_links: list[ExtractedLink] = []
    personas: list[PersonaWeight] = []
    post_type: Optional[str] = None  # devrel, technical, tutorial, ... when no persona is used


class RSSArticle(BaseModel):
    title: str
    content: str
    author: str = ""
    link: str = ""


# ── Fidelity ─────────────────────────────────────────────────────────────────

class FidelityScore(BaseModel):
    score: int
    explanation: str


class FidelityReport(BaseModel):
    style_match: FidelityScore
    tone_consistency: FidelityScore
    vocabulary_match: FidelityScore
    structure_match: FidelityScore
    overall_score: int
    strengths: list[str]
    improvements: list[str]
    persona_fidelity: str
    recommendations: str
