"""Deterministic prompt rendering for the external text-generation API.

The rendered string is the only reproducible artifact of a generation run, so
identical requests (persona order included) must yield byte-identical text:
nothing here reads the clock, the environment, or unordered collections.
"""
from typing import Optional

from persona_quill import blender
from persona_quill.errors import MissingContent
from persona_quill.models import (
    PersonaProfile,
    PersonaWeight,
    PlatformSpec,
    StyleMetrics,
    SynthesisRequest,
)
from persona_quill.platforms.specs import PLATFORMS, get_platform
from persona_quill.prompts.templates import (
    BLEND_QUALITIES,
    COMMENT_REQUIREMENTS,
    COMMENTS_INTRO,
    DIAGRAM_TEMPLATE,
    POST_TYPE_STYLES,
    SUMMARY_TEMPLATE,
)

_COMMENT_SAMPLE_CHARS = 1500
_COMMENT_ARTICLE_CHARS = 2000


def temperature_for(kind: str) -> float:
    return 0.3 if kind == "diagram" else 0.7


def _joined(values, empty: str = "none detected") -> str:
    return ", ".join(values) if values else empty


def _bullets(lines) -> str:
    return "\n".join(f"- {line}" for line in lines)


def _sections(*parts: Optional[str]) -> str:
    return "\n\n".join(p for p in parts if p)


def _sentence(*clauses: str) -> str:
    return " ".join(c for c in clauses if c)


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def _percent(weight: float) -> int:
    return round(weight * 100)


def style_digest(metrics: StyleMetrics) -> str:
    """Human-readable bullet digest covering every metrics field."""
    sentiment = metrics.sentiment
    dist = sentiment.distribution
    readability = metrics.readability
    fingerprint = metrics.stylistic_fingerprint
    temporal = metrics.temporal_patterns
    clusters = [
        f"{c.topic} ({c.sentiment_label}, {c.frequency} mentions: {', '.join(c.matched_keywords)})"
        for c in metrics.semantic_clusters
    ]
    return _bullets([
        f"Word count: {metrics.word_count} (about {metrics.avg_post_length} words per paragraph)",
        f"Common topics: {_joined(metrics.common_topics)}",
        f"Key phrases: {_joined(metrics.key_phrases)}",
        f"Writing complexity: {metrics.writing_complexity}",
        f"Tone: {_joined(metrics.tone)}",
        f"Structure: {_joined(metrics.structure)}",
        f"Vocabulary: {_joined(metrics.vocabulary, 'general')}",
        f"Sentence length: {metrics.sentence_length}",
        f"Engagement: {_joined(metrics.engagement)}",
        (
            f"Sentiment: {sentiment.dominant} ({dist.positive}% positive, {dist.neutral}% neutral, "
            f"{dist.negative}% negative); emotional range: {_joined(sentiment.emotional_range)}"
        ),
        (
            f"Readability: {readability.complexity_level} level (Flesch-Kincaid grade "
            f"{readability.flesch_kincaid_grade}, {readability.avg_words_per_sentence} words per sentence, "
            f"{readability.avg_syllables_per_word} syllables per word)"
        ),
        f"Semantic themes: {_joined(clusters)}",
        (
            f"Stylistic fingerprint: punctuation {_joined(fingerprint.punctuation_patterns)}; "
            f"capitalization {fingerprint.capitalization_style}; "
            f"emphasis {_joined(fingerprint.emphasis_markers)}; "
            f"transitions {_joined(fingerprint.transition_words)}"
        ),
        (
            f"Temporal patterns: time references {_joined(temporal.time_references)}; "
            f"urgency {_joined(temporal.urgency_indicators)}; "
            f"future focus {temporal.future_focus_score}%"
        ),
    ])


def _compact_digest(metrics: StyleMetrics) -> str:
    return (
        f"Style summary: tone {_joined(metrics.tone)}; vocabulary {_joined(metrics.vocabulary, 'general')}; "
        f"sentence length {metrics.sentence_length}; sentiment {metrics.sentiment.dominant}; "
        f"readability {metrics.readability.complexity_level}"
    )


class PromptSynthesizer:
    def __init__(self, platforms: dict[str, PlatformSpec] = PLATFORMS) -> None:
        self.platforms = platforms

    def synthesize(self, request: SynthesisRequest) -> str:
        if request.kind == "diagram":
            if not (request.title.strip() or request.body.strip()):
                raise MissingContent("diagram needs a title or body")
            return DIAGRAM_TEMPLATE.format(title=request.title, body=request.body)

        if request.kind == "summary":
            self._require_body(request)
            keywords = self._keyword_clause(request)
            return SUMMARY_TEMPLATE.format(
                keywords=f" {keywords}" if keywords else "",
                title=request.title,
                body=request.body,
                source=request.source_link or "N/A",
            )

        blender.validate(request.personas, blend=False)
        if request.kind == "comments":
            self._require_body(request)
            return self._comments(request)

        platform = get_platform(request.platform, self.platforms)
        self._require_body(request)
        if not request.personas:
            style = POST_TYPE_STYLES.get((request.post_type or "").lower())
            if style is not None:
                return self._post_type(platform, request)
            return self._standard(platform, request)
        if len(request.personas) == 1:
            return self._persona(platform, request, request.personas[0].profile)
        return self._blend(platform, request, request.personas)

    # ── Shared clauses ───────────────────────────────────────────────────────

    @staticmethod
    def _require_body(request: SynthesisRequest) -> None:
        if not request.body.strip():
            raise MissingContent(f"body text is required for {request.kind} prompts")

    @staticmethod
    def _keyword_clause(request: SynthesisRequest) -> str:
        keywords = [k.strip() for k in request.keywords if k.strip()]
        return f"Include these keywords naturally: {', '.join(keywords)}." if keywords else ""

    @staticmethod
    def _links_clause(platform: PlatformSpec, request: SynthesisRequest) -> str:
        if not request.extracted_links:
            return ""
        if platform.supports_markdown_links:
            rendered = [f"[{link.text or link.url}]({link.url})" for link in request.extracted_links]
        else:
            rendered = [link.url for link in request.extracted_links]
        return f"Include these relevant links from the article: {', '.join(rendered)}"

    @staticmethod
    def _source_clause(request: SynthesisRequest) -> str:
        if request.include_source_link and request.source_link:
            return f"Include the source article link ({request.source_link}) for proper attribution."
        return ""

    @staticmethod
    def _blog_clause(request: SynthesisRequest) -> str:
        if request.kind == "blog":
            return "Write it as a long-form blog article with clear section headings."
        return ""

    def _task_extras(self, platform: PlatformSpec, request: SynthesisRequest) -> list[str]:
        return [
            self._blog_clause(request),
            self._links_clause(platform, request),
            self._source_clause(request),
        ]

    @staticmethod
    def _article(request: SynthesisRequest) -> str:
        return f'Article: "{request.title}"\nContent: {request.body}'

    def _formatting_rules(self, platform: PlatformSpec, request: SynthesisRequest) -> str:
        rules = [
            "Do not use emojis.",
            "Mention links inline where they are relevant; never collect them in a separate list.",
            "Format links using markdown: [text](url)" if platform.supports_markdown_links
            else "Include links as plain URLs without markdown formatting",
        ]
        keywords = self._keyword_clause(request)
        if keywords:
            rules.append(keywords)
        return "FORMATTING RULES:\n" + _bullets(rules)

    # ── Templates ────────────────────────────────────────────────────────────

    def _standard(self, platform: PlatformSpec, request: SynthesisRequest) -> str:
        style = f"Make it {request.post_type} style." if request.post_type else ""
        return _sections(
            _sentence(f"Create a {platform.display_format} based on this article.", style,
                      *self._task_extras(platform, request)),
            "Guidelines:\n" + _bullets(platform.constraints),
            self._article(request),
            self._formatting_rules(platform, request),
        )

    def _post_type(self, platform: PlatformSpec, request: SynthesisRequest) -> str:
        style = POST_TYPE_STYLES[request.post_type.lower()]
        return _sections(
            _sentence(f"Create a {platform.display_format} in {style.voice} based on this article.",
                      *self._task_extras(platform, request)),
            f"{style.voice} Characteristics:\n" + _bullets(style.characteristics),
            f"Platform Guidelines for {platform.display_format}:\n" + _bullets(platform.constraints),
            "Style-Specific Requirements:\n" + _bullets([style.engagement_style]),
            self._article(request),
            self._formatting_rules(platform, request),
        )

    def _persona(self, platform: PlatformSpec, request: SynthesisRequest, profile: PersonaProfile) -> str:
        fmt = platform.display_format
        profile_lines = [f"PERSONA PROFILE: {profile.name}"]
        if profile.description:
            profile_lines.append(f"Description: {profile.description}")
        if profile.domain_tags:
            profile_lines.append(f"Domain expertise: {', '.join(profile.domain_tags)}")
        if profile.special_instructions:
            profile_lines.append(f"Special instructions: {profile.special_instructions}")

        return _sections(
            "You are an expert content creator. Study the writing examples below and learn the author's "
            f"unique voice, tone, style, and language patterns. Then create a {fmt} in that exact same style.",
            "\n".join(profile_lines),
            "STYLE ANALYSIS:\n" + style_digest(profile.metrics),
            "WRITING EXAMPLES TO LEARN FROM:\n" + profile.raw_training_text,
            f"PLATFORM REQUIREMENTS for {fmt}:\n" + _bullets(platform.constraints),
            "TASK:\n" + _sentence(
                f"Create a {fmt} about the article below, written in the exact same style as the examples above.",
                *self._task_extras(platform, request),
            ),
            self._article(request),
            self._formatting_rules(platform, request),
            "Write as if you are the same person who wrote the examples above, but adapt your natural "
            f"style to fit the {fmt} requirements.",
        )

    def _blend(self, platform: PlatformSpec, request: SynthesisRequest, personas: list[PersonaWeight]) -> str:
        fmt = platform.display_format
        examples, mixing, custom = [], [], []
        for persona in personas:
            profile = persona.profile
            weight = _percent(persona.weight)
            header = [f"### {profile.name}'s Writing Style ({weight}% influence):"]
            if profile.description:
                header.append(f"Description: {profile.description}")
            header.append(_compact_digest(profile.metrics))
            examples.append("\n".join(header) + "\n" + profile.raw_training_text)
            mixing.append(f"{weight}% of the content should reflect {profile.name}'s voice and writing style")
            if profile.special_instructions:
                custom.append(
                    f"### Custom Instructions for {profile.name} ({weight}% influence):\n"
                    f"{profile.special_instructions}"
                )

        closing = [
            "Make it feel like a single, unified piece of content that incorporates the best elements "
            "of each style according to their weights."
        ]
        if custom:
            closing.insert(0, "Follow the custom instructions provided for each persona while "
                              "maintaining their specified influence weight.")

        return _sections(
            "You are an expert content creator who can blend multiple writing styles seamlessly. "
            f'Create a {fmt} about "{request.title}" by mixing the writing styles of the personas below '
            "according to their specified weights.",
            "WRITING STYLE EXAMPLES TO LEARN FROM:\n\n" + "\n\n".join(examples),
            "STYLE MIXING INSTRUCTIONS:\n" + _bullets(mixing),
            ("CUSTOM WRITING INSTRUCTIONS:\n\n" + "\n\n".join(custom)) if custom else None,
            f"PLATFORM REQUIREMENTS for {fmt}:\n" + _bullets(platform.constraints),
            "TASK:\n" + _sentence(
                f'Create a {fmt} about "{request.title}" that seamlessly blends the writing styles '
                "above according to their weights.",
                *self._task_extras(platform, request),
            ),
            BLEND_QUALITIES,
            self._article(request),
            self._formatting_rules(platform, request),
            "\n".join(closing),
        )

    def _comments(self, request: SynthesisRequest) -> str:
        contexts = []
        for persona in request.personas:
            profile = persona.profile
            lines = [
                "PERSONA CONTEXT:",
                f"You are generating comments in the style of {profile.name}. Here's the persona profile:",
            ]
            if profile.description:
                lines.append(f"Description: {profile.description}")
            if profile.domain_tags:
                lines.append(f"Domain expertise: {', '.join(profile.domain_tags)}")
            lines.append(f"Writing style: {_joined(profile.metrics.tone)}")
            lines.append(f"Engagement approach: {_joined(profile.metrics.engagement)}")
            if profile.special_instructions:
                lines.append(f"Instructions: {profile.special_instructions}")
            lines.append("")
            lines.append("Training data sample (to understand the writing style):")
            lines.append(_truncate(profile.raw_training_text, _COMMENT_SAMPLE_CHARS))
            lines.append("")
            lines.append("Based on this persona, write comments that match their voice, expertise, "
                         "and engagement style.")
            contexts.append("\n".join(lines))

        keywords = [k.strip() for k in request.keywords if k.strip()]
        return _sections(
            COMMENTS_INTRO,
            *contexts,
            "ARTICLE DETAILS:\n"
            f'Title: "{request.title}"\n'
            f"Content: {_truncate(request.body, _COMMENT_ARTICLE_CHARS)}\n"
            f"Source: {request.source_link or 'N/A'}",
            f"Consider these keywords when relevant: {', '.join(keywords)}." if keywords else None,
            COMMENT_REQUIREMENTS,
        )


_default_synthesizer = PromptSynthesizer()


def synthesize(request: SynthesisRequest) -> str:
    """Render ``request`` with the built-in platform table."""
    return _default_synthesizer.synthesize(request)
