"""Persona profile construction: computed metrics + hand-authored metadata."""
import logging
from pathlib import Path
from typing import Optional

from persona_quill.analyzers.style_extractor import StyleExtractor
from persona_quill.errors import MissingContent, PersonaNotFound
from persona_quill.models import (
    ContentType,
    PersonaKind,
    PersonaOverrides,
    PersonaProfile,
    RSSArticle,
)

_log = logging.getLogger(__name__)

BUILT_IN_PERSONAS: dict[str, PersonaOverrides] = {
    "bap": PersonaOverrides(
        description="Developer Advocate with focus on community building and technical education",
        domain_tags=("developer advocacy", "community building", "technical content", "open source"),
        special_instructions=(
            "Engage the community, ask thoughtful questions, and provide additional value or "
            "perspective. Use a warm, inclusive tone that encourages discussion."
        ),
    ),
    "simon": PersonaOverrides(
        description="Tech storyteller focused on personal growth and community experiences",
        domain_tags=("technology", "personal development", "community", "career advice"),
        special_instructions=(
            "Share personal experiences, encourage others, and create meaningful connections. "
            "Use storytelling elements and ask engaging questions."
        ),
    ),
    "rohan-sharma": PersonaOverrides(
        description="Technical problem solver with focus on practical solutions and clear explanations",
        domain_tags=("software development", "problem solving", "technical education", "best practices"),
        special_instructions=(
            "Provide technical insights, offer solutions, and clarify complex topics. "
            "Focus on practical value and clear explanations."
        ),
    ),
}

_SAMPLE_CHARS = 2000


def enrich_built_in(name: str) -> Optional[PersonaOverrides]:
    """Return hard-coded metadata for a built-in persona, or None for unknown names."""
    return BUILT_IN_PERSONAS.get(name.strip().lower())


def format_writing_samples(articles: list[RSSArticle], max_samples: int = 5) -> str:
    """Render feed articles as numbered writing samples, each body capped at 2000 chars."""
    samples = []
    for index, article in enumerate(articles[:max_samples], start=1):
        body = article.content[:_SAMPLE_CHARS]
        if len(article.content) > _SAMPLE_CHARS:
            body += "..."
        samples.append(f"## Sample {index}: {article.title}\n\n{body}\n\n---")
    return "\n\n".join(samples)


class ProfileBuilder:
    def __init__(self, extractor: Optional[StyleExtractor] = None) -> None:
        self.extractor = extractor or StyleExtractor()

    def build(
        self,
        name: str,
        raw_text: str,
        content_type: ContentType = "mixed",
        overrides: Optional[PersonaOverrides] = None,
        kind: PersonaKind = "trained",
    ) -> PersonaProfile:
        """Compute metrics for ``raw_text`` and wrap them, with optional metadata, into a profile."""
        name = name.strip().lower()
        if not name:
            raise MissingContent("persona name is required")
        fields = {}
        if overrides is not None:
            fields = {
                "description": overrides.description,
                "domain_tags": overrides.domain_tags,
                "special_instructions": overrides.special_instructions,
            }
        return PersonaProfile(
            name=name,
            raw_training_text=raw_text,
            metrics=self.extractor.extract(raw_text),
            content_type=content_type,
            kind=kind,
            **fields,
        )

    def load_built_in(self, name: str, content_type: ContentType, data_dir: Path) -> PersonaProfile:
        """Build a built-in persona from ``<name>-posts.txt`` / ``<name>-blogs.txt``.

        Blogs fall back to the posts file when no blogs file exists.
        """
        name = name.strip().lower()
        suffixes = ["blogs", "posts"] if content_type == "blogs" else ["posts"]
        for suffix in suffixes:
            path = data_dir / f"{name}-{suffix}.txt"
            if path.exists():
                _log.debug("loading built-in persona %s from %s", name, path)
                raw = path.read_text(encoding="utf-8")
                return self.build(name, raw, content_type, enrich_built_in(name), kind="built-in")
        raise PersonaNotFound(f"no training data for built-in persona {name!r} in {data_dir}")

    def from_articles(self, author: str, articles: list[RSSArticle], max_samples: int = 5) -> PersonaProfile:
        """Build an rss-author persona from the author's feed articles."""
        own = [a for a in articles if not a.author or a.author == author]
        if not own:
            raise MissingContent(f"no articles by {author!r}")
        return self.build(author, format_writing_samples(own, max_samples), "blogs", kind="rss-author")
