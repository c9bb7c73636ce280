"""Heuristic style feature extraction: text -> StyleMetrics.

Every method is pure and never raises. Sparse or empty input degrades to the
documented defaults (``tone=("neutral",)``, ``structure=("plain text",)``,
neutral sentiment) and every division uses a denominator of at least 1.

Known quirk: sentiment, topic, transition and temporal matching use substring
containment rather than whole-word matching ("worst" also hits "worsted",
"now" also hits "know"). Changing it would change prompts rendered for
existing personas, so it is kept and covered by tests.
"""
import re
import statistics
from dataclasses import dataclass

from persona_quill.analyzers.lexicon import DEFAULT_LEXICON, StyleLexicon
from persona_quill.models import (
    Readability,
    SemanticCluster,
    SentimentDistribution,
    SentimentProfile,
    StyleMetrics,
    StylisticFingerprint,
    TemporalPatterns,
)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_TOKEN = re.compile(r"[a-z0-9][a-z0-9'-]*")
_ALL_CAPS = re.compile(r"\b[A-Z]{2,}\b")


@dataclass(frozen=True)
class LexicalStats:
    words: list[str]
    sentences: list[str]
    paragraphs: list[str]

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def avg_words_per_sentence(self) -> float:
        return len(self.words) / max(len(self.sentences), 1)


def count_syllables(word: str) -> int:
    """Approximate syllable count: vowel-group runs after suffix trimming, minimum 1."""
    w = re.sub(r"[^a-z]", "", word.lower())
    if len(w) <= 3:
        return 1
    w = re.sub(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$", "", w)
    w = re.sub(r"^y", "", w)
    return max(len(re.findall(r"[aeiouy]{1,2}", w)), 1)


def _grade_level(grade: float) -> str:
    if grade >= 16:
        return "graduate"
    if grade >= 13:
        return "college"
    if grade >= 9:
        return "high-school"
    if grade >= 6:
        return "middle"
    return "elementary"


def _percent(count: int, total: int) -> float:
    return round(count / max(total, 1) * 100, 1)


class StyleExtractor:
    def __init__(self, lexicon: StyleLexicon = DEFAULT_LEXICON) -> None:
        self.lexicon = lexicon

    def extract(self, text: str) -> StyleMetrics:
        text = text or ""
        lower = text.lower()
        stats = self.lexical_stats(text)
        return StyleMetrics(
            word_count=stats.word_count,
            avg_post_length=round(stats.word_count / max(len(stats.paragraphs), 1)),
            common_topics=self.detect_topics(lower),
            key_phrases=self.extract_key_phrases(stats.sentences),
            writing_complexity=self.writing_complexity(stats),
            tone=self.detect_tone(lower),
            structure=self.detect_structure(text, stats),
            vocabulary=self.detect_vocabulary(lower),
            sentence_length=self.sentence_length(stats),
            engagement=self.detect_engagement(lower),
            sentiment=self.analyze_sentiment(stats.words, lower),
            readability=self.analyze_readability(stats),
            semantic_clusters=self.find_semantic_clusters(text),
            stylistic_fingerprint=self.stylistic_fingerprint(text),
            temporal_patterns=self.temporal_patterns(lower, stats.word_count),
        )

    # ── Lexical ──────────────────────────────────────────────────────────────

    def lexical_stats(self, text: str) -> LexicalStats:
        return LexicalStats(
            words=text.split(),
            sentences=[s for s in _SENTENCE_SPLIT.split(text) if s.strip()],
            paragraphs=[p for p in _PARAGRAPH_SPLIT.split(text) if p.strip()],
        )

    def detect_topics(self, lower: str) -> tuple[str, ...]:
        """A topic counts when at least two distinct keywords occur as substrings."""
        return tuple(
            topic for topic, keywords in self.lexicon.topics.items()
            if sum(1 for kw in keywords if kw in lower) >= 2
        )

    def extract_key_phrases(self, sentences: list[str]) -> tuple[str, ...]:
        """Content-word bigrams within a sentence, in first-occurrence order."""
        stop = self.lexicon.stopwords
        phrases: list[str] = []
        for sentence in sentences:
            tokens = _TOKEN.findall(sentence.lower())
            for a, b in zip(tokens, tokens[1:]):
                if a in stop or b in stop or len(a) < 3 or len(b) < 3:
                    continue
                phrase = f"{a} {b}"
                if phrase not in phrases:
                    phrases.append(phrase)
                if len(phrases) >= self.lexicon.max_key_phrases:
                    return tuple(phrases)
        return tuple(phrases)

    def writing_complexity(self, stats: LexicalStats) -> str:
        avg = stats.avg_words_per_sentence
        if avg < 12:
            return "simple"
        if avg < 20:
            return "moderate"
        return "complex"

    # ── Label detectors ──────────────────────────────────────────────────────

    @staticmethod
    def _labels(patterns: dict[str, str], text: str, flags: int = 0) -> tuple[str, ...]:
        return tuple(label for label, pattern in patterns.items() if re.search(pattern, text, flags))

    def detect_tone(self, lower: str) -> tuple[str, ...]:
        return self._labels(self.lexicon.tone, lower) or ("neutral",)

    def detect_structure(self, text: str, stats: LexicalStats) -> tuple[str, ...]:
        found = list(self._labels(self.lexicon.structure, text, re.MULTILINE))
        if len(stats.paragraphs) > 1:
            # "paragraphs" sits before "code blocks" in the reported order
            idx = found.index("code blocks") if "code blocks" in found else len(found)
            found.insert(idx, "paragraphs")
        return tuple(found) or ("plain text",)

    def detect_vocabulary(self, lower: str) -> tuple[str, ...]:
        return self._labels(self.lexicon.vocabulary, lower)

    def detect_engagement(self, lower: str) -> tuple[str, ...]:
        return self._labels(self.lexicon.engagement, lower)

    def sentence_length(self, stats: LexicalStats) -> str:
        lengths = [len(s.split()) for s in stats.sentences]
        if not lengths:
            return "short"
        avg = sum(lengths) / len(lengths)
        if avg < 10:
            return "short"
        if avg > 20:
            return "long"
        return "mixed" if statistics.pvariance(lengths) > 50 else "medium"

    # ── Sentiment ────────────────────────────────────────────────────────────

    def analyze_sentiment(self, words: list[str], lower: str) -> SentimentProfile:
        lowered = [w.lower() for w in words]
        pos_hits = sum(1 for w in lowered if any(p in w for p in self.lexicon.positive_words))
        neg_hits = sum(1 for w in lowered if any(n in w for n in self.lexicon.negative_words))
        total = len(words)
        positive = _percent(pos_hits, total)
        negative = _percent(neg_hits, total)
        neutral = round(100 - positive - negative, 1)

        if positive > negative and positive > 2:
            dominant = "positive"
        elif negative > positive and negative > 2:
            dominant = "negative"
        elif abs(positive - negative) < 1 and (positive > 1 or negative > 1):
            dominant = "mixed"
        else:
            dominant = "neutral"

        emotional_range = tuple(
            category for category, indicators in self.lexicon.emotional_range.items()
            if sum(1 for word in indicators if word in lower) >= 2
        ) or ("neutral",)

        return SentimentProfile(
            dominant=dominant,
            distribution=SentimentDistribution(positive=positive, neutral=neutral, negative=negative),
            emotional_range=emotional_range,
        )

    # ── Readability ──────────────────────────────────────────────────────────

    def analyze_readability(self, stats: LexicalStats) -> Readability:
        words_per_sentence = stats.avg_words_per_sentence
        syllables_per_word = sum(count_syllables(w) for w in stats.words) / max(stats.word_count, 1)
        grade = round(0.39 * words_per_sentence + 11.8 * syllables_per_word - 15.59, 1)
        return Readability(
            flesch_kincaid_grade=grade,
            avg_words_per_sentence=round(words_per_sentence, 1),
            avg_syllables_per_word=round(syllables_per_word, 2),
            complexity_level=_grade_level(grade),
        )

    # ── Semantic clusters ────────────────────────────────────────────────────

    def find_semantic_clusters(self, text: str) -> tuple[SemanticCluster, ...]:
        lower = text.lower()
        clusters = []
        for topic, (keywords, sentiment_label) in self.lexicon.semantic_clusters.items():
            matched = tuple(kw for kw in keywords if kw in lower)
            if len(matched) < 2:
                continue
            frequency = sum(len(re.findall(re.escape(kw), text, re.IGNORECASE)) for kw in matched)
            clusters.append(SemanticCluster(
                topic=topic,
                matched_keywords=matched,
                frequency=frequency,
                sentiment_label=sentiment_label,
            ))
        # sorted() is stable, so equal frequencies keep dictionary order
        return tuple(sorted(clusters, key=lambda c: c.frequency, reverse=True))

    # ── Fingerprint ──────────────────────────────────────────────────────────

    def stylistic_fingerprint(self, text: str) -> StylisticFingerprint:
        punctuation = []
        if text.count("!") > 3:
            punctuation.append("frequent exclamations")
        if text.count("?") > 2:
            punctuation.append("questioning style")
        if "..." in text:
            punctuation.append("ellipsis usage")

        emphasis = []
        has_bold = "**" in text or "__" in text
        if has_bold:
            emphasis.append("bold")
        elif "*" in text:
            emphasis.append("italic")
        if "`" in text:
            emphasis.append("code")

        lower = text.lower()
        return StylisticFingerprint(
            punctuation_patterns=tuple(punctuation),
            capitalization_style="emphatic caps" if len(_ALL_CAPS.findall(text)) > 3 else "standard",
            emphasis_markers=tuple(emphasis),
            transition_words=tuple(w for w in self.lexicon.transition_words if w in lower),
        )

    # ── Temporal ─────────────────────────────────────────────────────────────

    def temporal_patterns(self, lower: str, word_count: int) -> TemporalPatterns:
        future_hits = sum(
            len(re.findall(rf"\b{re.escape(w)}\b", lower)) for w in self.lexicon.future_words
        )
        return TemporalPatterns(
            time_references=tuple(w for w in self.lexicon.time_words if w in lower),
            urgency_indicators=tuple(w for w in self.lexicon.urgency_words if w in lower),
            future_focus_score=round(future_hits / max(word_count, 1) * 1000) / 10,
        )


_default_extractor = StyleExtractor()


def extract(text: str) -> StyleMetrics:
    """Extract metrics with the default lexicon."""
    return _default_extractor.extract(text)
