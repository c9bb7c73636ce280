"""Tests for heuristic style extraction."""
import pytest

from persona_quill.analyzers.lexicon import StyleLexicon
from persona_quill.analyzers.style_extractor import StyleExtractor, count_syllables, extract

SAMPLE = (
    "This is exciting! This is a fantastic breakthrough. Will you try it?"
)

LONG_POST = """# Shipping our new API

Hey folks, we just shipped the new API and it's awesome. The developer platform
now supports streaming responses and the code is open source.

- Faster deploy pipeline with docker
- Better monitoring for kubernetes clusters
- New tutorial for beginners

Let me know what you think? Join the community and share your feedback!
"""


def test_exciting_scenario():
    metrics = extract(SAMPLE)
    assert "enthusiastic" in metrics.tone
    assert "questions" in metrics.engagement
    assert "call-to-action" in metrics.engagement
    assert metrics.sentiment.dominant == "positive"


def test_extract_is_deterministic():
    assert extract(LONG_POST) == extract(LONG_POST)
    assert extract(LONG_POST).model_dump_json() == extract(LONG_POST).model_dump_json()


@pytest.mark.parametrize("text", ["", "   ", "\n\n"])
def test_empty_text_defaults(text):
    metrics = extract(text)
    assert metrics.word_count == 0
    assert metrics.tone == ("neutral",)
    assert metrics.structure == ("plain text",)
    assert metrics.sentiment.dominant == "neutral"
    assert metrics.sentiment.distribution.neutral == 100.0
    assert metrics.sentiment.emotional_range == ("neutral",)
    assert metrics.sentence_length == "short"
    assert metrics.semantic_clusters == ()
    assert metrics.temporal_patterns.future_focus_score == 0.0


@pytest.mark.parametrize("text", [SAMPLE, LONG_POST, "The worst bug. Terrible, awful failure!", "plain words here"])
def test_sentiment_percentages_sum_to_100(text):
    dist = extract(text).sentiment.distribution
    assert 0 <= dist.positive <= 100
    assert 0 <= dist.negative <= 100
    assert dist.positive + dist.neutral + dist.negative == pytest.approx(100, abs=0.11)


def test_readability_grade_rises_with_longer_words():
    simple = extract("The cat sat. The dog ran. We had fun.")
    complex_ = extract(
        "Organizational transformation necessitates comprehensive infrastructural "
        "modernization alongside interdisciplinary collaboration."
    )
    assert complex_.readability.flesch_kincaid_grade > simple.readability.flesch_kincaid_grade
    assert simple.readability.complexity_level == "elementary"
    assert complex_.readability.complexity_level == "graduate"


def test_readability_grade_never_drops_with_longer_sentences():
    # one-syllable words only, so syllables per word stays at 1
    assert count_syllables("cat") == 1
    grades = []
    for n in (1, 3, 6, 12, 24, 48):
        sentence = " ".join(["cat"] * n) + "."
        grades.append(extract(f"{sentence} {sentence} {sentence}").readability.flesch_kincaid_grade)
    assert grades == sorted(grades)
    assert grades[-1] > grades[0]


def test_substring_matching_quirk_is_preserved():
    # "worsted" contains "worst"; substring containment counts it as negative
    metrics = extract("The worsted wool coat.")
    assert metrics.sentiment.distribution.negative == 25.0
    assert metrics.sentiment.dominant == "negative"


def test_structure_detection_order():
    metrics = extract(LONG_POST)
    assert metrics.structure[:3] == ("bullet points", "headings", "paragraphs")


def test_code_block_follows_paragraphs():
    metrics = extract("Intro text.\n\n```python\nprint(1)\n```\n")
    assert metrics.structure == ("paragraphs", "code blocks")


def test_topics_require_two_keywords():
    assert "devops" in extract(LONG_POST).common_topics
    assert "devops" not in extract("We use docker at work.").common_topics


def test_key_phrases_skip_stopwords():
    phrases = extract("Machine learning models need clean training data.").key_phrases
    assert phrases[0] == "machine learning"
    assert all(" the " not in f" {p} " for p in phrases)


def test_semantic_clusters_sorted_by_frequency():
    text = "Security matters. Every threat, every attack, every breach. Our community grows together."
    clusters = extract(text).semantic_clusters
    assert [c.topic for c in clusters] == ["security", "community"]
    assert clusters[0].sentiment_label == "cautionary"
    assert clusters[0].frequency >= clusters[1].frequency


def test_stylistic_fingerprint():
    text = "WOW. THIS IS HUGE NEWS! Really?! Is it?? Yes!!! However, **bold** and `code`..."
    fp = extract(text).stylistic_fingerprint
    assert fp.capitalization_style == "emphatic caps"
    assert "frequent exclamations" in fp.punctuation_patterns
    assert "questioning style" in fp.punctuation_patterns
    assert "ellipsis usage" in fp.punctuation_patterns
    assert fp.emphasis_markers == ("bold", "code")
    assert fp.transition_words == ("however",)


def test_temporal_patterns():
    temporal = extract("We will ship the roadmap soon. Deadline is today, act immediately.").temporal_patterns
    assert "today" in temporal.time_references
    assert "soon" in temporal.time_references
    assert "deadline" in temporal.urgency_indicators
    assert "immediately" in temporal.urgency_indicators
    # will, roadmap, soon over 11 words
    assert temporal.future_focus_score == 27.3


@pytest.mark.parametrize("word,expected", [("cat", 1), ("table", 2), ("banana", 3), ("the", 1)])
def test_count_syllables(word, expected):
    assert count_syllables(word) == expected


def test_substitute_lexicon():
    lexicon = StyleLexicon(positive_words=("widget",), negative_words=())
    metrics = StyleExtractor(lexicon).extract("widget widget gadget")
    assert metrics.sentiment.dominant == "positive"
    assert metrics.sentiment.distribution.positive == 66.7
