import pytest

from persona_quill.analyzers.profile import (
    ProfileBuilder,
    enrich_built_in,
    format_writing_samples,
)
from persona_quill.errors import MissingContent, PersonaNotFound
from persona_quill.models import PersonaOverrides, RSSArticle

TEXT = "I love building tools for developers. Will you try our new API? It's exciting!"


def test_build_lowercases_name_and_computes_metrics():
    profile = ProfileBuilder().build("  Alice ", TEXT, "posts")
    assert profile.name == "alice"
    assert profile.raw_training_text == TEXT
    assert profile.metrics.word_count == 14
    assert profile.content_type == "posts"
    assert profile.kind == "trained"
    assert not profile.is_built_in


def test_build_applies_overrides():
    overrides = PersonaOverrides(description="Tester", domain_tags=("qa",), special_instructions="Be brief.")
    profile = ProfileBuilder().build("alice", TEXT, overrides=overrides)
    assert profile.description == "Tester"
    assert profile.domain_tags == ("qa",)
    assert profile.special_instructions == "Be brief."


def test_build_rejects_empty_name():
    with pytest.raises(MissingContent):
        ProfileBuilder().build("   ", TEXT)


def test_profiles_are_frozen():
    profile = ProfileBuilder().build("alice", TEXT)
    with pytest.raises(Exception):
        profile.name = "bob"


def test_enrich_built_in_lookup():
    assert enrich_built_in("BAP").description.startswith("Developer Advocate")
    assert "storytelling" in enrich_built_in("simon").special_instructions
    assert enrich_built_in("nobody") is None


def test_load_built_in_reads_posts_file(tmp_path):
    (tmp_path / "bap-posts.txt").write_text(TEXT, encoding="utf-8")
    profile = ProfileBuilder().load_built_in("bap", "posts", tmp_path)
    assert profile.kind == "built-in"
    assert profile.is_built_in
    assert profile.domain_tags[0] == "developer advocacy"


def test_load_built_in_blogs_fall_back_to_posts(tmp_path):
    (tmp_path / "simon-posts.txt").write_text(TEXT, encoding="utf-8")
    profile = ProfileBuilder().load_built_in("simon", "blogs", tmp_path)
    assert profile.raw_training_text == TEXT
    assert profile.content_type == "blogs"


def test_load_built_in_missing_file(tmp_path):
    with pytest.raises(PersonaNotFound):
        ProfileBuilder().load_built_in("bap", "posts", tmp_path)


def test_format_writing_samples_truncates_and_limits():
    articles = [RSSArticle(title=f"Post {i}", content="x" * 2500) for i in range(7)]
    rendered = format_writing_samples(articles, max_samples=5)
    assert rendered.count("## Sample") == 5
    assert "## Sample 1: Post 0" in rendered
    assert ("x" * 2000 + "...") in rendered
    assert ("x" * 2001) not in rendered


def test_from_articles_filters_by_author():
    articles = [
        RSSArticle(title="Mine", content="Learning kubernetes today.", author="dana"),
        RSSArticle(title="Theirs", content="Something else entirely.", author="eve"),
    ]
    profile = ProfileBuilder().from_articles("dana", articles)
    assert profile.kind == "rss-author"
    assert profile.content_type == "blogs"
    assert "Mine" in profile.raw_training_text
    assert "Theirs" not in profile.raw_training_text


def test_from_articles_without_matches():
    with pytest.raises(MissingContent):
        ProfileBuilder().from_articles("dana", [RSSArticle(title="t", content="c", author="eve")])
