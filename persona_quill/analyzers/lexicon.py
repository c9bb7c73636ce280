"""Keyword dictionaries and label predicates used by the style extractor.

A ``StyleLexicon`` is handed to ``StyleExtractor`` at construction so tests and
callers can swap in alternate dictionaries. Ordering inside each mapping is
significant: detected labels are reported in declaration order.
"""
from dataclasses import dataclass, field


def _topics() -> dict[str, tuple[str, ...]]:
    return {
        "technology": ("software", "artificial intelligence", "machine learning", "cloud", "api", "code", "developer", "platform", "tech"),
        "business": ("revenue", "market", "customer", "strategy", "growth", "startup", "roi", "sales"),
        "cybersecurity": ("security", "vulnerability", "breach", "malware", "encryption", "threat", "attack", "phishing"),
        "devops": ("deploy", "pipeline", "kubernetes", "docker", "ci/cd", "infrastructure", "monitoring", "terraform"),
        "web development": ("javascript", "react", "css", "html", "frontend", "backend", "browser", "web"),
        "data science": ("data", "analytics", "model", "dataset", "statistics", "visualization", "python", "insight"),
    }


# Regexes are evaluated against the lower-cased text unless noted otherwise.
def _tone() -> dict[str, str]:
    return {
        "professional": r"\b(strategy|solution|leverage|stakeholders?|deliver|professional|industry|organization)\b",
        "casual": r"\b(hey|gonna|wanna|cool|awesome|lol|stuff|guys|yeah|btw)\b",
        "enthusiastic": r"!|\b(exciting|excited|amazing|incredible|thrilled|fantastic|love)\b",
        "technical": r"\b(api|code|function|deploy|database|algorithm|framework|server|kubernetes|latency)\b",
        "educational": r"\b(learn|learning|how to|guide|tutorial|explain|understand|step|tips)\b",
    }


# Structure regexes run on the original text in multiline mode.
def _structure() -> dict[str, str]:
    return {
        "bullet points": r"^\s*[-*•]\s+\S",
        "numbered lists": r"^\s*\d+[.)]\s+\S",
        "headings": r"^#{1,6}\s+\S",
        "code blocks": r"```",
    }


def _vocabulary() -> dict[str, str]:
    return {
        "technical jargon": r"\b(api|sdk|kubernetes|microservices?|latency|runtime|compiler|backend|frontend|devops|throughput)\b",
        "business terms": r"\b(roi|revenue|stakeholders?|kpis?|growth|market|customers?|monetiz\w*|b2b)\b",
        "casual language": r"\b(gonna|wanna|kinda|cool|awesome|stuff|lol|yeah|btw)\b",
        "academic language": r"\b(furthermore|moreover|consequently|hypothesis|methodology|empirical|therefore|thus)\b",
    }


def _engagement() -> dict[str, str]:
    return {
        "questions": r"\?",
        "call-to-action": r"\b(try|join|share|comment|sign up|subscribe|check out|let me know|click|follow|download)\b",
        "personal anecdotes": r"\b(i remember|when i|my experience|i've|i was|i learned|last year i|personally)\b",
        "social mentions": r"(?:^|\s)[@#]\w+",
        "direct address": r"\b(you|your|you're|yourself)\b",
    }


def _positive() -> tuple[str, ...]:
    return ("good", "great", "excellent", "amazing", "awesome", "fantastic", "love", "best", "exciting",
            "happy", "success", "breakthrough", "wonderful", "brilliant", "improve", "win", "benefit")


def _negative() -> tuple[str, ...]:
    return ("bad", "terrible", "awful", "worst", "hate", "poor", "fail", "problem", "broken",
            "difficult", "wrong", "disappoint", "risk", "struggle", "bug")


def _emotional_range() -> dict[str, tuple[str, ...]]:
    return {
        "optimistic": ("hope", "future", "opportunity", "excited", "growth", "potential", "bright", "possible"),
        "analytical": ("data", "analysis", "research", "evidence", "metrics", "study", "results", "measure"),
        "cautious": ("however", "careful", "concern", "caution", "might", "uncertain", "risk", "consider"),
    }


def _clusters() -> dict[str, tuple[tuple[str, ...], str]]:
    return {
        "innovation": (("innovation", "breakthrough", "cutting-edge", "transform", "new", "future", "disrupt"), "positive"),
        "security": (("security", "vulnerability", "breach", "threat", "attack", "exploit", "risk"), "cautionary"),
        "growth": (("growth", "scale", "expand", "revenue", "opportunity", "momentum"), "positive"),
        "challenges": (("problem", "challenge", "issue", "difficult", "struggle", "bug", "failure"), "negative"),
        "community": (("community", "together", "collaborate", "team", "open source", "contributors"), "positive"),
        "learning": (("learn", "tutorial", "guide", "course", "practice", "lesson", "beginner"), "neutral"),
    }


def _transitions() -> tuple[str, ...]:
    return ("however", "therefore", "moreover", "furthermore", "additionally", "consequently",
            "meanwhile", "nevertheless", "similarly", "finally", "first", "next")


def _time_words() -> tuple[str, ...]:
    return ("today", "tomorrow", "yesterday", "this week", "next week", "this year", "recently",
            "soon", "now", "currently")


def _urgency_words() -> tuple[str, ...]:
    return ("urgent", "immediately", "asap", "deadline", "quickly", "breaking", "critical",
            "don't miss", "limited time", "right now")


def _future_words() -> tuple[str, ...]:
    return ("will", "going to", "upcoming", "future", "plan", "next", "soon", "roadmap")


def _stopwords() -> frozenset[str]:
    return frozenset((
        "the", "a", "an", "and", "or", "but", "of", "to", "in", "on", "at", "for", "with", "is", "are",
        "was", "were", "be", "been", "it", "its", "this", "that", "these", "those", "as", "by", "from",
        "i", "you", "we", "they", "he", "she", "my", "your", "our", "their", "not", "so", "if", "do",
        "does", "did", "have", "has", "had", "will", "can", "just", "about", "into", "than", "then",
    ))


@dataclass(frozen=True)
class StyleLexicon:
    topics: dict[str, tuple[str, ...]] = field(default_factory=_topics)
    tone: dict[str, str] = field(default_factory=_tone)
    structure: dict[str, str] = field(default_factory=_structure)
    vocabulary: dict[str, str] = field(default_factory=_vocabulary)
    engagement: dict[str, str] = field(default_factory=_engagement)
    positive_words: tuple[str, ...] = field(default_factory=_positive)
    negative_words: tuple[str, ...] = field(default_factory=_negative)
    emotional_range: dict[str, tuple[str, ...]] = field(default_factory=_emotional_range)
    semantic_clusters: dict[str, tuple[tuple[str, ...], str]] = field(default_factory=_clusters)
    transition_words: tuple[str, ...] = field(default_factory=_transitions)
    time_words: tuple[str, ...] = field(default_factory=_time_words)
    urgency_words: tuple[str, ...] = field(default_factory=_urgency_words)
    future_words: tuple[str, ...] = field(default_factory=_future_words)
    stopwords: frozenset[str] = field(default_factory=_stopwords)
    max_key_phrases: int = 10


DEFAULT_LEXICON = StyleLexicon()
