from persona_quill.models import PersonaProfile
from persona_quill.prompts.synthesizer import style_digest


def format_persona_report(profile: PersonaProfile) -> str:
    """Format a persona profile into a Markdown report string."""
    sections = [f"# Persona: {profile.name}\n"]
    sections.append(
        f"*{profile.kind} · {profile.content_type} · created {profile.created_at:%Y-%m-%d}*\n"
    )

    if profile.description or profile.domain_tags or profile.special_instructions:
        sections.append("## Profile\n")
        if profile.description:
            sections.append(f"- **Description**: {profile.description}")
        if profile.domain_tags:
            sections.append(f"- **Domain**: {', '.join(profile.domain_tags)}")
        if profile.special_instructions:
            sections.append(f"- **Instructions**: {profile.special_instructions}")
        sections.append("")

    sections.append("## Style Analysis\n")
    sections.append(style_digest(profile.metrics))
    sections.append("")

    clusters = profile.metrics.semantic_clusters
    if clusters:
        sections.append("## Semantic Clusters\n")
        sections.append("| Topic | Sentiment | Frequency | Keywords |")
        sections.append("|---|---|---|---|")
        for c in clusters:
            sections.append(f"| {c.topic} | {c.sentiment_label} | {c.frequency} | {', '.join(c.matched_keywords)} |")
        sections.append("")

    return "\n".join(sections)
