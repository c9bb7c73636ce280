"""Static publishing-platform specs: format name, markdown-link support, guidelines."""
from persona_quill.errors import UnknownPlatform
from persona_quill.models import PlatformSpec

_PLATFORMS = [
    PlatformSpec(
        id="linkedin",
        display_format="LinkedIn post",
        supports_markdown_links=False,
        constraints=(
            "Start with a compelling hook that grabs attention",
            "Keep it professional but engaging and conversational",
            "Use line breaks for readability",
            "Include 3-5 relevant hashtags at the end",
            "Maximum 1300 characters",
            "Add a call-to-action or question to encourage engagement",
            "Include relevant links as plain URLs, no more than 2-3 (no markdown formatting)",
        ),
    ),
    PlatformSpec(
        id="twitter",
        display_format="Twitter/X thread (2-5 tweets)",
        supports_markdown_links=False,
        constraints=(
            "Each tweet maximum 280 characters",
            "Start with a compelling hook in the first tweet",
            "Include relevant hashtags (2-3 per tweet max)",
            "End with an engagement question or call-to-action",
            "Number each tweet (1/n, 2/n, etc.)",
            "Include relevant links as plain URLs, no more than 2-3 (no markdown formatting)",
        ),
    ),
    PlatformSpec(
        id="discord",
        display_format="Discord post/message",
        supports_markdown_links=True,
        constraints=(
            "Write in a conversational, community-friendly tone",
            "Use short paragraphs or bullet points for easy reading",
            "Highlight key points with **bold** or *italics* for emphasis",
            "Avoid long walls of text; split into multiple messages if needed",
            "Use @mentions only when relevant and necessary",
            "Encourage replies and community engagement with open-ended questions",
        ),
    ),
    PlatformSpec(
        id="instagram",
        display_format="Instagram post caption",
        supports_markdown_links=False,
        constraints=(
            "Start with an attention-grabbing hook",
            "Include relevant hashtags (10-15 hashtags)",
            "Add a call-to-action",
            "Keep it engaging and visual",
            "Maximum 2200 characters",
            "Refer to links as plain URLs, no more than 2-3, as a bio reference",
        ),
    ),
    PlatformSpec(
        id="facebook",
        display_format="Facebook post",
        supports_markdown_links=False,
        constraints=(
            "Start with an engaging hook",
            "Keep it conversational and friendly",
            "Include a call-to-action",
            "Encourage comments and shares",
            "Maximum 500 words",
            "Include relevant links as plain URLs, no more than 2-3",
        ),
    ),
    PlatformSpec(
        id="medium",
        display_format="Medium article introduction and outline",
        supports_markdown_links=True,
        constraints=(
            "Write a compelling introduction (2-3 paragraphs)",
            "Create a detailed outline with main sections",
            "Include subheadings",
            "Suggest key points for each section",
            "Make it suitable for Medium's audience",
            "Use markdown formatting for links: [text](url)",
        ),
    ),
    PlatformSpec(
        id="devto",
        display_format="Dev.to post",
        supports_markdown_links=True,
        constraints=(
            "Start with a developer-focused hook",
            "Use technical language appropriately",
            "Include relevant tags",
            "Add code examples if applicable",
            "Encourage community discussion",
            "Format for developer audience",
            "Use markdown formatting for links: [text](url)",
        ),
    ),
    PlatformSpec(
        id="hashnode",
        display_format="Hashnode blog post",
        supports_markdown_links=True,
        constraints=(
            "Technical and developer-focused",
            "Include relevant tags",
            "Start with a compelling introduction",
            "Structure with clear headings",
            "Add practical examples",
            "Encourage engagement",
            "Use markdown formatting for links: [text](url)",
        ),
    ),
    PlatformSpec(
        id="reddit",
        display_format="Reddit post",
        supports_markdown_links=True,
        constraints=(
            "Write a catchy title",
            "Create engaging post content",
            "Be authentic and conversational",
            "Include relevant details",
            "Encourage discussion",
            "Follow Reddit etiquette",
            "Use markdown formatting for links: [text](url)",
        ),
    ),
    PlatformSpec(
        id="youtube",
        display_format="YouTube video description",
        supports_markdown_links=False,
        constraints=(
            "Write a compelling description",
            "Include timestamps if applicable",
            "Add relevant keywords",
            "Include a call-to-action",
            "Maximum 1000 words",
            "Include relevant links as plain URLs",
        ),
    ),
    PlatformSpec(
        id="tiktok",
        display_format="TikTok video script",
        supports_markdown_links=False,
        constraints=(
            "Create a hook for the first 3 seconds",
            "Keep it under 60 seconds",
            "Make it engaging and visual",
            "Include trending hashtags",
            "Add a call-to-action",
            "Make it shareable",
            "Mention relevant links in the script",
        ),
    ),
]

PLATFORMS: dict[str, PlatformSpec] = {p.id: p for p in _PLATFORMS}


def get_platform(platform_id: str, platforms: dict[str, PlatformSpec] = PLATFORMS) -> PlatformSpec:
    spec = platforms.get((platform_id or "").strip().lower())
    if spec is None:
        raise UnknownPlatform(f"unknown platform {platform_id!r}; expected one of {', '.join(platforms)}")
    return spec
