"""Static prompt text: post-type voices and the fixed summary/diagram/comment templates."""
from dataclasses import dataclass


@dataclass(frozen=True)
class PostTypeStyle:
    voice: str
    characteristics: tuple[str, ...]
    engagement_style: str


POST_TYPE_STYLES: dict[str, PostTypeStyle] = {
    "devrel": PostTypeStyle(
        voice="Developer Relations professional style",
        characteristics=(
            "Focus on developer experience and community building",
            "Balance technical depth with accessibility",
            "Include practical examples and use cases",
            "Encourage community engagement and feedback",
            "Reference developer tools and workflows",
            "Use a friendly, approachable tone",
        ),
        engagement_style="Ask questions that encourage developer discussion and sharing experiences",
    ),
    "technical": PostTypeStyle(
        voice="Technical expert style",
        characteristics=(
            "Focus on technical accuracy and depth",
            "Include specific implementation details",
            "Reference documentation and best practices",
            "Use precise technical terminology",
            "Provide code examples where relevant",
            "Discuss performance and scalability considerations",
        ),
        engagement_style="Encourage technical discussion and knowledge sharing",
    ),
    "tutorial": PostTypeStyle(
        voice="Educational tutorial style",
        characteristics=(
            "Break down complex concepts into digestible steps",
            "Use clear, instructional language",
            "Include step-by-step guidance",
            "Provide examples and practical exercises",
            "Anticipate common questions and challenges",
            "Use an encouraging, supportive tone",
        ),
        engagement_style="Invite questions and offer additional help or resources",
    ),
    "opinion": PostTypeStyle(
        voice="Opinion leader style",
        characteristics=(
            "Express clear viewpoints and perspectives",
            "Back opinions with reasoning and evidence",
            "Acknowledge different viewpoints",
            "Use persuasive but respectful language",
            "Share personal experiences and insights",
            "Encourage thoughtful debate",
        ),
        engagement_style="Ask for others' opinions and experiences on the topic",
    ),
    "news": PostTypeStyle(
        voice="News reporter style",
        characteristics=(
            "Present information objectively and factually",
            "Include key details: who, what, when, where, why",
            "Use clear, concise language",
            "Provide context and background information",
            "Include relevant quotes or sources",
            "Maintain a neutral, professional tone",
        ),
        engagement_style="Encourage sharing and discussion of the news",
    ),
    "story": PostTypeStyle(
        voice="Storytelling style",
        characteristics=(
            "Use narrative structure with beginning, middle, end",
            "Include personal anecdotes and experiences",
            "Create emotional connection with readers",
            "Use descriptive, engaging language",
            "Build tension and resolution",
            "Make complex topics relatable through stories",
        ),
        engagement_style="Invite readers to share their own related stories and experiences",
    ),
}

SUMMARY_TEMPLATE = """Summarize the following article in 2-3 concise paragraphs. Focus on the key points and main takeaways.{keywords}

Article: "{title}"
Content: {body}
Source: {source}"""

DIAGRAM_TEMPLATE = """You are an expert at creating Mermaid diagrams. Create a flowchart diagram based on the content provided.

Content: "{title}

{body}"

CRITICAL FORMATTING RULES - FOLLOW EXACTLY:

1. ALWAYS start with: flowchart TD
2. Use ONLY alphanumeric identifiers (A, B, C, D1, D2, etc.) - NEVER use quotes around identifiers
3. Use square brackets with quotes for labels: A["Label Text"]
4. Connect using identifiers only: A --> B (NOT "A" --> "B")

CORRECT FORMAT EXAMPLE:
flowchart TD
    A["Main Topic"] --> B["Branch 1"]
    A --> C["Branch 2"]
    B --> B1["Sub-item 1"]
    B --> B2["Sub-item 2"]
    C --> C1["Sub-item 1"]
    C --> C2["Sub-item 2"]

WRONG FORMATS TO AVOID:
- "A" --> "B" (quoted identifiers)
- A["Label"] --> "B["Label2"] (mixed format)
- A[""Label""] (double quotes in labels)

STRUCTURE GUIDELINES:
1. Start with main concept as A
2. Create 3-5 primary branches (B, C, D, E)
3. Add sub-items using numbered identifiers (B1, B2, C1, C2)
4. Keep labels concise but descriptive
5. Ensure logical flow and relationships

Generate ONLY the Mermaid diagram code following the exact format above:"""

COMMENTS_INTRO = (
    "You are a social media engagement expert. Generate 5-10 high-quality, diverse comments for the "
    "following article. Each comment should be unique, engaging, and add value to the discussion."
)

COMMENT_REQUIREMENTS = """COMMENT REQUIREMENTS:
1. Generate 5-10 comments of VARYING TYPES and LENGTHS
2. Short comments (1 sentence): praise, agreement or appreciation
3. Medium comments (2-3 sentences): highlight a valuable part of the article or share a brief related experience
4. Longer comments (3-5 sentences): ask a thoughtful question or add a complementary perspective
5. Make comments feel authentic and human
6. Avoid being overly promotional or repetitive
7. Each comment should add unique value

Return each comment on its own line, numbered 1., 2., 3., and so on."""

BLEND_QUALITIES = """The content should feel natural and cohesive, not like separate sections from different authors. Blend their:
- Tone and voice
- Sentence structure and rhythm
- Technical depth and approach
- Engagement style and personality
- Vocabulary and expressions"""
