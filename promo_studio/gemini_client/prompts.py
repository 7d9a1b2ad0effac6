"""
Prompt Templates - prompt wording and response schemas per content kind
"""

from dataclasses import dataclass
from typing import Any, Dict

from ..schemas.content import (
    AnalyticsData,
    AutomationWorkflow,
    BlogIdea,
    Contact,
    ContentKind,
    InteractiveConcept,
    PressRelease,
    ScheduledPost,
    SocialMediaPost,
    Submission,
)

PLATFORMS = ["Facebook", "X", "Instagram", "LinkedIn", "TikTok", "Mastodon", "Bluesky"]
WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

IMAGE_PROMPT_TEMPLATE = (
    "Concept art for a musician or writer. A vibrant, high-quality, aesthetically "
    "pleasing image based on the theme: {prompt}"
)


def _string(**extra: Any) -> Dict[str, Any]:
    return {"type": "STRING", **extra}


def _strings() -> Dict[str, Any]:
    return {"type": "ARRAY", "items": _string()}


def _object(**properties: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "OBJECT", "properties": properties}


def _array(items: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "ARRAY", "items": items}


@dataclass(frozen=True)
class ContentTemplate:
    """How to ask for one content kind and how to read the answer"""

    prompt: str
    schema: Dict[str, Any]
    record: type
    many: bool = False

    def render(self, prompt: str) -> str:
        return self.prompt.format(prompt=prompt)


TEMPLATES: Dict[ContentKind, ContentTemplate] = {
    ContentKind.SOCIAL_POSTS: ContentTemplate(
        prompt=(
            "Generate a set of 3-5 distinct social media posts to promote a musician "
            "or writer's work based on this topic: \"{prompt}\". Tailor each post for a "
            "different platform (X, Instagram, Mastodon, etc.)."
        ),
        schema=_array(_object(
            platform=_string(enum=PLATFORMS),
            content=_string(),
            hashtags=_strings(),
            visualSuggestion=_string(
                description="A suggestion for a visual to accompany the post."
            ),
        )),
        record=SocialMediaPost,
        many=True,
    ),
    ContentKind.BLOG_IDEAS: ContentTemplate(
        prompt=(
            "Generate 3 blog post ideas with outlines and keywords for a musician or "
            "writer based on this topic: \"{prompt}\"."
        ),
        schema=_array(_object(title=_string(), outline=_strings(), keywords=_strings())),
        record=BlogIdea,
        many=True,
    ),
    ContentKind.PRESS_RELEASE: ContentTemplate(
        prompt=(
            "Generate a professional press release for a musician or writer based on "
            "this announcement: \"{prompt}\". The body should have at least two paragraphs."
        ),
        schema=_object(
            headline=_string(),
            subheadline=_string(),
            dateline=_string(),
            body=_string(),
            contactInfo=_string(),
        ),
        record=PressRelease,
    ),
    ContentKind.CONTACTS: ContentTemplate(
        prompt=(
            "Generate a list of 5 realistic, sample CRM contacts for a musician or writer "
            "in this genre: {prompt}. Include media, curators, and influencers."
        ),
        schema=_array(_object(
            id=_string(),
            name=_string(),
            email=_string(),
            type=_string(enum=["Media", "Fan", "Influencer", "Curator"]),
            tags=_strings(),
        )),
        record=Contact,
        many=True,
    ),
    ContentKind.WORKFLOWS: ContentTemplate(
        prompt=(
            "Generate 3 automation workflow ideas for a creator focused on: {prompt}. "
            "Describe the trigger, actions, and conceptual tools used "
            "(e.g., n8n, Mautic, WordPress)."
        ),
        schema=_array(_object(
            title=_string(),
            description=_string(),
            trigger=_string(),
            actions=_strings(),
            tools=_strings(),
        )),
        record=AutomationWorkflow,
        many=True,
    ),
    ContentKind.INTERACTIVE_CONCEPT: ContentTemplate(
        prompt=(
            "Generate a detailed concept for an AR/VR/MR interactive experience for a "
            "creative project based on this idea: \"{prompt}\". Include a title, "
            "description, interaction ideas, target platform (e.g., Spark AR), and a "
            "descriptive prompt for generating concept art."
        ),
        schema=_object(
            title=_string(),
            description=_string(),
            interactionIdeas=_strings(),
            platform=_string(),
            imagePrompt=_string(),
        ),
        record=InteractiveConcept,
    ),
    ContentKind.ANALYTICS: ContentTemplate(
        prompt=(
            "Generate a realistic set of marketing analytics data for an indie artist's "
            "recent album launch. Include KPIs, sentiment analysis, a 15-day engagement "
            "trend, and top performing content."
        ),
        schema=_object(
            kpis=_array(_object(
                metric=_string(),
                value=_string(),
                change=_string(),
                changeType=_string(enum=["increase", "decrease"]),
            )),
            sentiment=_object(
                positive={"type": "NUMBER"},
                neutral={"type": "NUMBER"},
                negative={"type": "NUMBER"},
            ),
            engagementTrend=_array(_object(
                day=_string(),
                likes={"type": "NUMBER"},
                comments={"type": "NUMBER"},
                shares={"type": "NUMBER"},
            )),
            topPerformingContent=_array(_object(
                content=_string(),
                platform=_string(),
                engagementRate=_string(),
            )),
        ),
        record=AnalyticsData,
    ),
    ContentKind.CONTENT_SCHEDULE: ContentTemplate(
        prompt=(
            "Create a 7-day social media content schedule to promote a project based on "
            "this goal: \"{prompt}\". For each day, suggest a post time, platform, and "
            "content idea."
        ),
        schema=_array(_object(
            day=_string(enum=WEEKDAYS),
            time=_string(),
            platform=_string(enum=PLATFORMS),
            content=_string(),
        )),
        record=ScheduledPost,
        many=True,
    ),
    ContentKind.SUBMISSIONS: ContentTemplate(
        prompt=(
            "Based on this creative work: \"{prompt}\", generate a list of 5 distinct "
            "submission opportunities. For each, identify the platform name, type "
            "(e.g., Playlist Curator, Music Blog), and write a short, personalized pitch."
        ),
        schema=_array(_object(
            platformName=_string(),
            platformType=_string(
                enum=["Playlist Curator", "Music Blog", "Literary Magazine", "Review Site"]
            ),
            pitch=_string(),
        )),
        record=Submission,
        many=True,
    ),
}
