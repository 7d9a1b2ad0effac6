"""
Content Schemas - generated content records

The generative service answers in camelCase JSON; every model accepts that
form through aliases and serializes back to it, so cached values keep the
same shape the service produced.
"""

from typing import List, Literal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


Platform = Literal["Facebook", "X", "Instagram", "LinkedIn", "TikTok", "Mastodon", "Bluesky"]
Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class ContentKind(str, Enum):
    """Content kinds the service can generate"""

    SOCIAL_POSTS = "social_posts"
    BLOG_IDEAS = "blog_ideas"
    PRESS_RELEASE = "press_release"
    IMAGE = "image"
    VIDEO = "video"
    CONTACTS = "contacts"
    WORKFLOWS = "workflows"
    INTERACTIVE_CONCEPT = "interactive_concept"
    ANALYTICS = "analytics"
    CONTENT_SCHEDULE = "content_schedule"
    SUBMISSIONS = "submissions"


class GenerationRequest(BaseModel):
    """A single user generation action"""

    kind: ContentKind
    prompt: str = ""


class ContentRecord(BaseModel):
    """Base for records returned by the generative service"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class SocialMediaPost(ContentRecord):
    platform: Platform
    content: str
    hashtags: List[str] = Field(default_factory=list)
    visual_suggestion: str = ""


class BlogIdea(ContentRecord):
    title: str
    outline: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)


class PressRelease(ContentRecord):
    headline: str
    subheadline: str = ""
    dateline: str = ""
    body: str
    contact_info: str = ""


class GeneratedImage(ContentRecord):
    """Image returned as a data URL"""

    data_url: str


class Contact(ContentRecord):
    id: str
    name: str
    email: str
    type: Literal["Media", "Fan", "Influencer", "Curator"]
    tags: List[str] = Field(default_factory=list)


class AutomationWorkflow(ContentRecord):
    title: str
    description: str
    trigger: str
    actions: List[str] = Field(default_factory=list)
    tools: List[str] = Field(default_factory=list)


class InteractiveConcept(ContentRecord):
    title: str
    description: str
    interaction_ideas: List[str] = Field(default_factory=list)
    platform: str
    image_prompt: str = ""


class KPI(ContentRecord):
    metric: str
    value: str
    change: str
    change_type: Literal["increase", "decrease"]


class Sentiment(ContentRecord):
    positive: float
    neutral: float
    negative: float


class EngagementTrend(ContentRecord):
    day: str
    likes: float
    comments: float
    shares: float


class TopContent(ContentRecord):
    content: str
    platform: str
    engagement_rate: str


class AnalyticsData(ContentRecord):
    kpis: List[KPI] = Field(default_factory=list)
    sentiment: Sentiment
    engagement_trend: List[EngagementTrend] = Field(default_factory=list)
    top_performing_content: List[TopContent] = Field(default_factory=list)


class ScheduledPost(ContentRecord):
    day: Weekday
    time: str
    platform: Platform
    content: str


class Submission(ContentRecord):
    platform_name: str
    platform_type: Literal["Playlist Curator", "Music Blog", "Literary Magazine", "Review Site"]
    pitch: str
