"""Pydantic schemas: per-template page IR, content blocks and the run report."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Shared building blocks
# ---------------------------------------------------------------------------

class PageMetadata(BaseModel):
    """Key/value pairs emitted as the trailing ``Metadata`` block."""

    title: str = ""
    description: str = ""
    template: str = ""
    author: str = ""
    date: str = ""
    image: str = ""
    tags: str = ""
    category: str = ""


class ImageRef(BaseModel):
    src: str
    alt: str = ""


class LinkRef(BaseModel):
    text: str
    href: str = ""


class ShareLink(BaseModel):
    platform: str
    href: str


class Card(BaseModel):
    """One card of a related-resources or resource grid."""

    title: str
    description: str = ""
    image: str = ""
    image_alt: str = ""
    link: str = ""
    link_text: str = ""
    category: str = ""


class Stat(BaseModel):
    value: str
    description: str = ""


class AccordionItem(BaseModel):
    title: str
    body: str = ""


class ContentBlock(BaseModel):
    """One block of an article body, in document order."""

    kind: Literal["heading", "paragraph", "list", "quote", "image"]
    text: str = ""
    level: int = 0
    ordered: bool = False
    items: list[str] = Field(default_factory=list)
    src: str = ""
    alt: str = ""


class Hero(BaseModel):
    title: str = ""
    subtitle: str = ""
    description: str = ""
    cta: LinkRef | None = None
    image: ImageRef | None = None


class GenericSection(BaseModel):
    """A content section captured without template-specific structure."""

    heading: str = ""
    subtitle: str = ""
    paragraphs: list[str] = Field(default_factory=list)
    links: list[LinkRef] = Field(default_factory=list)
    images: list[ImageRef] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Per-template IR
# ---------------------------------------------------------------------------

class AuthorBio(BaseModel):
    name: str = ""
    link: str = ""
    avatar: str = ""
    bio: str = ""


class BlogArticle(BaseModel):
    metadata: PageMetadata
    title: str = ""
    date: str = ""
    featured_image: str = ""
    author: AuthorBio = Field(default_factory=AuthorBio)
    body: list[ContentBlock] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    share_links: list[ShareLink] = Field(default_factory=list)
    related: list[Card] = Field(default_factory=list)


class GatedResource(BaseModel):
    metadata: PageMetadata
    title: str = ""
    featured_image: str = ""
    subtitle: str = ""
    paragraphs: list[str] = Field(default_factory=list)
    bullet_points: list[str] = Field(default_factory=list)
    form_id: str = ""
    form_heading: str = "Read now"
    tags: list[str] = Field(default_factory=list)
    share_links: list[ShareLink] = Field(default_factory=list)
    related: list[Card] = Field(default_factory=list)


class CaseSummary(BaseModel):
    heading: str = ""
    challenge_heading: str = ""
    challenge_text: str = ""
    solution_heading: str = ""
    solution_text: str = ""


class CaseNarrative(BaseModel):
    subtitle: str = ""
    heading: str = ""
    challenge_heading: str = ""
    challenge_lead: str = ""
    challenge_text: str = ""
    solution_heading: str = ""
    solution_lead: str = ""
    solution_text: str = ""
    cta: LinkRef | None = None


class CaseStudy(BaseModel):
    metadata: PageMetadata
    title: str = ""
    hero_image: ImageRef | None = None
    summary: CaseSummary = Field(default_factory=CaseSummary)
    stats: list[Stat] = Field(default_factory=list)
    narrative: CaseNarrative = Field(default_factory=CaseNarrative)
    tags: list[str] = Field(default_factory=list)
    share_links: list[ShareLink] = Field(default_factory=list)
    related: list[Card] = Field(default_factory=list)
    resources_url: str = ""


class ProductIntro(BaseModel):
    heading: str = ""
    descriptions: list[str] = Field(default_factory=list)
    benefits_heading: str = "Key benefits"
    benefits: list[str] = Field(default_factory=list)


class AccordionGroup(BaseModel):
    subtitle: str = ""
    heading: str = ""
    items: list[AccordionItem] = Field(default_factory=list)
    key_points: list[str] = Field(default_factory=list)


class StatGroup(BaseModel):
    heading: str = ""
    items: list[Stat] = Field(default_factory=list)
    cta: LinkRef | None = None


class CardGroup(BaseModel):
    subtitle: str = ""
    heading: str = ""
    view_all: LinkRef | None = None
    cards: list[Card] = Field(default_factory=list)


class Partnership(BaseModel):
    heading: str = ""
    description: str = ""
    image: ImageRef | None = None


class CallToAction(BaseModel):
    subtitle: str = ""
    heading: str = ""
    description: str = ""
    cta: LinkRef | None = None
    image: ImageRef | None = None


class SolutionsPage(BaseModel):
    metadata: PageMetadata
    hero: Hero = Field(default_factory=Hero)
    intro: ProductIntro = Field(default_factory=ProductIntro)
    capabilities: AccordionGroup = Field(default_factory=AccordionGroup)
    stats: StatGroup = Field(default_factory=StatGroup)
    partnership: Partnership = Field(default_factory=Partnership)
    meeting: CallToAction = Field(default_factory=CallToAction)
    # Populated only when none of the structured blocks above were found
    fallback_sections: list[GenericSection] = Field(default_factory=list)
    fallback_accordion: list[AccordionItem] = Field(default_factory=list)


class Testimonial(BaseModel):
    quote: str
    name: str = ""
    title: str = ""
    link: LinkRef | None = None


class BuiltForPage(BaseModel):
    metadata: PageMetadata
    hero: Hero = Field(default_factory=Hero)
    use_cases: AccordionGroup = Field(default_factory=AccordionGroup)
    capabilities: CardGroup = Field(default_factory=CardGroup)
    testimonial_image: ImageRef | None = None
    testimonials: list[Testimonial] = Field(default_factory=list)
    resources: CardGroup = Field(default_factory=CardGroup)
    meeting: CallToAction = Field(default_factory=CallToAction)
    fallback_sections: list[GenericSection] = Field(default_factory=list)


class CompanySection(BaseModel):
    subtitle: str = ""
    heading: str = ""
    paragraphs: list[str] = Field(default_factory=list)
    images: list[ImageRef] = Field(default_factory=list)
    stats: list[Stat] = Field(default_factory=list)
    milestones: list[AccordionItem] = Field(default_factory=list)
    cards: list[Card] = Field(default_factory=list)
    links: list[LinkRef] = Field(default_factory=list)


class CompanyPage(BaseModel):
    metadata: PageMetadata
    hero: Hero = Field(default_factory=Hero)
    hero_paragraphs: list[str] = Field(default_factory=list)
    sections: list[CompanySection] = Field(default_factory=list)


PageContent = (
    BlogArticle | GatedResource | CaseStudy | SolutionsPage | BuiltForPage | CompanyPage
)


# ---------------------------------------------------------------------------
# Run bookkeeping
# ---------------------------------------------------------------------------

class WorkStatus(StrEnum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class WorkItem(BaseModel):
    """One URL bound to its template for the duration of a run."""

    model_config = ConfigDict(frozen=True)

    url: str
    template: str
    status: WorkStatus = WorkStatus.PENDING


class PageResult(BaseModel):
    """Outcome of processing one :class:`WorkItem`."""

    model_config = ConfigDict(frozen=True)

    url: str
    template: str
    status: WorkStatus
    path: str = ""
    chars: int = 0
    error: str = ""


class ErrorEntry(BaseModel):
    url: str
    error: str


class RunReport(BaseModel):
    """Counts and failures of one invocation.

    Instances are immutable; :meth:`record` returns a new report so a run
    can be expressed as a fold over per-item results.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    total: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0
    errors: tuple[ErrorEntry, ...] = ()

    def record(self, result: PageResult) -> RunReport:
        update: dict[str, object] = {"total": self.total + 1}
        if result.status is WorkStatus.SUCCESS:
            update["success"] = self.success + 1
        elif result.status is WorkStatus.SKIPPED:
            update["skipped"] = self.skipped + 1
        else:
            update["failed"] = self.failed + 1
            update["errors"] = (*self.errors, ErrorEntry(url=result.url, error=result.error))
        return self.model_copy(update=update)

    def to_json(self) -> str:
        payload = self.model_dump(mode="json")
        payload["timestamp"] = self.timestamp.isoformat().replace("+00:00", "Z")
        return json.dumps(payload, indent=2, ensure_ascii=False)
