"""Response models for the Brave Search API.

Every field is optional and unknown fields are kept (``extra="allow"``), so a
response round-trips to JSON without losing anything the models do not name.
See https://api.search.brave.com/app/documentation/web-search/responses
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class _Schema(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class MetaUrl(_Schema):
    scheme: Optional[str] = None
    netloc: Optional[str] = None
    hostname: Optional[str] = None
    favicon: Optional[str] = None
    path: Optional[str] = None


class Thumbnail(_Schema):
    src: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None
    bg_color: Optional[str] = None
    original: Optional[str] = None
    logo: Optional[bool] = None
    duplicated: Optional[bool] = None
    theme: Optional[str] = None


class Profile(_Schema):
    name: Optional[str] = None
    long_name: Optional[str] = None
    url: Optional[str] = None
    img: Optional[str] = None


class Language(_Schema):
    main: Optional[str] = None


class Rating(_Schema):
    rating_value: Optional[float] = None
    best_rating: Optional[float] = None
    review_count: Optional[int] = None
    profile: Optional[Profile] = None
    is_tripadvisor: Optional[bool] = None


class Query(_Schema):
    original: Optional[str] = None
    show_strict_warning: Optional[bool] = None
    altered: Optional[str] = None
    safesearch: Optional[bool] = None
    is_navigational: Optional[bool] = None
    is_geolocal: Optional[bool] = None
    local_decision: Optional[str] = None
    local_locations_idx: Optional[int] = None
    is_trending: Optional[bool] = None
    is_news_breaking: Optional[bool] = None
    ask_for_location: Optional[bool] = None
    language: Optional[Language] = None
    spellcheck_off: Optional[bool] = None
    country: Optional[str] = None
    bad_results: Optional[bool] = None
    should_fallback: Optional[bool] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    header_country: Optional[str] = None
    more_results_available: Optional[bool] = None


class Product(_Schema):
    type: Literal["Product"] = "Product"
    name: Optional[str] = None
    price: Optional[str] = None
    thumbnail: Optional[Thumbnail] = None
    description: Optional[str] = None
    rating: Optional[Rating] = None


class Review(_Schema):
    type: Literal["Review"] = "Review"
    name: Optional[str] = None
    thumbnail: Optional[Thumbnail] = None
    description: Optional[str] = None
    rating: Optional[Rating] = None


ProductReview = Annotated[Union[Product, Review], Field(discriminator="type")]


class VideoData(_Schema):
    duration: Optional[str] = None
    views: Optional[str] = None
    creator: Optional[str] = None
    publisher: Optional[str] = None
    thumbnail: Optional[Thumbnail] = None


class Article(_Schema):
    date: Optional[str] = None
    thumbnail: Optional[Thumbnail] = None
    is_accessible_for_free: Optional[bool] = None


class SearchResult(_Schema):
    """One entry of ``web.results``."""

    type: Optional[str] = None
    subtype: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    page_age: Optional[str] = None
    page_fetched: Optional[str] = None
    profile: Optional[Profile] = None
    language: Optional[str] = None
    family_friendly: Optional[bool] = None
    is_source_local: Optional[bool] = None
    is_source_both: Optional[bool] = None
    meta_url: Optional[MetaUrl] = None
    thumbnail: Optional[Thumbnail] = None
    age: Optional[str] = None
    video: Optional[VideoData] = None
    article: Optional[Article] = None
    product: Optional[ProductReview] = None
    product_cluster: Optional[list[ProductReview]] = None
    rating: Optional[Rating] = None
    content_type: Optional[str] = None
    extra_snippets: Optional[list[str]] = None


class Search(_Schema):
    type: Optional[str] = None
    results: Optional[list[SearchResult]] = None
    family_friendly: Optional[bool] = None


class NewsResult(_Schema):
    title: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    meta_url: Optional[MetaUrl] = None
    source: Optional[str] = None
    breaking: Optional[bool] = None
    thumbnail: Optional[Thumbnail] = None
    age: Optional[str] = None
    extra_snippets: Optional[list[str]] = None


class News(_Schema):
    type: Optional[str] = None
    results: Optional[list[NewsResult]] = None
    mutated_by_goggles: Optional[bool] = None


class VideoResult(_Schema):
    type: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    video: Optional[VideoData] = None
    meta_url: Optional[MetaUrl] = None
    thumbnail: Optional[Thumbnail] = None
    age: Optional[str] = None


class Videos(_Schema):
    type: Optional[str] = None
    results: Optional[list[VideoResult]] = None
    mutated_by_goggles: Optional[bool] = None


class ForumData(_Schema):
    forum_name: Optional[str] = None
    num_answers: Optional[int] = None
    score: Optional[str] = None
    title: Optional[str] = None
    question: Optional[str] = None
    top_comment: Optional[str] = None


class DiscussionResult(_Schema):
    type: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    data: Optional[ForumData] = None


class Discussions(_Schema):
    type: Optional[str] = None
    results: Optional[list[DiscussionResult]] = None
    mutated_by_goggles: Optional[bool] = None


class QA(_Schema):
    question: Optional[str] = None
    answer: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    meta_url: Optional[MetaUrl] = None


class FAQ(_Schema):
    type: Optional[str] = None
    results: Optional[list[QA]] = None


class PostalAddress(_Schema):
    type: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, alias="postalCode")
    street_address: Optional[str] = Field(default=None, alias="streetAddress")
    address_region: Optional[str] = Field(default=None, alias="addressRegion")
    address_locality: Optional[str] = Field(default=None, alias="addressLocality")
    display_address: Optional[str] = Field(default=None, alias="displayAddress")


class LocationResult(_Schema):
    type: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    provider_url: Optional[str] = None
    coordinates: Optional[list[float]] = None
    zoom_level: Optional[int] = None
    thumbnail: Optional[Thumbnail] = None
    postal_address: Optional[PostalAddress] = None
    price_range: Optional[str] = None
    rating: Optional[Rating] = None


class Locations(_Schema):
    type: Optional[str] = None
    results: Optional[list[LocationResult]] = None


class ResultReference(_Schema):
    type: Optional[str] = None
    index: Optional[int] = None
    all: Optional[bool] = None


class MixedResponse(_Schema):
    type: Optional[str] = None
    main: Optional[list[ResultReference]] = None
    top: Optional[list[ResultReference]] = None
    side: Optional[list[ResultReference]] = None


class GraphInfobox(_Schema):
    type: Optional[str] = None
    position: Optional[int] = None
    label: Optional[str] = None
    category: Optional[str] = None
    long_desc: Optional[str] = None
    thumbnail: Optional[Thumbnail] = None
    attributes: Optional[list[list[str]]] = None
    profiles: Optional[list[Profile]] = None
    website_url: Optional[str] = None
    ratings: Optional[list[Rating]] = None


class Summarizer(_Schema):
    """Key to pass to ``summarizer/search`` for the summary of this query."""

    type: Optional[str] = None
    key: str


class WebSearchApiResponse(_Schema):
    type: Optional[str] = None
    discussions: Optional[Discussions] = None
    faq: Optional[FAQ] = None
    infobox: Optional[GraphInfobox] = None
    locations: Optional[Locations] = None
    mixed: Optional[MixedResponse] = None
    news: Optional[News] = None
    query: Optional[Query] = None
    videos: Optional[Videos] = None
    web: Optional[Search] = None
    summarizer: Optional[Summarizer] = None


class TextLocation(_Schema):
    start: Optional[int] = None
    end: Optional[int] = None


class SummarizerAnswer(_Schema):
    text: Optional[str] = None
    location: Optional[TextLocation] = None


class ReferenceSource(_Schema):
    type: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None
    img: Optional[str] = None
    locations: Optional[list[TextLocation]] = None


class SummarizerResult(_Schema):
    type: Optional[str] = None
    summary: Optional[str] = None
    answer: Optional[SummarizerAnswer] = None
    references: Optional[list[ReferenceSource]] = None


class SummarizerSearchApiResponse(_Schema):
    type: Optional[str] = None
    status: Optional[str] = None
    title: Optional[str] = None
    results: Optional[list[SummarizerResult]] = None


class SuggestResult(_Schema):
    query: Optional[str] = None
    is_entity: Optional[bool] = None
    title: Optional[str] = None
    description: Optional[str] = None
    img: Optional[str] = None


class SuggestSearchApiResponse(_Schema):
    type: Optional[str] = None
    query: Optional[Query] = None
    results: Optional[list[SuggestResult]] = None
