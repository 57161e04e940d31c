"""Map captured content onto a scored schema's field names."""

from typing import Dict, Optional

from .analyzer import best_text_field
from .models import CapabilityScore, CaptureContent
from .paste import format_link


DEFAULT_URL_FIELD = "URL"
DEFAULT_TEXT_FIELD = "Notes"
DEFAULT_AUTHOR_FIELD = "Author"
DEFAULT_DESCRIPTION_FIELD = "Description"


def _url_value(content: CaptureContent, format_url_as_link: bool) -> Optional[str]:
    if not content.source_locator:
        return None
    if format_url_as_link:
        return format_link(content.title, content.source_locator)
    return content.source_locator


def map_clip_to_fields(
    content: CaptureContent,
    capability: CapabilityScore,
    format_url_as_link: bool = False
) -> Dict[str, str]:
    """
    Fill the fields the analyzer detected on a schema.

    - source locator -> URL field (bare or as [title](url))
    - selected text -> best text field (Notes > Summary > Highlight > Snapshot > first)
    - author -> author field
    - description -> description field

    Slots without a destination and empty values are left out. When the
    description field is also the chosen text field, the description wins.
    """
    fields: Dict[str, str] = {}

    url = _url_value(content, format_url_as_link)
    if url and capability.has_url_field and capability.url_field_name:
        fields[capability.url_field_name] = url

    if content.selected_text and capability.text_fields:
        text_field = best_text_field(capability.text_fields)
        if text_field:
            fields[text_field] = content.selected_text

    if content.author and capability.has_author_field and capability.author_field_name:
        fields[capability.author_field_name] = content.author

    if content.description and capability.description_field_name:
        fields[capability.description_field_name] = content.description

    return fields


def create_default_mapping(content: CaptureContent, format_url_as_link: bool = False) -> Dict[str, str]:
    """Field mapping for when no schema is available at all."""
    fields: Dict[str, str] = {}

    url = _url_value(content, format_url_as_link)
    if url:
        fields[DEFAULT_URL_FIELD] = url
    if content.selected_text:
        fields[DEFAULT_TEXT_FIELD] = content.selected_text
    if content.author:
        fields[DEFAULT_AUTHOR_FIELD] = content.author
    if content.description:
        fields[DEFAULT_DESCRIPTION_FIELD] = content.description

    return fields
