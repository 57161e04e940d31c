"""
Alias-table mapping from template field names to a schema's real field names.

Templates are written against abstract names ("URL", "Author", "Reading
Time"); each user's workspace names its fields differently. Resolution per
template field:

1. exact, case-insensitive match against the alias list, in alias order
2. substring containment either way, in alias order
3. otherwise the template name is kept verbatim and reported as unmapped

A schema field already taken by another template field is skipped, so two
template fields never write to the same schema field.
"""

from typing import Dict, Iterable, List, Optional, Set

from loguru import logger

from .models import FieldMapping, ResolvedField, ResolvedSchema


# Order matters: first match wins
FIELD_ALIASES: Dict[str, List[str]] = {
    "URL": ["URL", "Url", "url", "Link", "link", "Source", "source", "Href", "href"],
    "Author": ["Author", "author", "Creator", "creator", "By", "by", "Writer", "writer"],
    "Channel": ["Channel", "channel", "Author", "author", "Creator", "creator", "By", "by"],
    "Description": [
        "Description", "description", "Excerpt", "excerpt",
        "About", "about", "Overview", "overview",
    ],
    "Summary": [
        "Summary", "summary", "Abstract", "abstract", "Synopsis", "synopsis",
        "TL;DR", "tldr", "Description", "description",
    ],
    "Title": ["Title", "title", "Name", "name", "Headline", "headline"],
    "Clipped": [
        "Clipped", "clipped", "Date", "date", "Added", "added",
        "Created", "created", "Saved", "saved",
    ],
    "Reading Time": [
        "Reading Time", "reading time", "ReadTime", "readtime", "Duration", "duration",
        "Length", "length", "Time", "time",
    ],
    "Site": ["Site", "site", "Source", "source", "Website", "website", "Domain", "domain"],
    "Subreddit": [
        "Subreddit", "subreddit", "Community", "community", "Forum", "forum", "Site", "site",
    ],
}


def find_matching_field(
    template_field: str,
    schema_fields: List[ResolvedField],
    aliases: Optional[Dict[str, List[str]]] = None,
    claimed: Optional[Set[str]] = None
) -> Optional[str]:
    """Best schema field name for one template field, or None. Claimed names are skipped."""
    table = FIELD_ALIASES if aliases is None else aliases
    candidates = table.get(template_field) or [template_field]
    taken = claimed or set()
    names = [f.name for f in schema_fields if f.name and f.name not in taken]

    for alias in candidates:
        wanted = alias.lower()
        for name in names:
            if name.lower() == wanted:
                return name

    for alias in candidates:
        wanted = alias.lower()
        for name in names:
            lowered = name.lower()
            if wanted in lowered or lowered in wanted:
                return name

    return None


def create_smart_field_mapping(
    template_fields: Iterable[str],
    schema: ResolvedSchema,
    aliases: Optional[Dict[str, List[str]]] = None
) -> FieldMapping:
    """
    Resolve every template field to a distinct schema field.

    A template field named exactly like a schema field claims it first; the
    rest go through the alias table in template order. A schema field
    receives at most one template field, so no value is overwritten.
    """
    template_fields = list(template_fields)
    resolved: Dict[str, str] = {}
    claimed: Set[str] = set()

    for template_field in template_fields:
        exact = schema.get_field(template_field)
        if exact is not None and exact.name not in claimed:
            resolved[template_field] = exact.name
            claimed.add(exact.name)

    for template_field in template_fields:
        if template_field in resolved:
            continue
        schema_field = find_matching_field(template_field, schema.fields, aliases, claimed)
        if schema_field:
            resolved[template_field] = schema_field
            claimed.add(schema_field)

    field_map: Dict[str, str] = {}
    unmapped: List[str] = []
    for template_field in template_fields:
        if template_field in resolved:
            field_map[template_field] = resolved[template_field]
        else:
            field_map[template_field] = template_field
            unmapped.append(template_field)

    if unmapped:
        logger.debug(f"Unmapped template fields for tag '{schema.name}': {unmapped}")

    return FieldMapping(field_map=field_map, unmapped_fields=unmapped)


def apply_smart_field_mapping(fields: Dict[str, str], mapping: FieldMapping) -> Dict[str, str]:
    """Rename keys through the mapping. Values pass through untouched."""
    result: Dict[str, str] = {}
    for template_field, value in fields.items():
        result[mapping.field_map.get(template_field, template_field)] = value
    return result
