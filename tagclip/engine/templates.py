"""
Template engine: pick a template for a capture source and render it.

Matching: each trigger is a glob over ``domain/path`` (``www.`` dropped,
case-insensitive). A trigger without a path matches the domain and its
subdomains. The first template in priority order with any matching trigger
wins.

Rendering: ``{{variable|filter:args|...}}`` placeholders are resolved
against a context built from the capture. Missing variables render as an
empty string; unknown filters raise.
"""

import re
from fnmatch import fnmatchcase
from typing import Any, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from .content import (
    DEFAULT_WORDS_PER_MINUTE,
    calculate_reading_time,
    count_words,
    extract_domain,
    extract_domain_and_path,
    extract_path,
)
from .errors import TemplateError, TemplateSyntaxError, UnknownFilterError
from .filters import (
    DEFAULT_FILTERS,
    HIDDEN,
    FilterCall,
    FilterFunction,
    apply_filters,
    format_date,
    parse_filter_expression,
    to_text,
)
from .models import CaptureContent, RenderedTemplate, Template
from .template_store import TemplateLibrary


PLACEHOLDER = re.compile(r'\{\{(.*?)\}\}', re.DOTALL)


def _normalize_pattern(pattern: str) -> str:
    pattern = pattern.strip().lower()
    pattern = re.sub(r'^[a-z]+://', '', pattern)
    if pattern.startswith("www."):
        pattern = pattern[4:]
    return pattern.rstrip("/")


def matches_domain_pattern(url: str, pattern: str) -> bool:
    """Glob-match a capture source against one trigger pattern."""
    pattern = _normalize_pattern(pattern)
    if not pattern:
        return False

    target = extract_domain_and_path(url)
    if "/" not in pattern:
        host = target.split("/", 1)[0]
        if fnmatchcase(host, pattern):
            return True
        return not any(c in pattern for c in "*?[") and host.endswith("." + pattern)

    return fnmatchcase(target, pattern)


def find_matching_template(url: str, templates: Iterable[Template]) -> Optional[Template]:
    for template in templates:
        if any(matches_domain_pattern(url, trigger) for trigger in template.triggers):
            return template
    return None


class TemplateEngine:
    """Matches, validates and renders templates."""

    def __init__(
        self,
        library: Optional[TemplateLibrary] = None,
        filters: Optional[Dict[str, FilterFunction]] = None,
        words_per_minute: int = DEFAULT_WORDS_PER_MINUTE,
        date_format: str = "YYYY-MM-DD"
    ):
        self.library = library or TemplateLibrary()
        self.filters: Dict[str, FilterFunction] = dict(DEFAULT_FILTERS)
        if filters:
            self.filters.update(filters)
        self.words_per_minute = words_per_minute
        self.date_format = date_format

    def register_filter(self, name: str, func: FilterFunction) -> None:
        self.filters[name] = func

    def find_template(self, url: str) -> Optional[Template]:
        if not url:
            return None
        template = find_matching_template(url, self.library.all())
        if template:
            logger.debug(f"Template '{template.id}' matches {url}")
        return template

    def create_context(self, content: CaptureContent) -> Dict[str, Any]:
        """Variables available to template expressions."""
        domain = extract_domain(content.source_locator) if content.source_locator else ""
        path = extract_path(content.source_locator) if content.source_locator else ""
        body = content.body_content or ""
        counted = body or content.selected_text or ""

        return {
            "url": content.source_locator,
            "title": content.title,
            "domain": domain,
            "site": content.site_name or domain,
            "site_name": content.site_name,
            "path": path,
            "segments": [s for s in path.split("/") if s],
            "author": content.author,
            "description": content.description,
            "selection": content.selected_text,
            "highlights": list(content.highlights),
            "content": body,
            "summary": content.summary,
            "keypoints": list(content.keypoints),
            "image": content.image,
            "published": content.published_date,
            "date": format_date(content.captured_at, self.date_format),
            "time": format_date(content.captured_at, "HH:mm"),
            "datetime": content.captured_at,
            "wordcount": count_words(counted),
            "readtime": calculate_reading_time(counted, self.words_per_minute),
        }

    def render_string(self, text: str, context: Dict[str, Any]) -> Optional[str]:
        """
        Substitute every placeholder in `text`.

        All placeholders are parsed and their filters checked before any is
        evaluated, so a typo fails even when an earlier placeholder hides.
        Returns None when a placeholder was hidden by ``hideif``.
        """
        parsed = self._parse_placeholders(text)
        output: List[str] = []
        position = 0

        for match, variable, calls in parsed:
            output.append(text[position:match.start()])
            value = context.get(variable)
            if value is None:
                value = ""
            value = apply_filters(value, calls, self.filters, match.group(1).strip())
            if value is HIDDEN:
                return None
            output.append(to_text(value))
            position = match.end()

        output.append(text[position:])
        return "".join(output)

    def render(self, template: Template, content: CaptureContent) -> RenderedTemplate:
        """Render all field expressions and the content template. Empty results are dropped."""
        context = self.create_context(content)
        fields: Dict[str, str] = {}

        for field_name, expression in template.fields.items():
            value = self.render_string(expression, context)
            if value is None or not value.strip():
                continue
            fields[field_name] = value

        body: Optional[str] = None
        if template.content_template:
            rendered = self.render_string(template.content_template, context)
            if rendered and rendered.strip():
                body = rendered.strip()

        return RenderedTemplate(supertag=template.target_tag_name, fields=fields, content=body)

    def validate(self, template: Template) -> List[str]:
        """Problems that would make rendering fail or misbehave. Never raises."""
        errors: List[str] = []
        if not template.target_tag_name.strip():
            errors.append("Template has no target tag")

        expressions = dict(template.fields)
        if template.content_template:
            expressions["<content>"] = template.content_template

        for field_name, text in expressions.items():
            for problem in self._check_expression(text):
                errors.append(f"{field_name}: {problem}")

        return errors

    def _check_expression(self, text: str) -> List[str]:
        """Every problem in one expression, one entry per bad placeholder."""
        problems: List[str] = []
        if "{{" in PLACEHOLDER.sub("", text):
            problems.append("unclosed placeholder")

        for match in PLACEHOLDER.finditer(text):
            try:
                _, calls = parse_filter_expression(match.group(1))
            except TemplateError as e:
                problems.append(str(e))
                continue
            for name, _ in calls:
                if name not in self.filters:
                    problems.append(f"unknown filter '{name}'")
        return problems

    def _parse_placeholders(self, text: str) -> List[Tuple[re.Match, str, List[FilterCall]]]:
        """Parse all placeholders up front. Raises on syntax errors and unknown filters."""
        if "{{" in PLACEHOLDER.sub("", text):
            raise TemplateSyntaxError("Unclosed placeholder", text)

        parsed = []
        for match in PLACEHOLDER.finditer(text):
            expression = match.group(1)
            variable, calls = parse_filter_expression(expression)
            for name, _ in calls:
                if name not in self.filters:
                    raise UnknownFilterError(name, expression.strip())
            parsed.append((match, variable, calls))
        return parsed
