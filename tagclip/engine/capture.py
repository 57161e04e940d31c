"""Capture pipeline: schema lookup, template rendering, field alignment."""

from typing import Dict, List, Optional

from loguru import logger

from .analyzer import CapabilityAnalyzer
from .config import Config
from .content import split_paragraphs
from .field_mapper import create_default_mapping, map_clip_to_fields
from .models import CapabilityScore, CaptureContent, NodeChild, NodePayload, ResolvedSchema
from .schema_store import SchemaStore
from .smart_mapper import apply_smart_field_mapping, create_smart_field_mapping
from .template_store import TemplateLibrary, TemplateStore
from .templates import TemplateEngine


class CaptureService:
    """
    Turns a capture into the node structure handed to node creation.

    Flow:
    1. Look for a template triggered by the source locator
    2. If found, render it and align its field names to the target schema
    3. Otherwise map the capture straight onto the schema's detected fields
    4. Without any schema, fall back to fixed field names

    Template errors propagate; schema problems only degrade the mapping.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        store: Optional[SchemaStore] = None,
        analyzer: Optional[CapabilityAnalyzer] = None,
        engine: Optional[TemplateEngine] = None,
        library: Optional[TemplateLibrary] = None
    ):
        self.config = config or Config()
        self.store = store or SchemaStore(self.config.registry.snapshot_path)
        self.analyzer = analyzer or CapabilityAnalyzer()

        if engine is None:
            if library is None:
                user_path = self.config.templates.user_templates_path
                library = TemplateLibrary(TemplateStore(user_path) if user_path else None)
            engine = TemplateEngine(
                library=library,
                words_per_minute=self.config.templates.words_per_minute,
                date_format=self.config.templates.date_format,
            )
        self.engine = engine

    def get_schema(self, tag_name: str) -> Optional[ResolvedSchema]:
        return self.store.get_tag(_clean_tag(tag_name))

    def suggest_tags(self, min_score: Optional[int] = None, limit: Optional[int] = None) -> List[CapabilityScore]:
        """Tags ranked by how well they suit captured content."""
        ranking = self.config.ranking
        return self.analyzer.rank(
            self.store.list_tags(),
            min_score=ranking.min_score if min_score is None else min_score,
            limit=ranking.limit if limit is None else limit,
        )

    def build_node(
        self,
        content: CaptureContent,
        tag_name: Optional[str] = None,
        format_url_as_link: Optional[bool] = None,
        use_templates: bool = True
    ) -> NodePayload:
        if format_url_as_link is None:
            format_url_as_link = self.config.mapping.format_url_as_link

        title = content.title or content.source_locator

        template = None
        if use_templates and self.config.templates.enabled:
            template = self.engine.find_template(content.source_locator)

        if template is not None:
            rendered = self.engine.render(template, content)
            target = _clean_tag(tag_name or rendered.supertag or self.config.mapping.default_tag)
            fields = rendered.fields
            unmapped: List[str] = []

            schema = self.store.get_tag(target)
            if schema is not None:
                mapping = create_smart_field_mapping(list(fields), schema)
                if not mapping.is_complete:
                    logger.warning(
                        f"Template '{template.id}' fields not found on tag '{target}': {mapping.unmapped_fields}"
                    )
                fields = apply_smart_field_mapping(fields, mapping)
                unmapped = mapping.unmapped_fields
            else:
                logger.debug(f"No schema for tag '{target}', keeping template field names")

            children = [NodeChild(name=p) for p in split_paragraphs(rendered.content or "")]
            logger.info(f"Rendered template '{template.id}' for {content.source_locator} -> #{target}")
            return NodePayload(
                tag_name=target,
                node_title=title,
                fields=fields,
                children=children,
                template_id=template.id,
                unmapped_fields=unmapped,
            )

        target = _clean_tag(tag_name or self.config.mapping.default_tag)
        fields = self._map_without_template(content, target, format_url_as_link)
        children = [NodeChild(name=h) for h in content.highlights if h.strip()]
        return NodePayload(tag_name=target, node_title=title, fields=fields, children=children)

    def _map_without_template(
        self,
        content: CaptureContent,
        tag_name: str,
        format_url_as_link: bool
    ) -> Dict[str, str]:
        schema = self.store.get_tag(tag_name)
        if schema is None:
            logger.debug(f"No schema for tag '{tag_name}', using default field names")
            return create_default_mapping(content, format_url_as_link)

        capability = self.analyzer.score(schema)
        return map_clip_to_fields(content, capability, format_url_as_link)


def _clean_tag(tag_name: str) -> str:
    return tag_name.strip().lstrip("#").strip()
