"""Schema-adaptive content mapping and templating."""

from .analyzer import CapabilityAnalyzer, best_text_field
from .capture import CaptureService
from .config import Config
from .errors import (
    BuiltinTemplateError,
    FilterArgumentError,
    TagclipError,
    TemplateError,
    TemplateStoreError,
    TemplateSyntaxError,
    UnknownFilterError,
)
from .field_mapper import create_default_mapping, map_clip_to_fields
from .models import (
    CapabilityScore,
    CaptureContent,
    FieldDefinition,
    FieldMapping,
    NodeChild,
    NodePayload,
    RenderedTemplate,
    ResolvedField,
    ResolvedSchema,
    TagSchema,
    Template,
)
from .paste import build_paste, parse_outline
from .schema_store import SchemaStore
from .smart_mapper import apply_smart_field_mapping, create_smart_field_mapping
from .template_store import TemplateLibrary, TemplateStore
from .templates import TemplateEngine, matches_domain_pattern

__all__ = [
    "BuiltinTemplateError",
    "CapabilityAnalyzer",
    "CapabilityScore",
    "CaptureContent",
    "CaptureService",
    "Config",
    "FieldDefinition",
    "FieldMapping",
    "FilterArgumentError",
    "NodeChild",
    "NodePayload",
    "RenderedTemplate",
    "ResolvedField",
    "ResolvedSchema",
    "SchemaStore",
    "TagSchema",
    "TagclipError",
    "Template",
    "TemplateEngine",
    "TemplateError",
    "TemplateLibrary",
    "TemplateStore",
    "TemplateStoreError",
    "TemplateSyntaxError",
    "UnknownFilterError",
    "apply_smart_field_mapping",
    "best_text_field",
    "build_paste",
    "create_default_mapping",
    "create_smart_field_mapping",
    "map_clip_to_fields",
    "matches_domain_pattern",
    "parse_outline",
]
