"""Data models for tagclip.

Snapshot and template shapes come from external collaborators and are
validated with pydantic; everything derived at query time is a plain
dataclass.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class DataType(str, Enum):
    """Field data types emitted by the registry sync."""
    TEXT = "text"
    PLAIN = "plain"
    URL = "url"
    DATE = "date"
    REFERENCE = "reference"
    OPTIONS = "options"
    NUMBER = "number"
    CHECKBOX = "checkbox"


class _SnapshotModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class TargetTag(_SnapshotModel):
    """Tag whose nodes are valid values of a reference field."""
    id: str
    name: str


class FieldDefinition(_SnapshotModel):
    """One field declared on a tag."""
    attribute_id: str = Field(validation_alias=AliasChoices("attributeId", "attribute_id"))
    name: str
    normalized_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("normalizedName", "normalized_name")
    )
    description: Optional[str] = None
    data_type: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("dataType", "data_type")
    )
    target_tag: Optional[TargetTag] = Field(
        default=None,
        validation_alias=AliasChoices("targetSupertag", "targetTag", "target_tag"),
    )


class TagSchema(_SnapshotModel):
    """A tag definition with its own (non-inherited) fields."""
    id: str
    name: str
    normalized_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("normalizedName", "normalized_name")
    )
    description: Optional[str] = None
    color: Optional[str] = None
    fields: List[FieldDefinition] = Field(default_factory=list)
    extends: List[str] = Field(default_factory=list)

    @field_validator('fields', 'extends', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v


class RegistrySnapshot(_SnapshotModel):
    """The schema-registry file written by the sync process."""
    version: int = 1
    supertags: List[TagSchema]


@dataclass(frozen=True)
class ResolvedField:
    """A field of a resolved schema, annotated with where it came from."""
    attribute_id: str
    name: str
    data_type: Optional[str]
    origin_tag_name: str
    depth: int
    normalized_name: Optional[str] = None
    description: Optional[str] = None
    target_tag: Optional[TargetTag] = None

    @classmethod
    def from_definition(cls, definition: FieldDefinition, origin: TagSchema, depth: int) -> "ResolvedField":
        return cls(
            attribute_id=definition.attribute_id,
            name=definition.name,
            data_type=definition.data_type,
            origin_tag_name=origin.name,
            depth=depth,
            normalized_name=definition.normalized_name,
            description=definition.description,
            target_tag=definition.target_tag,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["target_tag"] = self.target_tag.model_dump() if self.target_tag else None
        return data


@dataclass
class ResolvedSchema:
    """A tag with own and inherited fields flattened into one list."""
    id: str
    name: str
    fields: List[ResolvedField]
    normalized_name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    extends: List[str] = field(default_factory=list)

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[ResolvedField]:
        """Case-insensitive lookup by field name."""
        wanted = name.lower()
        for f in self.fields:
            if f.name.lower() == wanted:
                return f
        return None

    def fields_within(self, max_depth: int) -> List[ResolvedField]:
        return [f for f in self.fields if f.depth <= max_depth]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "normalized_name": self.normalized_name,
            "description": self.description,
            "color": self.color,
            "extends": list(self.extends),
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass
class CapabilityScore:
    """How well a schema suits ad hoc captured content."""
    schema: ResolvedSchema
    score: int = 0
    has_url_field: bool = False
    url_field_name: Optional[str] = None
    text_fields: List[str] = field(default_factory=list)
    has_author_field: bool = False
    author_field_name: Optional[str] = None
    description_field_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.schema.name,
            "score": self.score,
            "has_url_field": self.has_url_field,
            "url_field_name": self.url_field_name,
            "text_fields": list(self.text_fields),
            "has_author_field": self.has_author_field,
            "author_field_name": self.author_field_name,
            "description_field_name": self.description_field_name,
        }


@dataclass
class CaptureContent:
    """The payload being filed. Supplied by browser/metadata collaborators."""
    source_locator: str
    title: str = ""
    selected_text: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    body_content: Optional[str] = None
    site_name: Optional[str] = None
    published_date: Optional[str] = None
    image: Optional[str] = None
    summary: Optional[str] = None
    keypoints: List[str] = field(default_factory=list)
    highlights: List[str] = field(default_factory=list)
    captured_at: datetime = field(default_factory=datetime.now)


class Template(BaseModel):
    """A domain-triggered recipe for rendering capture data into tag fields."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = ""
    name: str = Field(min_length=1)
    triggers: List[str] = Field(min_length=1)
    target_tag_name: str = Field(
        default="",
        validation_alias=AliasChoices("targetTagName", "supertag", "target_tag_name"),
    )
    fields: Dict[str, str] = Field(default_factory=dict)
    content_template: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("contentTemplate", "content_template")
    )
    is_builtin: bool = Field(default=False, validation_alias=AliasChoices("isBuiltin", "is_builtin"))


@dataclass
class RenderedTemplate:
    """Output of rendering a template against a capture."""
    supertag: str
    fields: Dict[str, str]
    content: Optional[str] = None


@dataclass
class FieldMapping:
    """Template field name -> schema field name, plus what could not be matched."""
    field_map: Dict[str, str]
    unmapped_fields: List[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.unmapped_fields


@dataclass
class NodeChild:
    """A nested child node in the outgoing node structure."""
    name: str
    children: List["NodeChild"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@dataclass
class NodePayload:
    """What the node-creation collaborator receives."""
    tag_name: str
    node_title: str
    fields: Dict[str, str]
    children: List[NodeChild] = field(default_factory=list)
    template_id: Optional[str] = None
    unmapped_fields: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "tagName": self.tag_name,
            "nodeTitle": self.node_title,
            "fields": dict(self.fields),
        }
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data
