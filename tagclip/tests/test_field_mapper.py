"""Tests for capture-to-field mapping."""

import pytest

from tagclip.engine.analyzer import CapabilityAnalyzer
from tagclip.engine.field_mapper import create_default_mapping, map_clip_to_fields
from tagclip.engine.models import CaptureContent, ResolvedField, ResolvedSchema


def make_schema(*fields):
    return ResolvedSchema(
        id="t",
        name="t",
        fields=[
            ResolvedField(attribute_id=str(i), name=n, data_type=t, origin_tag_name="t", depth=0)
            for i, (n, t) in enumerate(fields)
        ],
    )


@pytest.fixture
def clip():
    return CaptureContent(
        source_locator="https://example.com",
        title="Example",
        selected_text="Key idea",
    )


@pytest.fixture
def bookmark():
    return CapabilityAnalyzer().score(make_schema(("URL", "url"), ("Notes", "plain")))


class TestMapClipToFields:
    """Test mapping onto analyzer-detected fields."""

    def test_bookmark(self, clip, bookmark):
        assert map_clip_to_fields(clip, bookmark) == {
            "URL": "https://example.com",
            "Notes": "Key idea",
        }

    def test_bookmark_as_link(self, clip, bookmark):
        assert map_clip_to_fields(clip, bookmark, format_url_as_link=True) == {
            "URL": "[Example](https://example.com)",
            "Notes": "Key idea",
        }

    def test_link_without_title_uses_url(self, bookmark):
        clip = CaptureContent(source_locator="https://example.com")
        fields = map_clip_to_fields(clip, bookmark, format_url_as_link=True)
        assert fields["URL"] == "[https://example.com](https://example.com)"

    def test_empty_values_omitted(self, bookmark):
        clip = CaptureContent(source_locator="https://example.com", selected_text="")
        assert map_clip_to_fields(clip, bookmark) == {"URL": "https://example.com"}

    def test_no_url_field(self, clip):
        capability = CapabilityAnalyzer().score(make_schema(("Notes", None)))
        assert map_clip_to_fields(clip, capability) == {"Notes": "Key idea"}

    def test_zero_score_schema(self, clip):
        capability = CapabilityAnalyzer().score(make_schema(("Date", "date")))
        assert map_clip_to_fields(clip, capability) == {}

    def test_selected_text_goes_to_preferred_field(self, clip):
        capability = CapabilityAnalyzer().score(
            make_schema(("Snapshot", None), ("Summary", None), ("Notes", None))
        )
        assert map_clip_to_fields(clip, capability)["Notes"] == "Key idea"

    def test_author_and_description(self):
        capability = CapabilityAnalyzer().score(
            make_schema(("Link", "url"), ("Writer", None), ("About", None))
        )
        clip = CaptureContent(
            source_locator="https://example.com/post",
            author="Ada",
            description="A post",
        )

        assert map_clip_to_fields(clip, capability) == {
            "Link": "https://example.com/post",
            "Writer": "Ada",
            "About": "A post",
        }

    def test_description_overrides_selection_on_shared_field(self):
        capability = CapabilityAnalyzer().score(make_schema(("Summary", None)))
        clip = CaptureContent(source_locator="", selected_text="selected", description="described")

        assert map_clip_to_fields(clip, capability) == {"Summary": "described"}

    def test_only_fields_from_schema(self, clip, store):
        capability = CapabilityAnalyzer().score(store.get_tag("article"))
        clip.author = "Someone"
        fields = map_clip_to_fields(clip, capability)

        assert set(fields) <= set(capability.schema.field_names())
        assert fields["URL"] == "https://example.com"
        assert fields["Author"] == "Someone"


class TestDefaultMapping:
    """Test the schema-less fallback."""

    def test_default_names(self):
        clip = CaptureContent(
            source_locator="https://example.com",
            title="Example",
            selected_text="Key idea",
            author="Ada",
            description="Desc",
        )
        assert create_default_mapping(clip) == {
            "URL": "https://example.com",
            "Notes": "Key idea",
            "Author": "Ada",
            "Description": "Desc",
        }

    def test_partial_content(self, clip):
        assert create_default_mapping(clip, format_url_as_link=True) == {
            "URL": "[Example](https://example.com)",
            "Notes": "Key idea",
        }


def test_new_prefix_passes_through(bookmark):
    clip = CaptureContent(source_locator="https://example.com", selected_text="NEW:Idea")
    assert map_clip_to_fields(clip, bookmark)["Notes"] == "NEW:Idea"
