"""Tests for template matching, rendering and validation."""

from datetime import datetime

import pytest

from tagclip.engine.builtin_templates import builtin_templates, get_builtin_template, is_builtin_template
from tagclip.engine.errors import TemplateSyntaxError, UnknownFilterError
from tagclip.engine.models import CaptureContent, Template
from tagclip.engine.template_store import TemplateLibrary
from tagclip.engine.templates import TemplateEngine, find_matching_template, matches_domain_pattern


@pytest.fixture
def engine():
    return TemplateEngine()


@pytest.fixture
def context(engine):
    return engine.create_context(CaptureContent(
        source_locator="https://www.example.com/Blog/Post-1/",
        title="Hello World",
        author="Ada",
        body_content="one two three",
        captured_at=datetime(2024, 3, 5, 9, 30),
    ))


class TestDomainMatching:
    """Test trigger glob matching."""

    @pytest.mark.parametrize("url,pattern", [
        ("https://github.com/org/repo", "github.com/*/*"),
        ("https://www.github.com/org/repo", "github.com/*/*"),
        ("https://GitHub.com/Org/Repo", "github.com/*/*"),
        ("https://github.com/org/repo/", "github.com/*/*"),
        ("https://en.wikipedia.org/wiki/Python", "*.wikipedia.org/wiki/*"),
        ("https://www.youtube.com/watch?v=abc", "youtube.com/watch*"),
        ("https://blog.example.com/post", "example.com"),
        ("https://example.com/post", "https://www.example.com"),
        ("example.com/post", "example.com/*"),
    ])
    def test_matches(self, url, pattern):
        assert matches_domain_pattern(url, pattern)

    @pytest.mark.parametrize("url,pattern", [
        ("https://github.com/org", "github.com/*/*"),
        ("https://gitlab.com/org/repo", "github.com/*/*"),
        ("https://notexample.com/post", "example.com"),
        ("https://example.com.evil.io/", "example.com"),
        ("https://example.com/post", ""),
    ])
    def test_no_match(self, url, pattern):
        assert not matches_domain_pattern(url, pattern)

    def test_first_template_wins(self):
        specific = Template(id="a", name="A", triggers=["example.com/docs/*"], target_tag_name="doc")
        general = Template(id="b", name="B", triggers=["example.com"], target_tag_name="page")

        assert find_matching_template("https://example.com/docs/x", [specific, general]).id == "a"
        assert find_matching_template("https://example.com/about", [specific, general]).id == "b"
        assert find_matching_template("https://example.com/docs/x", [general, specific]).id == "b"

    def test_no_template(self):
        assert find_matching_template("https://example.org", builtin_templates) is None


class TestBuiltins:
    """Test the shipped templates."""

    def test_ids_unique_and_flagged(self):
        ids = [t.id for t in builtin_templates]
        assert len(ids) == len(set(ids))
        assert all(t.is_builtin for t in builtin_templates)
        assert all(is_builtin_template(i) for i in ids)

    def test_lookup(self):
        assert get_builtin_template("builtin:youtube").target_tag_name == "video"
        assert get_builtin_template("nope") is None

    def test_all_builtins_validate(self, engine):
        for template in builtin_templates:
            assert engine.validate(template) == [], template.id

    @pytest.mark.parametrize("url,template_id", [
        ("https://github.com/org/repo/issues/12", "builtin:github-issue"),
        ("https://github.com/org/repo/pull/3", "builtin:github-issue"),
        ("https://github.com/org/repo", "builtin:github-repo"),
        ("https://www.youtube.com/watch?v=abc", "builtin:youtube"),
        ("https://youtu.be/abc", "builtin:youtube"),
        ("https://x.com/ada/status/1", "builtin:twitter"),
        ("https://medium.com/@ada/post-123", "builtin:medium"),
        ("https://news.ycombinator.com/item?id=1", "builtin:hacker-news"),
        ("https://old.reddit.com/r/python/comments/abc/title", "builtin:reddit"),
        ("https://en.wikipedia.org/wiki/Python", "builtin:wikipedia"),
        ("https://stackoverflow.com/questions/1/how", "builtin:stack-overflow"),
    ])
    def test_builtin_matching(self, engine, url, template_id):
        assert engine.find_template(url).id == template_id

    def test_empty_url(self, engine):
        assert engine.find_template("") is None


class TestContext:
    """Test variables derived from a capture."""

    def test_url_parts(self, context):
        assert context["domain"] == "example.com"
        assert context["site"] == "example.com"
        assert context["path"] == "/Blog/Post-1"
        assert context["segments"] == ["Blog", "Post-1"]

    def test_dates(self, context):
        assert context["date"] == "2024-03-05"
        assert context["time"] == "09:30"

    def test_counts(self, context):
        assert context["wordcount"] == 3
        assert context["readtime"] == 1

    def test_site_name_preferred(self, engine):
        ctx = engine.create_context(CaptureContent(source_locator="https://x.com/a", site_name="X"))
        assert ctx["site"] == "X"

    def test_date_format_setting(self):
        engine = TemplateEngine(date_format="DD.MM.YYYY")
        ctx = engine.create_context(CaptureContent(source_locator="", captured_at=datetime(2024, 3, 5)))
        assert ctx["date"] == "05.03.2024"
        assert ctx["domain"] == ""


class TestRenderString:
    """Test placeholder substitution."""

    def test_truncate(self, engine, context):
        assert engine.render_string("{{title|truncate:5}}", context) == "Hello"

    def test_unknown_filter_fails(self, engine, context):
        with pytest.raises(UnknownFilterError):
            engine.render_string("{{title|truncate:5|sparkle}}", context)

    def test_unknown_filter_fails_after_hidden_placeholder(self, engine):
        with pytest.raises(UnknownFilterError):
            engine.render_string("{{author|hideif}} {{title|bogus}}", {"author": "", "title": "Hello"})

    def test_literal_text_kept(self, engine, context):
        assert engine.render_string("By {{ author }} on {{domain}}.", context) == "By Ada on example.com."

    def test_missing_variable_is_empty(self, engine, context):
        assert engine.render_string("[{{nothing}}]", context) == "[]"
        assert engine.render_string("{{nothing|default:\"n/a\"}}", context) == "n/a"

    def test_list_values(self, engine, context):
        assert engine.render_string("{{segments}}", context) == "Blog, Post-1"
        assert engine.render_string("{{segments|last|lower}}", context) == "post-1"

    def test_hideif_hides_whole_string(self, engine, context):
        assert engine.render_string("Channel: {{description|hideif}}", context) is None
        assert engine.render_string("Channel: {{author|hideif}}", context) == "Channel: Ada"

    def test_unclosed_placeholder(self, engine, context):
        with pytest.raises(TemplateSyntaxError):
            engine.render_string("{{title", context)
        with pytest.raises(TemplateSyntaxError):
            engine.render_string("{{title}} and {{author", context)

    def test_registered_filter(self, engine, context):
        engine.register_filter("reverse", lambda v: str(v)[::-1])
        assert engine.render_string("{{author|reverse}}", context) == "adA"


class TestRender:
    """Test full template rendering."""

    def test_render_fields_and_content(self, engine):
        template = Template(
            name="Blog",
            triggers=["example.com"],
            target_tag_name="article",
            fields={
                "URL": "{{url}}",
                "Title": "{{title|upper}}",
                "Channel": "{{author|hideif}}",
                "Empty": "{{description}}",
            },
            content_template="\n{{selection}}\n",
        )
        content = CaptureContent(
            source_locator="https://example.com/p",
            title="post",
            selected_text="quoted",
        )

        rendered = engine.render(template, content)

        assert rendered.supertag == "article"
        assert rendered.fields == {"URL": "https://example.com/p", "Title": "POST"}
        assert rendered.content == "quoted"

    def test_empty_content_is_none(self, engine):
        template = Template(name="T", triggers=["a.com"], target_tag_name="x", content_template="{{summary}}")
        assert engine.render(template, CaptureContent(source_locator="https://a.com")).content is None

    def test_youtube_builtin(self, engine):
        content = CaptureContent(
            source_locator="https://www.youtube.com/watch?v=abc",
            title="Talk",
            author="Channel Name",
            description="x" * 600,
            summary="Short summary",
            captured_at=datetime(2024, 1, 2),
        )
        rendered = engine.render(engine.find_template(content.source_locator), content)

        assert rendered.supertag == "video"
        assert rendered.fields["Channel"] == "Channel Name"
        assert len(rendered.fields["Description"]) == 500
        assert rendered.fields["Description"].endswith("…")
        assert rendered.fields["Clipped"] == "2024-01-02"
        assert rendered.content == "Short summary"

    def test_youtube_without_author_drops_channel(self, engine):
        content = CaptureContent(source_locator="https://youtu.be/abc")
        rendered = engine.render(engine.find_template(content.source_locator), content)
        assert "Channel" not in rendered.fields

    def test_twitter_author_from_path(self, engine):
        content = CaptureContent(source_locator="https://x.com/AdaL/status/1")
        rendered = engine.render(engine.find_template(content.source_locator), content)
        assert rendered.fields["Author"] == "@AdaL"


class TestValidate:
    """Test template validation."""

    def test_valid(self, engine):
        template = Template(name="T", triggers=["a.com"], target_tag_name="x", fields={"URL": "{{url}}"})
        assert engine.validate(template) == []

    def test_reports_problems(self, engine):
        template = Template(
            name="T",
            triggers=["a.com"],
            fields={"A": "{{url|nope}}", "B": "{{title", "C": "{{1bad}}"},
            content_template='{{title|join:"x}}',
        )
        errors = engine.validate(template)

        assert "Template has no target tag" in errors
        assert any(e.startswith("A:") and "nope" in e for e in errors)
        assert any(e.startswith("B:") for e in errors)
        assert any(e.startswith("C:") for e in errors)
        assert any(e.startswith("<content>:") for e in errors)

    def test_every_bad_placeholder_reported(self, engine):
        template = Template(
            name="T",
            triggers=["a.com"],
            target_tag_name="x",
            fields={"A": "{{1bad}} {{url|nope}} {{title|zzz}}"},
        )
        errors = engine.validate(template)

        assert len(errors) == 3
        assert all(e.startswith("A:") for e in errors)
        assert any("nope" in e for e in errors)
        assert any("zzz" in e for e in errors)

    def test_registered_filter_is_valid(self, engine):
        engine.register_filter("shout", lambda v: str(v).upper())
        template = Template(name="T", triggers=["a.com"], target_tag_name="x", fields={"A": "{{title|shout}}"})
        assert engine.validate(template) == []


def test_engine_uses_library(tmp_path):
    from tagclip.engine.template_store import TemplateStore

    store = TemplateStore(tmp_path / "templates.yaml")
    store.save(Template(name="Docs", triggers=["docs.example.org"], target_tag_name="doc"))
    engine = TemplateEngine(library=TemplateLibrary(store))

    assert engine.find_template("https://docs.example.org/page").name == "Docs"
