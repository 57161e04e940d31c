"""Exception hierarchy for tagclip.

Schema lookup and field mapping degrade silently; only template
authoring problems and template storage misuse raise.
"""

from typing import Optional


class TagclipError(Exception):
    """Base class for all tagclip errors."""


class TemplateError(TagclipError):
    """A template expression could not be rendered."""


class TemplateSyntaxError(TemplateError):
    """Malformed placeholder or filter argument list."""

    def __init__(self, message: str, expression: Optional[str] = None):
        self.expression = expression
        if expression is not None:
            message = f"{message} in {expression!r}"
        super().__init__(message)


class UnknownFilterError(TemplateError):
    """A template references a filter that is not registered."""

    def __init__(self, filter_name: str, expression: Optional[str] = None):
        self.filter_name = filter_name
        self.expression = expression
        message = f"Unknown filter '{filter_name}'"
        if expression is not None:
            message += f" in {expression!r}"
        super().__init__(message)


class FilterArgumentError(TemplateError):
    """A filter received an argument it cannot use."""

    def __init__(self, filter_name: str, message: str):
        self.filter_name = filter_name
        super().__init__(f"Filter '{filter_name}': {message}")


class TemplateStoreError(TagclipError):
    """User template storage failure."""


class BuiltinTemplateError(TemplateStoreError):
    """Built-in templates are immutable."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template '{template_id}' is built-in and cannot be modified")
