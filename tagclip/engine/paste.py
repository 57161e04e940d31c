"""
Plain-text outline ("paste") format for node payloads.

Used when the node-creation collaborator is unavailable: the outline can be
copied to the clipboard and pasted into the knowledge graph.

    %%tana%%
    - Article Title #bookmark
      - URL:: https://example.com
      - Notes:: Key idea
      - First paragraph
"""

import re
from typing import List, Tuple

from .models import NodeChild, NodePayload


PASTE_HEADER = "%%tana%%"
INDENT = "  "


def format_link(title: str, url: str) -> str:
    """Markdown-style link. Falls back to the url as label."""
    return f"[{title or url}]({url})"


def escape_text(text: str) -> str:
    """Outline lines cannot hold newlines."""
    return re.sub(r'\s*\n\s*', ' ', text).strip()


def format_tag(tag_name: str) -> str:
    tag = tag_name.lstrip("#").strip()
    if re.search(r'\s', tag):
        return f"#[[{tag}]]"
    return f"#{tag}"


def _child_lines(children: List[NodeChild], level: int) -> List[str]:
    lines: List[str] = []
    for child in children:
        lines.append(f"{INDENT * level}- {escape_text(child.name)}")
        lines.extend(_child_lines(child.children, level + 1))
    return lines


def build_paste(payload: NodePayload) -> str:
    lines = [PASTE_HEADER, f"- {escape_text(payload.node_title)} {format_tag(payload.tag_name)}"]

    for name, value in payload.fields.items():
        if value:
            lines.append(f"{INDENT}- {name}:: {escape_text(value)}")

    lines.extend(_child_lines(payload.children, 1))
    return "\n".join(lines)


def parse_outline(text: str) -> List[NodeChild]:
    """Indented outline text to nested nodes. Leading dashes are dropped."""
    roots: List[NodeChild] = []
    stack: List[Tuple[NodeChild, int]] = []

    for line in text.splitlines():
        if not line.strip():
            continue
        indent = len(line) - len(line.lstrip())
        content = line.strip()
        if content.startswith("-"):
            content = content[1:].strip()

        node = NodeChild(name=content)
        while stack and stack[-1][1] >= indent:
            stack.pop()

        if stack:
            stack[-1][0].children.append(node)
        else:
            roots.append(node)
        stack.append((node, indent))

    return roots
