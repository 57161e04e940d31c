"""Templates shipped with tagclip. Order is match priority."""

from typing import List, Optional

from .models import Template


github_issue_template = Template(
    id="builtin:github-issue",
    name="GitHub Issue / Pull Request",
    triggers=["github.com/*/*/issues/*", "github.com/*/*/pull/*"],
    target_tag_name="issue",
    fields={
        "URL": "{{url}}",
        "Description": "{{description|trim|truncate:280,\"…\"}}",
        "Clipped": "{{date}}",
    },
    content_template="{{selection}}",
    is_builtin=True,
)

github_repo_template = Template(
    id="builtin:github-repo",
    name="GitHub Repository",
    triggers=["github.com/*/*"],
    target_tag_name="repository",
    fields={
        "URL": "{{url}}",
        "Description": "{{description|trim}}",
        "Author": "{{segments|first}}",
        "Clipped": "{{date}}",
    },
    is_builtin=True,
)

youtube_template = Template(
    id="builtin:youtube",
    name="YouTube Video",
    triggers=["youtube.com/watch*", "youtu.be/*", "m.youtube.com/watch*"],
    target_tag_name="video",
    fields={
        "URL": "{{url}}",
        "Channel": "{{author|hideif}}",
        "Description": "{{description|truncate:500,\"…\"}}",
        "Clipped": "{{date}}",
    },
    content_template="{{summary}}",
    is_builtin=True,
)

twitter_template = Template(
    id="builtin:twitter",
    name="Tweet",
    triggers=["twitter.com/*/status/*", "x.com/*/status/*"],
    target_tag_name="tweet",
    fields={
        "URL": "{{url}}",
        "Author": "{{segments|first|wrap:\"@\"}}",
        "Clipped": "{{date}}",
    },
    content_template="{{description}}",
    is_builtin=True,
)

medium_template = Template(
    id="builtin:medium",
    name="Medium Article",
    triggers=["medium.com/*", "*.medium.com/*"],
    target_tag_name="article",
    fields={
        "URL": "{{url}}",
        "Author": "{{author}}",
        "Description": "{{description}}",
        "Reading Time": "{{content|readtime|hideif:\"0\"|wrap:\"\",\" min\"}}",
        "Clipped": "{{date}}",
    },
    content_template="{{selection}}",
    is_builtin=True,
)

hacker_news_template = Template(
    id="builtin:hacker-news",
    name="Hacker News",
    triggers=["news.ycombinator.com/item*"],
    target_tag_name="discussion",
    fields={
        "URL": "{{url}}",
        "Site": "Hacker News",
        "Clipped": "{{date}}",
    },
    content_template="{{selection}}",
    is_builtin=True,
)

reddit_template = Template(
    id="builtin:reddit",
    name="Reddit Post",
    triggers=["reddit.com/r/*/comments/*", "old.reddit.com/r/*/comments/*"],
    target_tag_name="discussion",
    fields={
        "URL": "{{url}}",
        "Site": "{{site}}",
        "Author": "{{author|hideif}}",
        "Clipped": "{{date}}",
    },
    content_template="{{selection}}",
    is_builtin=True,
)

wikipedia_template = Template(
    id="builtin:wikipedia",
    name="Wikipedia Article",
    triggers=["*.wikipedia.org/wiki/*", "wikipedia.org/wiki/*"],
    target_tag_name="reference",
    fields={
        "URL": "{{url}}",
        "Summary": "{{description|truncate:500,\"…\"}}",
        "Clipped": "{{date}}",
    },
    content_template="{{selection}}",
    is_builtin=True,
)

stack_overflow_template = Template(
    id="builtin:stack-overflow",
    name="Stack Overflow Question",
    triggers=["stackoverflow.com/questions/*", "*.stackexchange.com/questions/*"],
    target_tag_name="question",
    fields={
        "URL": "{{url}}",
        "Site": "{{site}}",
        "Description": "{{description|trim}}",
        "Clipped": "{{date}}",
    },
    content_template="{{selection}}",
    is_builtin=True,
)


builtin_templates: List[Template] = [
    github_issue_template,
    github_repo_template,
    youtube_template,
    twitter_template,
    medium_template,
    hacker_news_template,
    reddit_template,
    wikipedia_template,
    stack_overflow_template,
]


def get_builtin_template(template_id: str) -> Optional[Template]:
    for template in builtin_templates:
        if template.id == template_id:
            return template
    return None


def is_builtin_template(template_id: str) -> bool:
    return get_builtin_template(template_id) is not None
