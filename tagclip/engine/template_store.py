"""User template persistence and the combined template priority list."""

from pathlib import Path
from typing import List, Optional

import ulid
import yaml
from loguru import logger
from pydantic import ValidationError

from .builtin_templates import builtin_templates, is_builtin_template
from .errors import BuiltinTemplateError, TemplateStoreError
from .models import Template


class TemplateStore:
    """
    User-defined templates kept in one YAML file (a list of mappings).

    A missing file means no templates. An unreadable or invalid file is
    logged and treated as empty so capture keeps working.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[Template]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, 'r', encoding="utf-8") as f:
                data = yaml.safe_load(f) or []
            if not isinstance(data, list):
                raise TypeError(f"expected a list of templates, got {type(data).__name__}")
            return [Template.model_validate(item) for item in data]
        except (OSError, yaml.YAMLError, TypeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable template file {self.path}: {e}")
            return []

    def get(self, template_id: str) -> Optional[Template]:
        for template in self.load():
            if template.id == template_id:
                return template
        return None

    def save(self, template: Template) -> Template:
        """Create or replace by id. Templates without an id get a new ULID."""
        if not template.id:
            template = template.model_copy(update={"id": str(ulid.ULID())})
        if template.is_builtin:
            template = template.model_copy(update={"is_builtin": False})

        templates = self.load()
        for i, existing in enumerate(templates):
            if existing.id == template.id:
                templates[i] = template
                break
        else:
            templates.append(template)

        self._write(templates)
        logger.info(f"Saved template {template.id} ({template.name})")
        return template

    def delete(self, template_id: str) -> bool:
        templates = self.load()
        remaining = [t for t in templates if t.id != template_id]
        if len(remaining) == len(templates):
            return False

        self._write(remaining)
        logger.info(f"Deleted template {template_id}")
        return True

    def _write(self, templates: List[Template]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding="utf-8") as f:
                yaml.safe_dump(
                    [t.model_dump(exclude={"is_builtin"}) for t in templates],
                    f,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                )
        except OSError as e:
            raise TemplateStoreError(f"Cannot write templates to {self.path}: {e}") from e


class TemplateLibrary:
    """Built-in templates first, then user templates, in list order."""

    def __init__(self, store: Optional[TemplateStore] = None):
        self.store = store

    def all(self) -> List[Template]:
        user = self.store.load() if self.store else []
        return list(builtin_templates) + [t for t in user if not is_builtin_template(t.id)]

    def user_templates(self) -> List[Template]:
        return self.store.load() if self.store else []

    def get(self, template_id: str) -> Optional[Template]:
        for template in self.all():
            if template.id == template_id:
                return template
        return None

    def save(self, template: Template) -> Template:
        if template.id and is_builtin_template(template.id):
            raise BuiltinTemplateError(template.id)
        if self.store is None:
            raise TemplateStoreError("No user template storage configured")
        return self.store.save(template)

    def delete(self, template_id: str) -> bool:
        if is_builtin_template(template_id):
            raise BuiltinTemplateError(template_id)
        if self.store is None:
            return False
        return self.store.delete(template_id)
