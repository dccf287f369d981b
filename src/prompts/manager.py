"""
Prompt Manager for loading and rendering Jinja2 templates.

Templates live under prompts/templates/<category>/<name>.j2 and are
addressed as "<category>/<name>". Rendered output is cached per
(template, variables) pair in a bounded least-recently-used cache.
"""

from collections import OrderedDict
from pathlib import Path
from typing import Optional
import json
import logging

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 128


class PromptManager:
    """
    Manages prompt templates with Jinja2 rendering.

    Example:
        manager = PromptManager()
        prompt = manager.render(
            "research/fallback_advisory",
            query="how do I stop biting?",
        )
    """

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        cache_enabled: bool = True,
        max_cache_size: int = DEFAULT_CACHE_SIZE,
    ):
        """
        Initialize the PromptManager.

        Args:
            templates_dir: Path to templates directory
            cache_enabled: Cache rendered templates
            max_cache_size: Most rendered prompts kept; least recently used are evicted first
        """
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters['truncate'] = _truncate

        self.max_cache_size = max_cache_size
        self._cache: Optional["OrderedDict[str, str]"] = (
            OrderedDict() if cache_enabled and max_cache_size > 0 else None
        )

    @property
    def cache_size(self) -> int:
        return len(self._cache) if self._cache is not None else 0

    def render(self, template_name: str, **variables) -> str:
        """
        Render a prompt template with variables.

        Args:
            template_name: Template path relative to templates_dir (without .j2)
            **variables: Template variables

        Returns:
            Rendered prompt string

        Raises:
            TemplateNotFound: If template doesn't exist
        """
        if not template_name.endswith('.j2'):
            template_name = f"{template_name}.j2"

        cache_key = None
        if self._cache is not None:
            try:
                cache_key = f"{template_name}:{json.dumps(variables, sort_keys=True, default=str)}"
            except (TypeError, ValueError):
                cache_key = None

        if cache_key is not None and cache_key in self._cache:
            self._cache.move_to_end(cache_key)
            logger.debug(f"Using cached prompt: {template_name}")
            return self._cache[cache_key]

        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound:
            logger.error(f"Template not found: {template_name}")
            raise

        rendered = template.render(**variables).strip()

        if cache_key is not None:
            self._cache[cache_key] = rendered
            if len(self._cache) > self.max_cache_size:
                self._cache.popitem(last=False)

        logger.debug(f"Rendered prompt: {template_name}")
        return rendered


def _truncate(text: str, length: int, suffix: str = "...") -> str:
    if text is None or len(text) <= length:
        return text or ""
    return text[:length - len(suffix)] + suffix


# Singleton instance for convenience
_default_manager: Optional[PromptManager] = None


def get_prompt_manager() -> PromptManager:
    """Get the default PromptManager instance."""
    global _default_manager
    if _default_manager is None:
        _default_manager = PromptManager()
    return _default_manager
