"""
Templating Registries

Loading and caching of document skeletons (TemplateAsset) keyed by template id.

Skeletons live at <templates_path>/<id>/<id>.tex.jinja, are read asynchronously,
and use custom Jinja2 delimiters to avoid conflicts with LaTeX syntax:
- Variable: <<< var >>>
- Block: <%% block %%>
- Comment: <# comment #>

Each skeleton must reference exactly one variable, the content placeholder
<<< content >>>, exactly once.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
import yaml
from jinja2 import Environment, StrictUndefined, Template, TemplateSyntaxError, meta
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from scribe.contexts.templating.defaults import (
    CONTENT_PLACEHOLDER,
    CUSTOM_COMMANDS_FILE,
    DEFAULT_TEMPLATE_ID,
    TEMPLATE_CONFIG_SUFFIX,
    TEMPLATE_SUFFIX,
    TEMPLATES_PATH,
)
from scribe.contexts.templating.exceptions import (
    InvalidTemplateError,
    TemplateNotFoundError,
    TemplateStoreError,
)
from scribe.contexts.templating.logger import _log_debug, _log_warning, log_template_fallback

TEMPLATE_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
_PLACEHOLDER_PATTERN = re.compile(rf"<<<-?\s*{CONTENT_PLACEHOLDER}\s*-?>>>")


def create_latex_environment() -> Environment:
    """Jinja2 environment with LaTeX-safe delimiters."""
    return Environment(
        # Catches silent failures
        undefined=StrictUndefined,
        # Custom delimiters to avoid LaTeX brace conflicts
        variable_start_string="<<<",
        variable_end_string=">>>",
        block_start_string="<%%",
        block_end_string="%%>",
        comment_start_string="<#",
        comment_end_string="#>",
        # Preserve whitespace (important for LaTeX)
        trim_blocks=False,
        lstrip_blocks=False,
        keep_trailing_newline=True,
    )


@dataclass(frozen=True)
class TemplateAsset:
    """
    A loaded, validated document skeleton.

    Attributes:
        template_id: Identifier the asset was loaded under
        path: Source file
        source: Raw skeleton text
        template: Compiled Jinja2 template
        metadata: Optional display metadata from <id>-config.yaml
    """

    template_id: str
    path: Path
    source: str
    template: Template = field(repr=False, compare=False)
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def render(self, content: str) -> str:
        """Fill the content placeholder."""
        return self.template.render(**{CONTENT_PLACEHOLDER: content})


class TemplateCache:
    """
    In-memory template id -> TemplateAsset map.

    Process-lifetime and append-only in normal use. Concurrent first loads of
    the same id may both insert; the assets are equal, so the last write wins
    harmlessly. Tests inject a fresh instance per case.
    """

    def __init__(self):
        self._assets: Dict[str, TemplateAsset] = {}

    def lookup(self, template_id: str) -> Optional[TemplateAsset]:
        return self._assets.get(template_id)

    def insert(self, asset: TemplateAsset) -> None:
        self._assets[asset.template_id] = asset

    def clear(self) -> None:
        self._assets.clear()

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._assets

    def __len__(self) -> int:
        return len(self._assets)


class TemplateRegistry:
    """
    Registry for loading, validating and caching document skeletons.

    load() raises on a miss; resolve() falls back to the default template and
    raises TemplateStoreError only when the default cannot be loaded either.
    """

    def __init__(
        self,
        templates_path: Path = None,
        cache: TemplateCache = None,
        default_template_id: str = DEFAULT_TEMPLATE_ID,
    ):
        """
        Initialize the template registry.

        Args:
            templates_path: Template store root. Defaults to SCRIBE_TEMPLATES_PATH
                            (the package's bundled templates when unset)
            cache: Template cache to use (default: a new private cache)
            default_template_id: Fallback template id
        """
        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.templates_path = Path(templates_path)
        self.cache = cache if cache is not None else TemplateCache()
        self.default_template_id = default_template_id
        self.env = create_latex_environment()
        self._custom_commands: Optional[str] = None

    def get_template_path(self, template_id: str) -> Path:
        """
        Get the skeleton file path for a template id.

        Args:
            template_id: Template identifier (e.g., 'template01')

        Returns:
            Path to <templates_path>/<id>/<id>.tex.jinja
        """
        return self.templates_path / template_id / f"{template_id}{TEMPLATE_SUFFIX}"

    def is_cached(self, template_id: str) -> bool:
        return template_id in self.cache

    def clear_cache(self):
        """Clear the template cache."""
        self.cache.clear()
        self._custom_commands = None

    async def load(self, template_id: str) -> TemplateAsset:
        """
        Load a template by id, reading and caching it if necessary.

        Args:
            template_id: Template identifier

        Returns:
            TemplateAsset

        Raises:
            InvalidTemplateError: Malformed id, Jinja2 syntax error, or a skeleton
                                  without exactly one content placeholder
            TemplateNotFoundError: No skeleton file for this id
        """
        if not isinstance(template_id, str) or not TEMPLATE_ID_PATTERN.fullmatch(template_id):
            raise InvalidTemplateError("Template id must match [A-Za-z0-9_-]+", repr(template_id))

        cached = self.cache.lookup(template_id)
        if cached is not None:
            return cached

        template_path = self.get_template_path(template_id)
        try:
            async with aiofiles.open(template_path, "r", encoding="utf-8") as f:
                source = await f.read()
        except FileNotFoundError as e:
            raise TemplateNotFoundError(
                "Template skeleton not found", template_id, template_path
            ) from e
        except UnicodeDecodeError as e:
            raise InvalidTemplateError(f"Skeleton is not valid UTF-8 ({e.reason})", template_id) from e

        template = self._compile(template_id, source)
        asset = TemplateAsset(
            template_id=template_id,
            path=template_path,
            source=source,
            template=template,
            metadata=self._load_metadata(template_id),
        )
        self.cache.insert(asset)
        _log_debug(f"Loaded template '{template_id}' from {template_path} ({len(source)} chars)")
        return asset

    async def resolve(self, template_id: Optional[str]) -> TemplateAsset:
        """
        Resolve a template id, falling back to the default template on any miss.

        Args:
            template_id: Requested template id (None or "" selects the default)

        Returns:
            TemplateAsset for the requested id, or for the default template

        Raises:
            TemplateStoreError: The default template itself cannot be loaded
        """
        if template_id:
            try:
                return await self.load(template_id)
            except (TemplateNotFoundError, InvalidTemplateError, OSError) as e:
                log_template_fallback(template_id, self.default_template_id, e.__class__.__name__)

        try:
            return await self.load(self.default_template_id)
        except (TemplateNotFoundError, InvalidTemplateError, OSError) as e:
            raise TemplateStoreError(
                "Template store unavailable: default template could not be loaded",
                self.default_template_id,
                e,
            ) from e

    async def load_custom_commands(self) -> str:
        """
        Read the shared command definitions injected into non-default templates.

        Returns:
            Definitions block, or "" when the file is missing
        """
        if self._custom_commands is not None:
            return self._custom_commands

        path = self.templates_path / CUSTOM_COMMANDS_FILE
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                self._custom_commands = await f.read()
        except FileNotFoundError:
            _log_warning(f"Shared command definitions not found at {path}")
            self._custom_commands = ""
        return self._custom_commands

    async def list_templates(self) -> List[Dict[str, Any]]:
        """
        List templates available in the store.

        Returns:
            One dict per template directory holding a skeleton: id, name,
            description, category (names and descriptions from <id>-config.yaml
            when present). Sorted by numeric suffix, then id.
        """
        if not self.templates_path.is_dir():
            _log_warning(f"Template store not found: {self.templates_path}")
            return []

        templates = []
        for directory in self.templates_path.iterdir():
            if not directory.is_dir() or not self.get_template_path(directory.name).exists():
                continue
            metadata = self._load_metadata(directory.name)
            templates.append(
                {
                    "id": directory.name,
                    "name": metadata.get("name", f"Template {directory.name.replace('template', '')}"),
                    "description": metadata.get("description", "Professional resume template."),
                    "category": metadata.get("category", "professional"),
                }
            )

        def _sort_key(info):
            digits = re.sub(r"\D", "", info["id"])
            return (int(digits) if digits else 0, info["id"])

        return sorted(templates, key=_sort_key)

    def _compile(self, template_id: str, source: str) -> Template:
        """Validate the placeholder contract and compile the skeleton."""
        placeholder_count = len(_PLACEHOLDER_PATTERN.findall(source))
        if placeholder_count != 1:
            raise InvalidTemplateError(
                f"Skeleton must contain exactly one <<< {CONTENT_PLACEHOLDER} >>> placeholder "
                f"(found {placeholder_count})",
                template_id,
            )
        try:
            variables = meta.find_undeclared_variables(self.env.parse(source))
            template = self.env.from_string(source)
        except TemplateSyntaxError as e:
            raise InvalidTemplateError(f"Jinja2 syntax error on line {e.lineno}: {e.message}", template_id) from e

        unexpected = variables - {CONTENT_PLACEHOLDER}
        if unexpected:
            raise InvalidTemplateError(
                f"Skeleton references undefined variables: {', '.join(sorted(unexpected))}",
                template_id,
            )
        return template

    def _load_metadata(self, template_id: str) -> Dict[str, Any]:
        config_path = self.templates_path / template_id / f"{template_id}{TEMPLATE_CONFIG_SUFFIX}"
        if not config_path.exists():
            return {}
        try:
            metadata = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
        except (yaml.YAMLError, OmegaConfBaseException, UnicodeDecodeError) as e:
            _log_warning(f"Ignoring unreadable metadata for '{template_id}' ({config_path.name}): {e}")
            return {}
        if not isinstance(metadata, dict):
            if metadata is not None:
                _log_warning(f"Ignoring metadata for '{template_id}': expected a mapping in {config_path.name}")
            return {}
        return metadata


_shared_registry: Optional[TemplateRegistry] = None


def get_template_registry() -> TemplateRegistry:
    """Process-wide registry backing the module-level rendering entry point."""
    global _shared_registry
    if _shared_registry is None:
        _shared_registry = TemplateRegistry()
    return _shared_registry
