"""
Views - async Jinja2 rendering with fragment caching.

Templates may wrap expensive markup in a cache block::

    {% cache "sidebar" %}
      ...
    {% endcache %}

    {% cache {"action": "list", "action_suffix": "headlines"} %}
      ...
    {% endcache %}

The block name is turned into a key by the rendering controller, so the
same name yields the same key the controller's ``expire_fragment`` uses.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, TYPE_CHECKING, Union

from jinja2 import DictLoader, Environment, FileSystemLoader, Undefined, nodes, select_autoescape
from jinja2.ext import Extension

if TYPE_CHECKING:
    from .controller import Controller

logger = logging.getLogger("cacheprobe.web.views")


class FragmentCacheExtension(Extension):
    """Adds the ``{% cache name %}...{% endcache %}`` tag."""

    tags = {"cache"}

    def parse(self, parser):
        lineno = next(parser.stream).lineno
        args = [nodes.Name("controller", "load"), parser.parse_expression()]
        body = parser.parse_statements(("name:endcache",), drop_needle=True)
        return nodes.CallBlock(
            self.call_method("_cache_support", args), [], [], body
        ).set_lineno(lineno)

    async def _cache_support(self, controller, name, caller):
        if isinstance(controller, Undefined) or controller is None or not controller.perform_caching:
            return await caller()

        content = await controller.read_fragment(name)
        if content is not None:
            logger.debug(f"fragment hit {name!r}")
            return content

        content = await caller()
        await controller.write_fragment(name, str(content))
        return content


class ViewRenderer:
    """
    Jinja2 environment owned by an application.

    Args:
        templates: In-memory templates keyed by name
        directory: Template directory (takes precedence over *templates*)
        globals: Extra template globals
    """

    def __init__(
        self,
        templates: Optional[Dict[str, str]] = None,
        directory: Optional[Union[str, Path]] = None,
        globals: Optional[Dict[str, Any]] = None,
    ):
        loader = FileSystemLoader(str(directory)) if directory else DictLoader(dict(templates or {}))
        self.env = Environment(
            loader=loader,
            autoescape=select_autoescape(
                enabled_extensions=["html", "htm", "xml"],
                default_for_string=True,
            ),
            extensions=[FragmentCacheExtension],
            enable_async=True,
        )
        if globals:
            self.env.globals.update(globals)

    async def render(
        self,
        template_name: str,
        context: Optional[Mapping[str, Any]] = None,
        controller: Optional["Controller"] = None,
    ) -> str:
        template = self.env.get_template(template_name)
        return await template.render_async(controller=controller, **dict(context or {}))

    async def render_string(
        self,
        source: str,
        context: Optional[Mapping[str, Any]] = None,
        controller: Optional["Controller"] = None,
    ) -> str:
        template = self.env.from_string(source)
        return await template.render_async(controller=controller, **dict(context or {}))
