"""
Shared test fixtures and the demo application for the CacheProbe test suite.
"""

import pytest

from cacheprobe.cache.patterns import GlobPattern
from cacheprobe.config import ProbeConfig
from cacheprobe.web import Application, Controller, Response, Router

# Register CacheProbe testing fixtures
from cacheprobe.testing.fixtures import cacheprobe_fixtures
cacheprobe_fixtures()

# Import fixtures so pytest can discover them
from cacheprobe.testing.fixtures import (  # noqa: F401
    recording_store,
    page_registry,
    probe_context,
    cache_probe,
    integration_probe,
)


# ============================================================================
# Demo application
# ============================================================================


HEADLINES = ["Cache probe released", "Fragments explained"]

TEMPLATES = {
    "news/index.html": (
        "<h1>News</h1>"
        "{% cache 'headlines' %}"
        "<ul>{% for item in items %}<li>{{ item }}</li>{% endfor %}</ul>"
        "{% endcache %}"
    ),
    "news/show.html": (
        "{% cache {'action': 'show', 'id': id, 'action_suffix': 'body'} %}"
        "<p>{{ item }}</p>"
        "{% endcache %}"
    ),
    "pages/about.html": "<h1>About</h1>",
}


class NewsController(Controller):
    caches_page = ("index",)
    caches_action = ("list",)

    async def index(self):
        return await self.render("news/index.html", items=HEADLINES)

    async def list(self):
        return "<ul>" + "".join(f"<li>{item}</li>" for item in HEADLINES) + "</ul>"

    async def show(self):
        item_id = int(self.params["id"])
        return await self.render("news/show.html", id=item_id, item=HEADLINES[item_id])

    async def create(self):
        await self.expire_fragment("headlines")
        await self.expire_action("list")
        self.expire_page(action="index")
        return Response.redirect("/news")

    async def update(self):
        await self.expire_action({"action": "show", "id": self.params["id"], "action_suffix": "body"})
        return "updated"

    async def purge(self):
        await self.expire_fragment(GlobPattern("views/*"))
        return "purged"

    def noop(self):
        return "nothing cached"


class PagesController(Controller):
    caches_page = ("about",)

    async def about(self):
        return await self.render("pages/about.html")

    def refresh(self):
        self.expire_page("/about")
        return "refreshed"

    def contact(self):
        return "not page cached"


def build_app(**config_overrides) -> Application:
    router = Router()
    router.connect("/about", controller="pages", action="about")
    router.connect_default()
    return Application(
        [NewsController, PagesController],
        config=ProbeConfig(**config_overrides),
        router=router,
        templates=TEMPLATES,
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def app():
    """Demo application with caching off, as configured for production."""
    return build_app()


@pytest.fixture
def caching_app():
    """Demo application with caching on and page files stubbed out."""
    application = build_app(perform_caching=True)
    application.page_cache.write_files = False
    return application
