"""
Tests for Jinja2 rendering and the ``{% cache %}`` fragment tag.
"""

import pytest

from cacheprobe.cache import RecordingCacheStore
from cacheprobe.web import Request, ViewRenderer

from tests.conftest import NewsController


def news_controller(app, path="/news", **params):
    path_params = app.router.recognize(path)
    path_params.update(params)
    return NewsController(app, Request(path=path), path_params)


class TestViewRenderer:
    @pytest.mark.asyncio
    async def test_render_from_dict(self):
        views = ViewRenderer(templates={"hello.html": "Hello {{ name }}"})
        assert await views.render("hello.html", {"name": "probe"}) == "Hello probe"

    @pytest.mark.asyncio
    async def test_render_from_directory(self, tmp_path):
        (tmp_path / "page.html").write_text("<b>{{ title }}</b>")
        views = ViewRenderer(directory=tmp_path)
        assert await views.render("page.html", {"title": "News"}) == "<b>News</b>"

    @pytest.mark.asyncio
    async def test_autoescape(self):
        views = ViewRenderer(templates={"x.html": "{{ value }}"})
        assert await views.render("x.html", {"value": "<script>"}) == "&lt;script&gt;"

    @pytest.mark.asyncio
    async def test_globals(self):
        views = ViewRenderer(globals={"site": "CacheProbe"})
        assert await views.render_string("{{ site }}") == "CacheProbe"

    @pytest.mark.asyncio
    async def test_cache_tag_without_controller_renders_body(self):
        views = ViewRenderer()
        html = await views.render_string("{% cache 'x' %}<p>body</p>{% endcache %}")
        assert html == "<p>body</p>"


class TestFragmentCacheTag:
    @pytest.mark.asyncio
    async def test_caching_off_renders_without_store(self, app):
        controller = news_controller(app)
        html = await app.views.render("news/index.html", {"items": ["a"]}, controller=controller)
        assert "<li>a</li>" in html
        assert len(app.cache_store) == 0

    @pytest.mark.asyncio
    async def test_miss_writes_fragment(self, caching_app):
        controller = news_controller(caching_app)
        await caching_app.views.render("news/index.html", {"items": ["a"]}, controller=controller)
        assert caching_app.cache_store.data["views/headlines"] == "<ul><li>a</li></ul>"

    @pytest.mark.asyncio
    async def test_hit_serves_stored_fragment(self, caching_app):
        controller = news_controller(caching_app)
        first = await caching_app.views.render("news/index.html", {"items": ["a"]}, controller=controller)
        second = await caching_app.views.render("news/index.html", {"items": ["b"]}, controller=controller)

        assert first == second
        assert "<li>b</li>" not in second

    @pytest.mark.asyncio
    async def test_action_reference_key(self, caching_app):
        caching_app.cache_store = RecordingCacheStore(caching_app.cache_store)
        controller = news_controller(caching_app, "/news/show/1")

        resp = await controller.render("news/show.html", id=1, item="Fragments explained")

        assert "<p>Fragments explained</p>" in resp.text_body
        assert caching_app.cache_store.written_keys == (
            "views/test.host/news/show/1?action_suffix=body",
        )

    @pytest.mark.asyncio
    async def test_controller_render_string(self, caching_app):
        controller = news_controller(caching_app)
        resp = await controller.render_string("{% cache 'inline' %}{{ n }}{% endcache %}", n=5)
        assert resp.text_body == "5"
        assert caching_app.cache_store.data["views/inline"] == "5"
