"""
Tests for the unittest-style CacheTestCase and IntegrationCacheTestCase.
"""

from cacheprobe.faults import CacheAssertionFault, NoControllerDefinedFault, NoRequestInBlockFault
from cacheprobe.testing.cases import CacheTestCase, IntegrationCacheTestCase
from cacheprobe.web import Application

from tests.conftest import build_app


class NewsCachingTests(CacheTestCase):
    controller_name = "news"

    def create_app(self) -> Application:
        return build_app()

    async def test_probe_installed(self):
        self.assertTrue(self.app.config.perform_caching)
        self.assertTrue(self.probe.installed)

    async def test_process_generates_path(self):
        resp = await self.process("show", id=1)
        self.assertEqual(resp.request_path, "/news/show/1")
        self.assertEqual(resp.status_code, 200)

    async def test_cache_actions(self):
        await self.assert_cache_actions("list", block=lambda *actions: self.process("list"))

    async def test_cache_fragments(self):
        await self.assert_cache_fragments("headlines", block=lambda *names: self.process("index"))

    async def test_expire_all(self):
        async def create(*targets):
            await self.process("create", method="POST")

        await self.assert_expire_fragments("headlines", block=create)
        await self.assert_expire_actions("list", block=create)
        await self.assert_expire_pages("/news", block=create)

    async def test_cache_pages_implicit_get(self):
        await self.assert_cache_pages("/news", "/about")

    async def test_failures(self):
        with self.assertRaises(CacheAssertionFault):
            await self.assert_cache_actions("noop", block=lambda *actions: self.process("noop"))
        with self.assertRaises(NoRequestInBlockFault):
            await self.assert_cache_actions("list", block=lambda *actions: None)


class PagesCachingIntegrationTests(IntegrationCacheTestCase):
    controller_name = "pages"

    def create_app(self) -> Application:
        return build_app()

    async def test_qualified_actions(self):
        async def browse(*refs):
            await self.client.get("/news/list")
            await self.process("about")

        await self.assert_cache_actions({"controller": "news", "action": "list"}, block=browse)

    async def test_bare_action_rejected(self):
        with self.assertRaises(NoControllerDefinedFault):
            await self.assert_cache_actions("list", block=lambda *refs: self.process("about"))

    async def test_pages_still_take_paths(self):
        await self.assert_expire_pages("/about", block=lambda *urls: self.process("refresh"))
