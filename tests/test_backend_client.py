"""Unit tests for the httpx backend client."""

import asyncio
import json

import httpx
import pytest

from auction_console.clients.backend_client import BackendClient
from auction_console.config import Settings
from auction_console.errors import FetchError
from auction_console.models.common import PageEndpoint, TreeEndpoint

CATEGORIES = PageEndpoint(service="catalog", path="/api/categories/list", items_key="categories")
ATTRIBUTES = PageEndpoint(service="catalog", path="/api/dynamic-attributes", paginated=False)
REGION_TREE = TreeEndpoint(service="admin", path="/api/admin/regions/tree", children_key="subRegions")
SUBCATEGORIES = TreeEndpoint(service="catalog", path="/api/categories/tree/{root_id}")


def make_client(handler, language="en"):
    settings = Settings()
    settings.catalog_api_base = "http://catalog.test"
    settings.admin_api_base = "http://admin.test"
    return BackendClient(settings, language=language, transport=httpx.MockTransport(handler))


def run(coro):
    return asyncio.run(coro)


class TestFetchPage:
    def test_server_paginated_request(self):
        """Page parameters and the language header are sent; rows and total are unwrapped."""
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["lang"] = request.headers.get("Accept-Language")
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "data": {"categories": [{"id": 1, "name": "Cars"}], "totalCount": 31},
                },
            )

        result = run(make_client(handler).fetch_page(CATEGORIES, 2, 10))
        assert seen["url"] == "http://catalog.test/api/categories/list?pageNumber=2&pageSize=10"
        assert seen["lang"] == "en"
        assert result.rows == [{"id": 1, "name": "Cars"}]
        assert result.total_count == 31

    def test_full_list_endpoint(self):
        def handler(request):
            assert "pageNumber" not in str(request.url)
            return httpx.Response(200, json={"success": True, "data": [{"id": 1}, {"id": 2}]})

        result = run(make_client(handler).fetch_page(ATTRIBUTES, 1, 10))
        assert result.total_count == 2

    def test_search_is_forwarded(self):
        def handler(request):
            assert request.url.params["search"] == "jed"
            return httpx.Response(200, json={"success": True, "data": {"categories": [], "totalCount": 0}})

        run(make_client(handler).fetch_page(CATEGORIES, 1, 10, search="jed"))

    def test_unsuccessful_envelope_raises(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "message": "not allowed"})

        with pytest.raises(FetchError, match="not allowed"):
            run(make_client(handler).fetch_page(CATEGORIES, 1, 10))

    def test_http_error_status_raises(self):
        def handler(request):
            return httpx.Response(500, text="oops")

        with pytest.raises(FetchError) as exc_info:
            run(make_client(handler).fetch_page(CATEGORIES, 1, 10))
        assert exc_info.value.status_code == 500

    def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(FetchError):
            run(make_client(handler).fetch_page(CATEGORIES, 1, 10))

    def test_malformed_payload_raises(self):
        def handler(request):
            return httpx.Response(200, json={"success": True, "data": {"categories": "nope"}})

        with pytest.raises(FetchError):
            run(make_client(handler).fetch_page(CATEGORIES, 1, 10))

    def test_non_json_body_raises(self):
        def handler(request):
            return httpx.Response(200, text="<html>")

        with pytest.raises(FetchError):
            run(make_client(handler).fetch_page(CATEGORIES, 1, 10))


class TestFetchTree:
    def test_region_tree_uses_sub_regions(self):
        payload = {
            "success": True,
            "data": [
                {"id": 1, "name": "Riyadh Region", "subRegions": [{"id": 11, "name": "Riyadh"}]},
                {"id": 2, "name": "Tabuk", "subRegions": None},
            ],
        }

        def handler(request):
            return httpx.Response(200, json=payload)

        forest = run(make_client(handler).fetch_tree_snapshot(REGION_TREE))
        assert [n.label for n in forest] == ["Riyadh Region", "Tabuk"]
        assert forest[0].children[0].id == 11
        assert forest[1].children == ()

    def test_subcategory_tree_keeps_metadata(self):
        def handler(request):
            assert request.url.path == "/api/categories/tree/7"
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "data": [
                        {
                            "id": 70,
                            "name": "Sedan",
                            "isActive": True,
                            "dynamicAttributes": [{"id": 5, "name": "Color"}],
                        }
                    ],
                },
            )

        forest = run(make_client(handler).fetch_tree_snapshot(SUBCATEGORIES, root_id=7))
        assert forest[0].metadata["isActive"] is True
        assert forest[0].metadata["dynamicAttributes"][0]["name"] == "Color"

    def test_duplicate_ids_are_malformed(self):
        def handler(request):
            return httpx.Response(
                200,
                json={"success": True, "data": [{"id": 1, "name": "a", "children": [{"id": 1, "name": "b"}]}]},
            )

        with pytest.raises(FetchError):
            run(make_client(handler).fetch_tree_snapshot(SUBCATEGORIES, root_id=1))

    def test_missing_root_id(self):
        with pytest.raises(FetchError):
            run(make_client(lambda r: httpx.Response(200)).fetch_tree_snapshot(SUBCATEGORIES))


class TestSendCommand:
    def test_delete_with_body(self):
        def handler(request):
            assert request.method == "DELETE"
            assert json.loads(request.content) == {"id": 4}
            return httpx.Response(200, json={"success": True, "message": "deleted"})

        message = run(make_client(handler).send_command("catalog", "DELETE", "/api/categories", json={"id": 4}))
        assert message == "deleted"
