import base64
import unittest
from urllib.parse import parse_qs, urlsplit

import httpx

from packages.mockdy_core.errors import ConfigurationError, InputError, UpstreamError
from packages.mockdy_notion.oauth import NotionOAuthService
from tests.support import CLIENT_ID, CLIENT_SECRET, REDIRECT_URI, RecordingTransport, make_config


class TestAuthorizationUrl(unittest.TestCase):

    def test_url_contains_required_params(self):
        url = NotionOAuthService(make_config()).build_authorization_url()
        parts = urlsplit(url)
        query = parse_qs(parts.query)

        self.assertEqual(f"{parts.scheme}://{parts.netloc}{parts.path}", "https://notion.test/v1/oauth/authorize")
        self.assertEqual(query["client_id"], [CLIENT_ID])
        self.assertEqual(query["response_type"], ["code"])
        self.assertEqual(query["redirect_uri"], [REDIRECT_URI])
        self.assertEqual(query["owner"], ["workspace"])
        self.assertNotIn(CLIENT_SECRET, url)

    def test_existing_query_params_are_kept(self):
        config = make_config(NOTION_AUTH_URL="https://notion.test/v1/oauth/authorize?foo=bar&owner=user")
        query = parse_qs(urlsplit(NotionOAuthService(config).build_authorization_url()).query)
        self.assertEqual(query["foo"], ["bar"])
        self.assertEqual(query["owner"], ["workspace"])

    def test_missing_client_id_fails(self):
        with self.assertRaises(ConfigurationError):
            NotionOAuthService(make_config(OAUTH_CLIENT_ID=None)).build_authorization_url()

    def test_missing_redirect_uri_fails(self):
        with self.assertRaises(ConfigurationError):
            NotionOAuthService(make_config(OAUTH_REDIRECT_URI=None)).build_authorization_url()


class TestTokenExchange(unittest.IsolatedAsyncioTestCase):

    TOKEN_PAYLOAD = {
        "access_token": "at-1",
        "refresh_token": "rt-1",
        "bot_id": "bot-1",
        "workspace_id": "ws-1",
        "workspace_name": "My Space",
        "workspace_icon": None,
        "duplicated_template_id": "db-1",
    }

    async def test_exchange_posts_basic_auth_and_grant(self):
        transport = RecordingTransport([(200, self.TOKEN_PAYLOAD)])
        service = NotionOAuthService(make_config(), transport=transport)

        data = await service.exchange_code("the-code")

        self.assertEqual(data["access_token"], "at-1")
        request = transport.requests[0]
        self.assertEqual(str(request.url), "https://notion.test/v1/oauth/token")
        expected = base64.b64encode(f"{CLIENT_ID}:{CLIENT_SECRET}".encode()).decode()
        self.assertEqual(request.headers["Authorization"], f"Basic {expected}")
        self.assertEqual(
            transport.json_body(0),
            {"grant_type": "authorization_code", "code": "the-code", "redirect_uri": REDIRECT_URI},
        )

    async def test_secret_is_never_returned(self):
        payload = dict(self.TOKEN_PAYLOAD, echoed=CLIENT_SECRET)
        service = NotionOAuthService(make_config(), transport=RecordingTransport([(200, payload)]))
        data = await service.exchange_code("the-code")
        self.assertNotIn(CLIENT_SECRET, data.values())
        self.assertNotIn("echoed", data)

    async def test_missing_code_is_input_error(self):
        transport = RecordingTransport([])
        service = NotionOAuthService(make_config(), transport=transport)
        for bad in (None, "", 123):
            with self.assertRaises(InputError) as ctx:
                await service.exchange_code(bad)
            self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(transport.requests, [])

    async def test_missing_secret_is_configuration_error(self):
        service = NotionOAuthService(make_config(OAUTH_CLIENT_SECRET=None), transport=RecordingTransport([]))
        with self.assertRaises(ConfigurationError):
            await service.exchange_code("the-code")

    async def test_provider_error_is_forwarded_verbatim(self):
        body = {"error": "invalid_grant", "error_description": "Code expired", "request_id": "r1"}
        service = NotionOAuthService(make_config(), transport=RecordingTransport([(400, body)]))
        with self.assertRaises(UpstreamError) as ctx:
            await service.exchange_code("old-code")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.body, body)

    async def test_transport_failure_is_500(self):
        def boom(request):
            raise httpx.ConnectError("down", request=request)

        service = NotionOAuthService(make_config(), transport=httpx.MockTransport(boom))
        with self.assertRaises(UpstreamError) as ctx:
            await service.exchange_code("the-code")
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.body, {"error": "Unexpected error during Notion token exchange"})


class TestTokenRefresh(unittest.IsolatedAsyncioTestCase):

    async def test_refresh_posts_refresh_grant(self):
        transport = RecordingTransport([(200, {"access_token": "at-2", "refresh_token": "rt-2"})])
        service = NotionOAuthService(make_config(OAUTH_REDIRECT_URI=None), transport=transport)

        data = await service.refresh_token("rt-1")

        self.assertEqual(data["access_token"], "at-2")
        self.assertEqual(transport.json_body(0), {"grant_type": "refresh_token", "refresh_token": "rt-1"})
        self.assertTrue(transport.requests[0].headers["Authorization"].startswith("Basic "))

    async def test_refresh_error_keeps_error_and_description_only(self):
        body = {"error": "invalid_grant", "error_description": "Refresh token revoked", "request_id": "r9"}
        service = NotionOAuthService(make_config(), transport=RecordingTransport([(400, body)]))
        with self.assertRaises(UpstreamError) as ctx:
            await service.refresh_token("rt-bad")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.body, {"error": "invalid_grant", "error_description": "Refresh token revoked"})

    async def test_missing_refresh_token_is_input_error(self):
        service = NotionOAuthService(make_config(), transport=RecordingTransport([]))
        with self.assertRaises(InputError):
            await service.refresh_token("")


if __name__ == "__main__":
    unittest.main()
