import unittest
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
from yarl import URL

from apodbg.api.apod_fetcher import ApodFetcher
from apodbg.api.http_client import HTTPClient
from apodbg.config.settings import Settings
from apodbg.exceptions import NetworkError


def make_response(status: int, body: bytes = b"", text: str = "") -> MagicMock:
    response = MagicMock()
    response.status = status
    response.reason = "Reason"
    response.read = AsyncMock(return_value=body)
    response.text = AsyncMock(return_value=text)
    response.release = MagicMock()
    return response


class TestHTTPClient(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        # Patch aiohttp.ClientSession and the connector it would be given
        self.session_patcher = patch("aiohttp.ClientSession")
        self.connector_patcher = patch("aiohttp.TCPConnector")
        self.sleep_patcher = patch("apodbg.api.http_client.asyncio.sleep", new_callable=AsyncMock)
        self.mock_session_cls = self.session_patcher.start()
        self.connector_patcher.start()
        self.mock_sleep = self.sleep_patcher.start()

        self.mock_session = MagicMock()
        self.mock_session.closed = False
        self.mock_session.close = AsyncMock()
        self.mock_session.request = AsyncMock()
        self.mock_session_cls.return_value = self.mock_session

        self.settings = MagicMock(spec=Settings)
        self.settings.connection_quality = 1
        self.settings.retries = 1
        self.settings.proxy = URL()
        self.client = HTTPClient(self.settings)

    def tearDown(self):
        self.sleep_patcher.stop()
        self.connector_patcher.stop()
        self.session_patcher.stop()

    async def test_get_text_success(self):
        response = make_response(200, b"<html>", "<html>")
        self.mock_session.request.return_value = response

        self.assertEqual(await self.client.get_text("https://apod.nasa.gov/"), "<html>")
        response.release.assert_called()

    async def test_client_error_is_not_retried(self):
        self.mock_session.request.return_value = make_response(404)

        with self.assertRaises(NetworkError) as ctx:
            await self.client.get_bytes("https://apod.nasa.gov/apod/image/x.jpg")

        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(self.mock_session.request.await_count, 1)

    async def test_server_error_is_retried_then_raised(self):
        self.mock_session.request.return_value = make_response(503)

        with self.assertRaises(NetworkError) as ctx:
            await self.client.get_text("https://corsproxy.io/?x")

        self.assertEqual(ctx.exception.status, 503)
        self.assertEqual(self.mock_session.request.await_count, 2)
        self.mock_sleep.assert_awaited_once()

    async def test_connection_error_then_success(self):
        self.mock_session.request.side_effect = [
            aiohttp.ClientConnectionError("reset"),
            make_response(200, b"\xff\xd8"),
        ]

        self.assertEqual(await self.client.get_bytes("https://apod.nasa.gov/x.jpg"), b"\xff\xd8")

    async def test_no_retries(self):
        self.settings.retries = 0
        self.mock_session.request.side_effect = aiohttp.ClientConnectionError("refused")

        with self.assertRaises(NetworkError) as ctx:
            await self.client.get_text("https://apod.nasa.gov/")

        self.assertIsNone(ctx.exception.status)
        self.assertIn("refused", str(ctx.exception))
        self.mock_sleep.assert_not_awaited()

    async def test_proxy_is_passed(self):
        self.settings.proxy = URL("http://proxy:3128")
        self.mock_session.request.return_value = make_response(200)

        await self.client.get_bytes("https://apod.nasa.gov/")

        self.assertEqual(self.mock_session.request.await_args.kwargs["proxy"], URL("http://proxy:3128"))

    async def test_close(self):
        await self.client.get_session()
        await self.client.close()
        self.mock_session.close.assert_awaited_once()


class TestApodFetcher(unittest.TestCase):
    def setUp(self):
        self.settings = MagicMock(spec=Settings)
        self.http = MagicMock(spec=HTTPClient)

    def test_relay_url(self):
        self.settings.cors_proxy = "https://corsproxy.io/?"
        with patch("apodbg.api.apod_fetcher.random.random", return_value=0.25):
            url = ApodFetcher(self.http, self.settings).build_url()
        self.assertEqual(
            str(url),
            "https://corsproxy.io/?https%3A%2F%2Fapod.nasa.gov%2Fapod%2Fastropix.html%3Fnocache%3D0.25",
        )

    def test_direct_url_without_relay(self):
        self.settings.cors_proxy = ""
        url = ApodFetcher(self.http, self.settings).build_url()
        self.assertEqual(url.host, "apod.nasa.gov")
        self.assertEqual(url.path, "/apod/astropix.html")
        self.assertIn("nocache", url.query)

    def test_cache_buster_changes(self):
        self.settings.cors_proxy = ""
        fetcher = ApodFetcher(self.http, self.settings)
        self.assertNotEqual(fetcher.build_url(), fetcher.build_url())


if __name__ == "__main__":
    unittest.main()
