import pytest

from wotmodfetch.exceptions import NetworkError, ParseError, ProtocolError
from wotmodfetch.services import WGModsClient, acquire_session, combine_cookies

from conftest import COOKIE_HEADER, CSRF_TOKEN, MOD_ID


@pytest.mark.parametrize(
    "headers, expected",
    [
        (["sid=1"], "sid=1"),
        (["sid=1; Path=/; HttpOnly"], "sid=1"),
        (["a=1; Path=/", "b=2; Secure"], "a=1; b=2"),
        (["", "  ", "c=3"], "c=3"),
        ([], ""),
    ],
)
def test_combine_cookies(headers, expected):
    assert combine_cookies(headers) == expected


async def test_acquire_session(site_url, fake_site):
    async with WGModsClient(base_url=site_url) as client:
        context = await acquire_session(client, MOD_ID)

    assert context.csrf_token == CSRF_TOKEN
    assert context.cookie == COOKIE_HEADER
    assert context.referer == f"{site_url}/{MOD_ID}/"
    assert fake_site.page_calls == 1


async def test_no_cookie_is_protocol_error(site_url, fake_site):
    fake_site.set_cookies = []
    async with WGModsClient(base_url=site_url) as client:
        with pytest.raises(ProtocolError, match="no cookie was returned"):
            await acquire_session(client, MOD_ID)


async def test_page_without_settings(site_url, fake_site):
    fake_site.page_html = "<html><body>Site moved</body></html>"
    async with WGModsClient(base_url=site_url) as client:
        with pytest.raises(ParseError):
            await acquire_session(client, MOD_ID)


async def test_http_error_is_network_error(site_url, fake_site):
    fake_site.page_status = 503
    async with WGModsClient(base_url=site_url) as client:
        with pytest.raises(NetworkError) as exc_info:
            await acquire_session(client, MOD_ID)
    assert exc_info.value.context["status_code"] == 503
    assert exc_info.value.context["url"] == f"{site_url}/{MOD_ID}/"


async def test_unreachable_host_is_network_error():
    async with WGModsClient(base_url="http://127.0.0.1:1", timeout=5) as client:
        with pytest.raises(NetworkError) as exc_info:
            await acquire_session(client, MOD_ID)
    assert exc_info.value.context["url"] == f"http://127.0.0.1:1/{MOD_ID}/"


async def test_non_utf8_bytes_around_settings(site_url, fake_site):
    fake_site.page_html = b"<p>\xff\xfe</p>" + fake_site.page_html.encode("utf-8")
    async with WGModsClient(base_url=site_url) as client:
        context = await acquire_session(client, MOD_ID)
    assert context.csrf_token == CSRF_TOKEN


async def test_non_utf8_page_without_settings(site_url, fake_site):
    fake_site.page_html = b"<html>\xff\xfe\x00garbage</html>"
    async with WGModsClient(base_url=site_url) as client:
        with pytest.raises(ParseError):
            await acquire_session(client, MOD_ID)
