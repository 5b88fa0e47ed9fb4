import copy
import json

import pytest
from aiohttp import web

MOD_ID = 12345
CSRF_TOKEN = "tok-3f9a"
SET_COOKIES = [
    "csrftoken=abc123; Path=/; SameSite=Lax",
    "sessionid=xyz789; HttpOnly; Path=/",
]
COOKIE_HEADER = "csrftoken=abc123; sessionid=xyz789"

FILES = {
    "f1.wotmod": b"PK\x03\x04" + b"mod-2.1" * 4096,
    "f0.wotmod": b"PK\x03\x04" + b"mod-2.0" * 128,
}

DESCRIPTOR = {
    "id": MOD_ID,
    "downloads": 1532,
    "change_log": [
        {"body": "Fixed crash on battle load", "version": "2.1"},
        {"body": "Initial release", "version": "2.0"},
    ],
    "mark": "4.8",
    "owner": {
        "pk": 77,
        "spa_id": 500123,
        "spa_username": "TankerOne",
        "username": "tankerone",
        "realm": "eu",
    },
    "versions": [
        {
            "id": 902,
            "version": "2.1",
            "game_version": {"id": 31, "version": "1.20"},
            "download_url": "{origin}/files/f1.wotmod",
            "version_file_size": len(FILES["f1.wotmod"]),
            "comment": "",
            "change_log": "Fixed crash on battle load",
            "created_at": "2023-05-02T10:00:00Z",
            "updated_at": "2023-05-02T10:00:00Z",
        },
        {
            "id": 901,
            "version": "2.0",
            "game_version": {"id": 30, "version": "1.19"},
            "download_url": "{origin}/files/f0.wotmod",
            "version_file_size": len(FILES["f0.wotmod"]),
            "comment": "first",
            "change_log": "Initial release",
            "created_at": "2023-01-15T08:30:00Z",
            "updated_at": "2023-01-16T08:30:00Z",
        },
    ],
}


def settings_html(settings) -> str:
    """模拟页面：设置块是包含 JSON 文本的字符串字面量"""
    literal = json.dumps(json.dumps(settings))
    return (
        "<!DOCTYPE html><html><head><title>Mod</title>"
        f"<script>window.__SETTINGS__ = JSON.parse({literal});</script>"
        "</head><body><div id='root'></div></body></html>"
    )


class FakeWGMods:
    """模拟 wgmods 站点"""

    def __init__(self):
        self.set_cookies = list(SET_COOKIES)
        self.page_html = settings_html({"csrfToken": CSRF_TOKEN, "lang": "en"})
        self.page_status = 200
        self.descriptor = copy.deepcopy(DESCRIPTOR)
        self.api_body = None
        self.files = dict(FILES)
        self.page_calls = 0
        self.api_calls = 0
        self.download_calls = 0
        self.api_headers = []
        self.download_headers = []

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/mods/{mod_id}/", self.api)
        app.router.add_get("/files/{name}", self.file)
        app.router.add_get("/truncated/{name}", self.truncated)
        app.router.add_get("/{mod_id}/", self.page)
        return app

    async def page(self, request: web.Request) -> web.Response:
        self.page_calls += 1
        body = self.page_html
        if isinstance(body, str):
            body = body.encode("utf-8")
        response = web.Response(
            body=body, content_type="text/html", status=self.page_status
        )
        for cookie in self.set_cookies:
            response.headers.add("Set-Cookie", cookie)
        return response

    async def api(self, request: web.Request) -> web.Response:
        self.api_calls += 1
        self.api_headers.append(request.headers.copy())
        origin = str(request.url.origin())
        expected = {
            "Cookie": COOKIE_HEADER,
            "X-CSRFToken": CSRF_TOKEN,
            "x-requested-with": "XMLHttpRequest",
            "Referer": f"{origin}/{request.match_info['mod_id']}/",
        }
        for name, value in expected.items():
            if request.headers.get(name) != value:
                return web.json_response({"detail": f"bad {name}"}, status=403)

        if isinstance(self.api_body, bytes):
            return web.Response(body=self.api_body, content_type="application/json")
        if self.api_body is not None:
            return web.Response(text=self.api_body, content_type="application/json")
        body = json.dumps(self.descriptor).replace("{origin}", origin)
        return web.Response(text=body, content_type="application/json")

    async def file(self, request: web.Request) -> web.Response:
        self.download_calls += 1
        self.download_headers.append(dict(request.headers))
        data = self.files.get(request.match_info["name"])
        if data is None:
            raise web.HTTPNotFound()
        return web.Response(body=data, content_type="application/octet-stream")

    async def truncated(self, request: web.Request) -> web.StreamResponse:
        """声明 100000 字节，只发送 5000 字节后断开连接"""
        self.download_calls += 1
        response = web.StreamResponse(headers={"Content-Length": "100000"})
        response.content_type = "application/octet-stream"
        await response.prepare(request)
        await response.write(b"x" * 5000)
        request.transport.close()
        return response


@pytest.fixture
def fake_site():
    return FakeWGMods()


@pytest.fixture
async def site_url(aiohttp_server, fake_site):
    server = await aiohttp_server(fake_site.make_app())
    return str(server.make_url("")).rstrip("/")


@pytest.fixture
def mods_folder(tmp_path):
    (tmp_path / "1.20").mkdir()
    (tmp_path / "1.19").mkdir()
    return tmp_path
