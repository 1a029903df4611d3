from __future__ import annotations

import threading
import time
import xml.etree.ElementTree as ET
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Iterator, List

import pytest

from freshbooks import Connection
from tests.integration.helpers import VALID_TOKEN, basic_authorization


@pytest.fixture
def api_server() -> Iterator[Dict[str, Any]]:
    received: List[Dict[str, Any]] = []

    class Handler(BaseHTTPRequestHandler):
        def _reply(self, status: int, body: str) -> None:
            payload = body.encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", "application/xml; charset=utf-8")
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)

        def do_POST(self) -> None:  # noqa: N802
            length = int(self.headers.get("Content-Length", 0))
            body = self.rfile.read(length).decode("utf-8")
            received.append(
                {
                    "path": self.path,
                    "authorization": self.headers.get("Authorization"),
                    "content_type": self.headers.get("Content-Type"),
                    "body": body,
                }
            )

            if self.path != "/api/2.1/xml-in":
                self._reply(404, "not found")
                return
            if self.headers.get("Authorization") != basic_authorization(VALID_TOKEN):
                self._reply(401, "unauthorized")
                return

            method = ET.fromstring(body).get("method")
            if method == "system.slow":
                time.sleep(0.2)
            if method == "system.broken":
                self._reply(200, '<response status="ok"><api_url>')
                return
            if method == "system.teapot":
                self._reply(418, "teapot")
                return
            if method == "client.get":
                self._reply(
                    200,
                    '<?xml version="1.0" encoding="utf-8"?>'
                    '<response xmlns="http://www.freshbooks.com/api/" status="fail">'
                    "<error>Client not found.</error><code>50010</code></response>",
                )
                return
            self._reply(
                200,
                '<?xml version="1.0" encoding="utf-8"?>'
                '<response xmlns="http://www.freshbooks.com/api/" status="ok">'
                f"<method>{method}</method><echo>{body.replace('&', '&amp;').replace('<', '&lt;')}</echo>"
                "</response>",
            )

        def log_message(self, format: str, *args: Any) -> None:  # noqa: A003
            return

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        host, port = server.server_address[:2]
        yield {"domain": f"{host}:{port}", "received": received}
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=1)


@pytest.fixture
def integration_connection(api_server: Dict[str, Any]) -> Connection:
    return Connection(api_server["domain"], VALID_TOKEN, scheme="http", timeout=5.0)
