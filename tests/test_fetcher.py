import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from driftwatch.fetcher import FetchError, Fetcher


@pytest.fixture
def serve():
    servers = []
    paths = []

    def start(status, body=b""):
        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                paths.append(self.path)
                self.send_response(status)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, *args):
                pass

        server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return f"http://127.0.0.1:{server.server_address[1]}", paths

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


def test_fetch_success(serve):
    url, paths = serve(200, b"IMAGE=nginx:1.25\nREPLICAS=3\n")
    config = Fetcher(url, 5).fetch("web")
    assert config.service_name == "web"
    assert config.fields == {"IMAGE": "nginx:1.25", "REPLICAS": "3"}
    assert paths == ["/services/web/config"]


def test_fetch_not_found(serve):
    url, _ = serve(404)
    with pytest.raises(FetchError, match="404"):
        Fetcher(url, 5).fetch("missing")


def test_fetch_invalid_body(serve):
    url, _ = serve(200, b"BADLINE\n")
    with pytest.raises(FetchError, match="parse config"):
        Fetcher(url, 5).fetch("svc")


def test_fetch_non_ok_success_status(serve):
    url, _ = serve(204)
    with pytest.raises(FetchError, match="204"):
        Fetcher(url, 5).fetch("svc")


def test_fetch_connection_refused(serve):
    url, _ = serve(200)
    with pytest.raises(FetchError):
        Fetcher("http://127.0.0.1:1", 2).fetch("svc")
    assert url.startswith("http://127.0.0.1:")