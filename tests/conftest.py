import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import boto3
import pytest
from botocore.stub import Stubber

from r2_uploader.config import Config

VALID_CONFIG = {
    "account_id": "acct123",
    "access_key": "AKIDEXAMPLE",
    "secret_key": "secret",
    "bucket_name": "images-bucket",
    "public_url": "https://cdn.example.com",
}


@pytest.fixture
def config_data():
    return dict(VALID_CONFIG)


@pytest.fixture
def write_config(tmp_path):
    def _write(data):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data) if not isinstance(data, str) else data)
        return str(path)

    return _write


@pytest.fixture
def config():
    return Config(**VALID_CONFIG)


@pytest.fixture
def s3_client(config):
    return boto3.client(
        "s3",
        endpoint_url=config.endpoint,
        region_name="auto",
        aws_access_key_id=config.access_key,
        aws_secret_access_key=config.secret_key,
    )


@pytest.fixture
def stubber(s3_client):
    with Stubber(s3_client) as stub:
        yield stub


class _ImageHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        body = self.server.routes.get(self.path)
        if body is None:
            self.send_response(404)
            self.send_header("Content-Length", "0")
            self.end_headers()
            return
        self.send_response(200)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def http_server():
    """Local HTTP server; register bodies in ``server.routes[path]``."""
    server = HTTPServer(("127.0.0.1", 0), _ImageHandler)
    server.routes = {}
    server.base_url = f"http://127.0.0.1:{server.server_port}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
