import threading

import httpx
import pytest

from modules.core import http

pytestmark = pytest.mark.unit


@pytest.fixture()
def fresh_client(monkeypatch):
    monkeypatch.setattr(http, "_http_client", None)
    yield
    if http._http_client is not None:
        http._http_client.close()


class TestSharedHttpClient:
    def test_reused_across_calls(self, fresh_client):
        assert http.get_http_client() is http.get_http_client()

    def test_uses_configured_timeout(self, fresh_client, settings):
        settings.SERVICE_TIMEOUT_SECONDS = 2.5
        assert http.get_http_client().timeout == httpx.Timeout(2.5)

    def test_concurrent_first_use_builds_one_client(self, fresh_client):
        barrier = threading.Barrier(8)
        clients = []

        def worker():
            barrier.wait()
            clients.append(http.get_http_client())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(clients) == 8
        assert all(client is clients[0] for client in clients)
