from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from bloghub.backend import BackendClient, build_query, parse_content_range
from bloghub.config import BackendConfig
from bloghub.errors import BackendError, NotFoundError


def _response(status: int = 200, payload=None, headers: dict[str, str] | None = None) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.headers = headers or {}
    response.content = b"" if payload is None else b"x"
    response.json.return_value = payload
    response.text = ""
    response.reason = "Error"
    return response


@pytest.fixture()
def session() -> MagicMock:
    mock = MagicMock(spec=requests.Session)
    mock.headers = {}
    return mock


@pytest.fixture()
def client(session: MagicMock) -> BackendClient:
    config = BackendConfig(url="https://demo.supabase.co/", anon_key="anon-key", timeout=5)
    return BackendClient(config, session=session)


def test_build_query_renders_filters_order_and_limit() -> None:
    params = build_query(
        "id,title",
        [("published", "eq", True), ("id", "in", ["a1", "b,2"]), ("deleted_at", "is", None)],
        order="date",
        ascending=False,
        limit=3,
    )

    assert params == [
        ("select", "id,title"),
        ("published", "eq.true"),
        ("id", 'in.(a1,"b,2")'),
        ("deleted_at", "is.null"),
        ("order", "date.desc"),
        ("limit", "3"),
    ]


def test_parse_content_range() -> None:
    assert parse_content_range("0-9/42") == 42
    assert parse_content_range("*/0") == 0
    assert parse_content_range("0-9/*") is None
    assert parse_content_range(None) is None


def test_headers_carry_anon_key(client: BackendClient, session: MagicMock) -> None:
    assert session.headers["apikey"] == "anon-key"
    assert session.headers["Authorization"] == "Bearer anon-key"
    assert client.base_url == "https://demo.supabase.co"


def test_select_issues_get_with_query(client: BackendClient, session: MagicMock) -> None:
    session.request.return_value = _response(payload=[{"id": "a1"}])

    rows = client.select("articles", filters=[("slug", "eq", "hello-world")], order="date", ascending=False)

    assert rows == [{"id": "a1"}]
    method, url = session.request.call_args.args
    assert method == "GET"
    assert url == "https://demo.supabase.co/rest/v1/articles"
    assert ("slug", "eq.hello-world") in session.request.call_args.kwargs["params"]
    assert session.request.call_args.kwargs["timeout"] == 5


def test_select_single_raises_not_found(client: BackendClient, session: MagicMock) -> None:
    session.request.return_value = _response(payload=[])

    with pytest.raises(NotFoundError):
        client.select("articles", filters=[("slug", "eq", "missing")], single=True)


def test_select_count_reads_content_range(client: BackendClient, session: MagicMock) -> None:
    session.request.return_value = _response(payload=[{"id": "a1"}], headers={"Content-Range": "0-0/12"})

    rows, total = client.select("articles", "id", count=True)

    assert rows == [{"id": "a1"}]
    assert total == 12
    assert session.request.call_args.kwargs["headers"] == {"Prefer": "count=exact"}


def test_insert_posts_list_and_returns_rows(client: BackendClient, session: MagicMock) -> None:
    session.request.return_value = _response(201, payload=[{"id": "c1", "name": "Ann"}])

    rows = client.insert("comments", {"name": "Ann"})

    assert rows == [{"id": "c1", "name": "Ann"}]
    assert session.request.call_args.args[0] == "POST"
    assert session.request.call_args.kwargs["json"] == [{"name": "Ann"}]
    assert session.request.call_args.kwargs["headers"] == {"Prefer": "return=representation"}


def test_update_and_delete_require_filters(client: BackendClient) -> None:
    with pytest.raises(ValueError):
        client.update("articles", {"title": "x"}, filters=[])
    with pytest.raises(ValueError):
        client.delete("articles", filters=[])


def test_delete_sends_filters(client: BackendClient, session: MagicMock) -> None:
    session.request.return_value = _response(204)

    client.delete("comments", filters=[("id", "eq", "c1")])

    assert session.request.call_args.args[0] == "DELETE"
    assert session.request.call_args.kwargs["params"] == [("id", "eq.c1")]


def test_rpc_and_function_paths(client: BackendClient, session: MagicMock) -> None:
    session.request.return_value = _response(payload=7)

    assert client.rpc("get_like_count", {"p_article_id": "a1"}) == 7
    assert session.request.call_args.args[1].endswith("/rest/v1/rpc/get_like_count")

    session.request.return_value = _response(payload={"success": True})
    assert client.invoke_function("create_tables_and_functions") == {"success": True}
    assert session.request.call_args.args[1].endswith("/functions/v1/create_tables_and_functions")


def test_http_error_becomes_backend_error(client: BackendClient, session: MagicMock) -> None:
    session.request.return_value = _response(500, payload={"message": "boom"})

    with pytest.raises(BackendError) as excinfo:
        client.select("articles")

    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "boom"
    assert str(excinfo.value) == "boom (HTTP 500)"


def test_transport_error_is_not_retried(client: BackendClient, session: MagicMock) -> None:
    session.request.side_effect = requests.ConnectionError("offline")

    with pytest.raises(BackendError, match="Could not reach backend"):
        client.rpc("increment_view_count", {"article_id": "a1"})

    assert session.request.call_count == 1
