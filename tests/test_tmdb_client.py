import httpx
import pytest

from app.services.tmdb import ConfigurationError, TMDbClient, TMDbError, UpstreamError


def test_call_attaches_api_key_and_drops_empty_params(fake_tmdb):
    fake_tmdb.route("/discover/movie", json={"results": []})
    client = fake_tmdb.client()

    payload = client.call(
        "/discover/movie",
        {"page": 2, "with_genres": None, "query": "", "include_adult": False},
    )

    assert payload == {"results": []}
    params = fake_tmdb.params()
    assert params["api_key"] == "test-key"
    assert params["page"] == "2"
    assert params["include_adult"] == "false"
    assert "with_genres" not in params
    assert "query" not in params
    assert fake_tmdb.requests[0].headers["accept"] == "application/json"


def test_non_success_status_raises_upstream_error(fake_tmdb):
    fake_tmdb.route("/movie/1", json={"status_message": "Invalid API key"}, status_code=401)
    client = fake_tmdb.client()

    with pytest.raises(UpstreamError) as excinfo:
        client.movie_details(1)

    assert excinfo.value.status_code == 401
    assert "Invalid API key" in excinfo.value.body
    assert str(excinfo.value).startswith("TMDb 401:")


def test_transport_failure_is_wrapped(fake_tmdb):
    def _boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    fake_tmdb.route("/movie/1", _boom)
    client = fake_tmdb.client()

    with pytest.raises(TMDbError) as excinfo:
        client.movie_details(1)
    assert not isinstance(excinfo.value, UpstreamError)
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_missing_api_key_fails_before_any_request(fake_tmdb):
    client = TMDbClient(api_key="", transport=httpx.MockTransport(fake_tmdb))

    with pytest.raises(ConfigurationError):
        client.call("/discover/movie")
    assert fake_tmdb.requests == []


def test_api_key_is_read_from_settings(monkeypatch, fake_tmdb):
    monkeypatch.setenv("TMDB_API_KEY", "from-env")
    from app.core.config import get_settings

    get_settings.cache_clear()
    fake_tmdb.route("/movie/5/videos", json={"results": []})
    client = TMDbClient(transport=httpx.MockTransport(fake_tmdb))

    client.movie_videos(5)

    assert fake_tmdb.params()["api_key"] == "from-env"
    assert fake_tmdb.params()["language"] == "en-US"


def test_search_movies_sends_query_and_page(fake_tmdb):
    fake_tmdb.route("/search/movie", json={"results": []})
    client = fake_tmdb.client()

    client.search_movies(query="heat", page=3)

    params = fake_tmdb.params()
    assert params["query"] == "heat"
    assert params["page"] == "3"
    assert params["include_adult"] == "false"


def test_non_json_body_raises_tmdb_error(fake_tmdb):
    fake_tmdb.route("/movie/1/videos", lambda request: httpx.Response(200, text="<html>gateway</html>"))
    client = fake_tmdb.client()

    with pytest.raises(TMDbError) as excinfo:
        client.movie_videos(1)
    assert not isinstance(excinfo.value, UpstreamError)
    assert isinstance(excinfo.value.__cause__, ValueError)
