def test_health_is_always_ok(make_client):
    for client in (make_client(), make_client(api_key=None)):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}


def test_readyz_reports_configuration(make_client):
    assert make_client(api_key=None).get("/readyz").json() == {
        "openai_configured": False,
        "asset_storage": None,
    }
    assert make_client().get("/readyz").json() == {
        "openai_configured": True,
        "asset_storage": None,
    }


def test_index_serves_landing_page(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "/api/generate" in resp.text


def test_index_missing_landing_page(make_client, tmp_path):
    client = make_client(static_dir=tmp_path)

    resp = client.get("/")

    assert resp.status_code == 404
    assert resp.json()["details"] == "Landing page not found"


def test_cors_headers_are_sent(client):
    resp = client.get("/health", headers={"Origin": "http://example.com"})

    assert resp.headers["access-control-allow-origin"] == "*"
