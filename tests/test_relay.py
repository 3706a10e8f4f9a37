"""Tests for the plain relays: resources and applications."""

import pytest


def test_list_resources(client, provider, auth_headers):
    provider.respond("GET", "/resources", json_body=[{"uuid": "r-1", "type": "service"}])
    response = client.get("/api/v1/resources", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": [{"uuid": "r-1", "type": "service"}]}


def test_resources_without_api_key(unconfigured_client, provider, auth_headers):
    response = unconfigured_client.get("/api/v1/resources/r-1", headers=auth_headers)
    assert response.status_code == 500
    assert response.json()["error"] == "Coolify API key not configured"
    assert provider.calls == []


def test_get_application(client, provider, auth_headers):
    provider.respond("GET", "/applications/app-1", json_body={"uuid": "app-1", "fqdn": "a.io"})
    response = client.get("/api/v1/applications/app-1", headers=auth_headers)
    assert response.json()["data"] == {"uuid": "app-1", "fqdn": "a.io"}


@pytest.mark.parametrize("action", ["start", "stop", "restart"])
def test_application_actions_are_relayed_as_get(client, provider, auth_headers, action):
    response = client.get(f"/api/v1/applications/app-1/{action}", headers=auth_headers)
    assert response.status_code == 200
    assert (provider.calls[0].method, provider.calls[0].path) == (
        "GET",
        f"/api/v1/applications/app-1/{action}",
    )


def test_provider_status_is_mirrored(client, provider, auth_headers):
    provider.respond("GET", "/applications", status_code=401, json_body={"message": "Unauthenticated."})
    response = client.get("/api/v1/applications", headers=auth_headers)
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthenticated."}


def test_non_json_success_body_is_relayed_as_text(client, provider, auth_headers):
    provider.respond("GET", "/applications/app-1/restart", text="Restart queued.")
    response = client.get("/api/v1/applications/app-1/restart", headers=auth_headers)
    assert response.json() == {"success": True, "data": "Restart queued."}


def test_unknown_route_uses_failure_envelope(client, auth_headers):
    response = client.get("/api/v1/nowhere", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}
