"""Tests for the service relay and its mirror rows."""

import sqlite3

from tests.conftest import OTHER_OWNER_ID, OWNER_ID


def _create(client, provider, headers, body=None, uuid="svc-1", domains=None):
    provider.respond(
        "POST",
        "/services",
        status_code=201,
        json_body={"uuid": uuid, "domains": domains if domains is not None else []},
    )
    return client.post(
        "/api/v1/services",
        json=body or {"type": "plausible", "name": "analytics"},
        headers=headers,
    )


def test_create_service_without_api_key_makes_no_provider_call(
    unconfigured_client, provider, auth_headers
):
    response = unconfigured_client.post(
        "/api/v1/services", json={"type": "plausible", "name": "x"}, headers=auth_headers
    )
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Coolify API key not configured"}
    assert provider.calls == []


def test_create_service_missing_fields_is_rejected_before_config_check(
    unconfigured_client, provider, auth_headers
):
    response = unconfigured_client.post(
        "/api/v1/services", json={"type": "plausible"}, headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Missing required fields: type, name"}
    assert provider.calls == []


def test_create_service_sends_payload_and_mirrors_result(client, provider, auth_headers):
    response = _create(
        client,
        provider,
        auth_headers,
        body={"type": "plausible", "name": "analytics", "description": "stats", "env": {"A": "1"}},
        domains=["https://a.example.com", "https://b.example.com"],
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["uuid"] == "svc-1"

    [call] = provider.calls
    assert call.method == "POST"
    assert call.path == "/api/v1/services"
    assert call.headers["authorization"] == "Bearer test-key"
    assert call.json == {
        "type": "plausible",
        "name": "analytics",
        "project_uuid": "zgcogowo04ww0k8cc4gc4wsg",
        "server_uuid": "b08o4o4ck8wo4kc0k8w848o8",
        "environment_name": "production",
        "instant_deploy": True,
        "description": "stats",
    }

    record = body["database_record"]
    assert record["user_id"] == OWNER_ID
    assert record["service_id"] == "svc-1"
    assert record["type"] == "plausible"
    assert record["domain"] == "https://a.example.com"
    assert record["config"] == call.json
    assert record["response"] == body["data"]
    assert record["env"] == {"A": "1"}
    assert record["cloud_service"] is None


def test_create_service_with_no_domains_stores_null_domain(client, provider, auth_headers):
    response = _create(client, provider, auth_headers, domains=[])
    assert response.status_code == 201
    assert response.json()["database_record"]["domain"] is None


def test_create_service_honours_explicit_instant_deploy_false(client, provider, auth_headers):
    _create(
        client,
        provider,
        auth_headers,
        body={"type": "plausible", "name": "analytics", "instant_deploy": False},
    )
    assert provider.calls[0].json["instant_deploy"] is False


def test_create_service_joins_catalog_entry(client, provider, auth_headers, database_path):
    conn = sqlite3.connect(database_path)
    conn.execute(
        "INSERT INTO cloud_services (id, name, type, tags) VALUES (?, ?, ?, ?)",
        ("cat-1", "Plausible", "plausible", '["analytics"]'),
    )
    conn.commit()
    conn.close()

    response = _create(
        client,
        provider,
        auth_headers,
        body={"type": "plausible", "name": "analytics", "cloud_services_id": "cat-1"},
    )

    catalog = response.json()["database_record"]["cloud_service"]
    assert catalog["name"] == "Plausible"
    assert catalog["tags"] == ["analytics"]


def test_create_service_mirror_failure_still_succeeds(client, provider, auth_headers):
    # Unknown catalog id violates the foreign key, so the insert fails.
    response = _create(
        client,
        provider,
        auth_headers,
        body={"type": "plausible", "name": "analytics", "cloud_services_id": "missing"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["data"]["uuid"] == "svc-1"
    assert "database_record" in body
    assert body["database_record"] is None


def test_provider_error_status_and_message_are_relayed(client, provider, auth_headers):
    provider.respond("POST", "/services", status_code=422, json_body={"message": "Invalid type"})
    response = client.post(
        "/api/v1/services", json={"type": "nope", "name": "x"}, headers=auth_headers
    )
    assert response.status_code == 422
    assert response.json() == {"success": False, "error": "Invalid type"}


def test_unreachable_provider_maps_to_500(client, provider, auth_headers):
    provider.fail("POST", "/services", "connection refused")
    response = client.post(
        "/api/v1/services", json={"type": "plausible", "name": "x"}, headers=auth_headers
    )
    assert response.status_code == 500
    assert response.json()["error"] == "connection refused"


def test_delete_service_only_removes_callers_row(
    client, provider, auth_headers, other_auth_headers
):
    _create(client, provider, auth_headers)
    _create(client, provider, other_auth_headers)

    response = client.delete("/api/v1/services/svc-1", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["database_deleted"] is True
    assert provider.calls[-1].method == "DELETE"
    assert provider.calls[-1].path == "/api/v1/services/svc-1"

    remaining = client.get("/api/v1/database/services", headers=other_auth_headers).json()
    assert [row["user_id"] for row in remaining["data"]] == [OTHER_OWNER_ID]
    mine = client.get("/api/v1/database/services", headers=auth_headers).json()
    assert mine["data"] == []


def test_delete_service_without_mirror_row_reports_false(client, provider, auth_headers):
    response = client.delete("/api/v1/services/unknown", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["database_deleted"] is False


def test_get_service_returns_only_public_fields(client, provider, auth_headers):
    provider.respond(
        "GET",
        "/services/svc-1",
        json_body={
            "uuid": "svc-1",
            "name": "analytics",
            "status": "running",
            "docker_compose_raw": "services: {}",
            "environment_id": 3,
        },
    )
    response = client.get("/api/v1/services/svc-1", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"uuid": "svc-1", "name": "analytics", "status": "running"}


def test_update_service_patches_mirror_by_internal_id(client, provider, auth_headers):
    created = _create(client, provider, auth_headers).json()["database_record"]
    provider.respond("PATCH", f"/services/{created['id']}", json_body={"uuid": "svc-1"})

    response = client.patch(
        f"/api/v1/services/{created['id']}",
        json={"name": "renamed", "type": "umami"},
        headers=auth_headers,
    )

    body = response.json()
    assert response.status_code == 200
    assert body["database_record"]["config"] == {"name": "renamed", "type": "umami"}
    assert body["database_record"]["type"] == "umami"


def test_update_service_by_provider_uuid_leaves_mirror_untouched(client, provider, auth_headers):
    _create(client, provider, auth_headers)
    response = client.patch("/api/v1/services/svc-1", json={"name": "x"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["database_record"] is None


def test_service_actions_are_relayed_as_get(client, provider, auth_headers):
    response = client.get("/api/v1/services/svc-1/restart", headers=auth_headers)
    assert response.status_code == 200
    assert (provider.calls[0].method, provider.calls[0].path) == (
        "GET",
        "/api/v1/services/svc-1/restart",
    )


def test_unknown_service_action_is_rejected(client, provider, auth_headers):
    response = client.get("/api/v1/services/svc-1/explode", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert provider.calls == []


def test_create_env_requires_key_and_value(client, provider, auth_headers):
    response = client.post(
        "/api/v1/services/svc-1/envs", json={"key": "DEBUG"}, headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: key, value"
    assert provider.calls == []


def test_create_env_accepts_empty_value(client, provider, auth_headers):
    response = client.post(
        "/api/v1/services/svc-1/envs", json={"key": "DEBUG", "value": ""}, headers=auth_headers
    )
    assert response.status_code == 201
    assert provider.calls[0].json == {"key": "DEBUG", "value": ""}


def test_bulk_env_update_is_not_taken_for_an_env_id(client, provider, auth_headers):
    payload = {"data": [{"key": "A", "value": "1"}]}
    response = client.patch(
        "/api/v1/services/svc-1/envs/bulk", json=payload, headers=auth_headers
    )
    assert response.status_code == 200
    assert provider.calls[0].path == "/api/v1/services/svc-1/envs/bulk"
    assert provider.calls[0].json == payload


def test_env_update_and_delete_target_env_id(client, provider, auth_headers):
    client.patch("/api/v1/services/svc-1/envs/env-9", json={"value": "2"}, headers=auth_headers)
    client.delete("/api/v1/services/svc-1/envs/env-9", headers=auth_headers)
    assert [(c.method, c.path) for c in provider.calls] == [
        ("PATCH", "/api/v1/services/svc-1/envs/env-9"),
        ("DELETE", "/api/v1/services/svc-1/envs/env-9"),
    ]


def test_create_env_forwards_null_value(client, provider, auth_headers):
    response = client.post(
        "/api/v1/services/svc-1/envs", json={"key": "A", "value": None}, headers=auth_headers
    )
    assert response.status_code == 201
    [call] = provider.calls
    assert call.json == {"key": "A", "value": None}


def test_create_env_without_value_key_is_rejected(client, provider, auth_headers):
    response = client.post(
        "/api/v1/services/svc-1/envs", json={"key": "A", "is_literal": True}, headers=auth_headers
    )
    assert response.status_code == 400
    assert provider.calls == []


def test_create_service_leaves_field_types_to_provider(client, provider, auth_headers):
    response = _create(client, provider, auth_headers, body={"type": "plausible", "name": 123})
    assert response.status_code == 201
    assert provider.calls[0].json["name"] == 123
