"""Tests for the database relay, public port allocation and the database mirror."""

import pytest

from tests.conftest import OWNER_ID


def _create_postgres(client, provider, headers, name="pg", uuid="db-1"):
    provider.respond(
        "POST",
        "/databases/postgresql",
        status_code=201,
        json_body={
            "uuid": uuid,
            "external_db_url": f"postgres://public/{name}",
            "internal_db_url": f"postgres://{uuid}:5432/{name}",
        },
    )
    return client.post(
        "/api/v1/databases/postgresql",
        json={"name": name, "postgres_password": "secret", "type": "ignored"},
        headers=headers,
    )


def test_create_database_builds_public_payload_and_mirrors(client, provider, auth_headers):
    response = _create_postgres(client, provider, auth_headers)

    assert response.status_code == 201
    [call] = provider.calls
    assert call.path == "/api/v1/databases/postgresql"
    assert call.json == {
        "name": "pg",
        "postgres_password": "secret",
        "project_uuid": "zgcogowo04ww0k8cc4gc4wsg",
        "server_uuid": "b08o4o4ck8wo4kc0k8w848o8",
        "environment_name": "production",
        "instant_deploy": True,
        "is_public": True,
        "public_port": 1000,
    }

    record = response.json()["database_record"]
    assert record["user_id"] == OWNER_ID
    assert record["database_uuid"] == "db-1"
    assert record["type"] == "postgresql"
    assert record["public_port"] == 1000
    assert record["internal_db_url"] == "postgres://db-1:5432/pg"


def test_public_ports_are_handed_out_in_sequence(client, provider, auth_headers):
    _create_postgres(client, provider, auth_headers, uuid="db-1")
    second = _create_postgres(client, provider, auth_headers, uuid="db-2")
    assert second.json()["database_record"]["public_port"] == 1001


def test_create_database_requires_name(client, provider, auth_headers):
    response = client.post("/api/v1/databases/redis", json={}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Missing required field: name"
    assert provider.calls == []


def test_create_database_rejects_unknown_engine(client, provider, auth_headers):
    response = client.post("/api/v1/databases/oracle", json={"name": "x"}, headers=auth_headers)
    assert response.status_code == 400
    assert provider.calls == []


def test_unconfigured_create_does_not_consume_a_port(
    unconfigured_client, client, provider, auth_headers
):
    failed = unconfigured_client.post(
        "/api/v1/databases/mysql", json={"name": "m"}, headers=auth_headers
    )
    assert failed.status_code == 500
    assert failed.json()["error"] == "Coolify API key not configured"

    created = _create_postgres(client, provider, auth_headers)
    assert created.json()["database_record"]["public_port"] == 1000


@pytest.mark.parametrize("action", ["start", "stop", "restart"])
def test_database_actions_are_relayed_as_post(client, provider, auth_headers, action):
    response = client.post(f"/api/v1/databases/db-1/{action}", headers=auth_headers)
    assert response.status_code == 200
    assert (provider.calls[0].method, provider.calls[0].path) == (
        "POST",
        f"/api/v1/databases/db-1/{action}",
    )


def test_update_database_requires_a_body(client, provider, auth_headers):
    response = client.patch("/api/v1/databases/db-1", json={}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "No update data provided"
    assert provider.calls == []


def test_update_database_updates_callers_mirror_row(client, provider, auth_headers):
    _create_postgres(client, provider, auth_headers)
    provider.respond("PATCH", "/databases/db-1", json_body={"uuid": "db-1", "name": "renamed"})

    response = client.patch(
        "/api/v1/databases/db-1",
        json={"name": "renamed", "public_port": 2000},
        headers=auth_headers,
    )

    record = response.json()["database_record"]
    assert record["public_port"] == 2000
    assert record["config"] == {"name": "renamed", "public_port": 2000}


def test_update_database_of_another_owner_leaves_mirror_alone(
    client, provider, auth_headers, other_auth_headers
):
    _create_postgres(client, provider, auth_headers)
    response = client.patch(
        "/api/v1/databases/db-1", json={"name": "hijack"}, headers=other_auth_headers
    )
    assert response.status_code == 200
    assert response.json()["database_record"] is None


def test_delete_database_forwards_cleanup_flags(client, provider, auth_headers):
    _create_postgres(client, provider, auth_headers)

    response = client.delete(
        "/api/v1/databases/db-1?delete_volumes=false", headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["database_deleted"] is True
    call = provider.calls[-1]
    assert call.method == "DELETE"
    assert call.params == {
        "delete_configurations": "true",
        "delete_volumes": "false",
        "docker_cleanup": "true",
        "delete_connected_networks": "true",
    }


def test_delete_database_without_mirror_row(client, provider, auth_headers):
    response = client.delete("/api/v1/databases/db-404", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["database_deleted"] is False


def test_list_and_get_databases(client, provider, auth_headers):
    provider.respond("GET", "/databases", json_body=[{"uuid": "db-1"}])
    provider.respond("GET", "/databases/db-1", json_body={"uuid": "db-1"})

    assert client.get("/api/v1/databases", headers=auth_headers).json()["data"] == [
        {"uuid": "db-1"}
    ]
    assert client.get("/api/v1/databases/db-1", headers=auth_headers).json()["data"] == {
        "uuid": "db-1"
    }
