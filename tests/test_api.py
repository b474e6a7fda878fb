"""End-to-end HTTP tests: auth, tenant isolation and error rendering."""

import pytest
from httpx import AsyncClient

from logistics.core.identity import Role
from tests.factories import (
    PASSWORD,
    Tenant,
    carrier_payload,
    customer_payload,
    seed_tenant,
    shipment_payload,
)

API = "/api/v1"


async def _create(client: AsyncClient, tenant: Tenant, path: str, payload: dict) -> dict:
    resp = await client.post(f"{API}{path}", json=payload, headers=tenant.headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_register_login_and_me(client: AsyncClient) -> None:
    resp = await client.post(
        f"{API}/auth/register",
        json={
            "organizationName": "Initech Logistics",
            "organizationSlug": "initech",
            "email": "Owner@Initech.example",
            "password": "long-enough-pass",
            "firstName": "Peter",
        },
    )
    assert resp.status_code == 201, resp.text
    token = resp.json()["data"]
    assert token["tokenType"] == "bearer"
    assert token["expiresIn"] > 0

    resp = await client.post(
        f"{API}/auth/login",
        json={"email": "owner@initech.example", "password": "long-enough-pass"},
    )
    assert resp.status_code == 200
    headers = {"Authorization": f"Bearer {resp.json()['data']['accessToken']}"}

    resp = await client.get(f"{API}/auth/me", headers=headers)
    assert resp.status_code == 200
    me = resp.json()["data"]
    assert me["user"]["email"] == "owner@initech.example"
    assert me["user"]["role"] == "admin"
    assert me["organization"]["slug"] == "initech"
    assert "passwordHash" not in me["user"]


@pytest.mark.asyncio
async def test_register_rejects_taken_slug(client: AsyncClient, tenants: tuple[Tenant, Tenant]) -> None:
    resp = await client.post(
        f"{API}/auth/register",
        json={
            "organizationName": "Acme Again",
            "organizationSlug": "acme",
            "email": "someone@new.example",
            "password": "long-enough-pass",
        },
    )

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_bad_credentials_look_alike(client: AsyncClient, tenants: tuple[Tenant, Tenant]) -> None:
    wrong_password = await client.post(
        f"{API}/auth/login", json={"email": "admin@acme.example", "password": "nope-nope"}
    )
    unknown_email = await client.post(
        f"{API}/auth/login", json={"email": "ghost@acme.example", "password": PASSWORD}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


@pytest.mark.asyncio
async def test_missing_or_bad_token_is_unauthorized(client: AsyncClient) -> None:
    no_token = await client.get(f"{API}/customers")
    bad_token = await client.get(f"{API}/customers", headers={"Authorization": "Bearer not-a-jwt"})

    for resp in (no_token, bad_token):
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "UNAUTHORIZED"


# ---------------------------------------------------------------------------
# Tenant isolation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_customer_crud(client: AsyncClient, tenants: tuple[Tenant, Tenant]) -> None:
    acme, _ = tenants
    customer = await _create(client, acme, "/customers", customer_payload())
    url = f"{API}/customers/{customer['id']}"

    resp = await client.patch(url, json={"phone": "555-0199"}, headers=acme.headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["phone"] == "555-0199"
    assert resp.json()["data"]["name"] == "Jane Buyer"

    resp = await client.get(f"{API}/customers", params={"q": "jane"}, headers=acme.headers)
    body = resp.json()
    assert body["meta"]["total"] == 1
    assert body["data"][0]["id"] == customer["id"]

    assert (await client.delete(url, headers=acme.headers)).status_code == 204
    assert (await client.get(url, headers=acme.headers)).status_code == 404


@pytest.mark.asyncio
async def test_foreign_row_is_indistinguishable_from_missing(
    client: AsyncClient, tenants: tuple[Tenant, Tenant]
) -> None:
    acme, globex = tenants
    theirs = await _create(client, globex, "/customers", customer_payload("Globex Customer"))

    foreign = await client.get(f"{API}/customers/{theirs['id']}", headers=acme.headers)
    missing = await client.get(f"{API}/customers/no-such-id", headers=acme.headers)

    assert foreign.status_code == missing.status_code == 404
    assert foreign.json()["error"]["code"] == missing.json()["error"]["code"] == "NOT_FOUND"

    listed = await client.get(f"{API}/customers", headers=acme.headers)
    assert listed.json()["meta"]["total"] == 0


@pytest.mark.asyncio
async def test_organization_id_in_body_is_ignored(
    client: AsyncClient, tenants: tuple[Tenant, Tenant]
) -> None:
    acme, globex = tenants

    customer = await _create(
        client, acme, "/customers", customer_payload(organizationId=globex.organization_id)
    )

    assert customer["organizationId"] == acme.organization_id


@pytest.mark.asyncio
async def test_shipment_with_foreign_customer_is_not_found(
    client: AsyncClient, tenants: tuple[Tenant, Tenant]
) -> None:
    acme, globex = tenants
    theirs = await _create(client, globex, "/customers", customer_payload("Globex Customer"))

    resp = await client.post(
        f"{API}/shipments", json=shipment_payload(theirs["id"]), headers=acme.headers
    )

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"
    listed = await client.get(f"{API}/shipments", headers=acme.headers)
    assert listed.json()["meta"]["total"] == 0


@pytest.mark.asyncio
async def test_shipment_with_blank_carrier_id_is_not_found(
    client: AsyncClient, tenants: tuple[Tenant, Tenant]
) -> None:
    acme, _ = tenants
    customer = await _create(client, acme, "/customers", customer_payload())

    resp = await client.post(
        f"{API}/shipments", json=shipment_payload(customer["id"], carrierId=""), headers=acme.headers
    )

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_other_tenants_records_are_out_of_reach(
    client: AsyncClient, tenants: tuple[Tenant, Tenant]
) -> None:
    acme, globex = tenants
    customer = await _create(client, globex, "/customers", customer_payload("Globex Customer"))
    carrier = await _create(client, globex, "/carriers", carrier_payload())
    shipment = await _create(client, globex, "/shipments", shipment_payload(customer["id"]))
    targets = [
        (f"/carriers/{carrier['id']}", {"phone": "555-0000"}),
        (f"/shipments/{shipment['id']}", {"notes": "hijacked"}),
        (f"/users/{globex.admin_id}", {"firstName": "Mallory"}),
    ]

    for path, patch in targets:
        for resp in (
            await client.get(f"{API}{path}", headers=acme.headers),
            await client.patch(f"{API}{path}", json=patch, headers=acme.headers),
            await client.delete(f"{API}{path}", headers=acme.headers),
        ):
            assert resp.status_code == 404, path
            assert resp.json()["error"]["code"] == "NOT_FOUND"
        assert (await client.get(f"{API}{path}", headers=globex.headers)).status_code == 200


@pytest.mark.asyncio
async def test_deactivated_organization_is_locked_out(
    client: AsyncClient, tenants: tuple[Tenant, Tenant]
) -> None:
    acme, globex = tenants

    resp = await client.post(f"{API}/organization/deactivate", headers=acme.headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["active"] is False

    resp = await client.get(f"{API}/customers", headers=acme.headers)
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "ACCOUNT_INACTIVE"

    # The other tenant carries on
    assert (await client.get(f"{API}/customers", headers=globex.headers)).status_code == 200


@pytest.mark.asyncio
async def test_user_management_requires_admin(client: AsyncClient, session_factory) -> None:
    async with session_factory() as session:
        member = await seed_tenant(session, "umbrella", role=Role.USER)
        await session.commit()

    resp = await client.get(f"{API}/users", headers=member.headers)

    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_admin_creates_user_who_can_log_in(
    client: AsyncClient, tenants: tuple[Tenant, Tenant]
) -> None:
    acme, _ = tenants

    user = await _create(
        client,
        acme,
        "/users",
        {"email": "Dispatcher@Acme.example", "password": "dispatch-me-1", "firstName": "Dee"},
    )
    assert user["role"] == "user"
    assert user["organizationId"] == acme.organization_id

    resp = await client.post(
        f"{API}/auth/login",
        json={"email": "dispatcher@acme.example", "password": "dispatch-me-1"},
    )
    assert resp.status_code == 200


# ---------------------------------------------------------------------------
# Shipments, carriers, vehicles
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_shipment_lifecycle_over_http(client: AsyncClient, tenants: tuple[Tenant, Tenant]) -> None:
    acme, _ = tenants
    customer = await _create(client, acme, "/customers", customer_payload())
    carrier = await _create(client, acme, "/carriers", carrier_payload())
    shipment = await _create(client, acme, "/shipments", shipment_payload(customer["id"]))
    assert shipment["status"] == "pending"
    assert shipment["customerName"] == "Jane Buyer"
    url = f"{API}/shipments/{shipment['id']}"

    resp = await client.post(f"{url}/status", json={"status": "in_transit"}, headers=acme.headers)
    assert resp.status_code == 409

    resp = await client.post(
        f"{url}/assign-carrier", json={"carrierId": carrier["id"]}, headers=acme.headers
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "assigned"
    assert resp.json()["data"]["carrierName"] == "Lone Star Haulers"

    resp = await client.post(f"{url}/status", json={"status": "in_transit"}, headers=acme.headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["pickupDateActual"] is not None

    resp = await client.get(f"{API}/shipments/stats", headers=acme.headers)
    assert resp.json()["data"]["byStatus"]["in_transit"] == 1

    resp = await client.get(f"{API}/shipments", params={"status": "in_transit"}, headers=acme.headers)
    assert resp.json()["meta"]["total"] == 1


@pytest.mark.asyncio
async def test_carrier_on_assigned_shipment_cannot_be_deleted(
    client: AsyncClient, tenants: tuple[Tenant, Tenant]
) -> None:
    acme, _ = tenants
    customer = await _create(client, acme, "/customers", customer_payload())
    carrier = await _create(client, acme, "/carriers", carrier_payload())
    await _create(
        client, acme, "/shipments", shipment_payload(customer["id"], carrierId=carrier["id"])
    )

    resp = await client.delete(f"{API}/carriers/{carrier['id']}", headers=acme.headers)

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CONFLICT"


@pytest.mark.asyncio
async def test_vehicles_are_reached_through_their_shipment(
    client: AsyncClient, tenants: tuple[Tenant, Tenant]
) -> None:
    acme, globex = tenants
    customer = await _create(client, acme, "/customers", customer_payload())
    shipment = await _create(client, acme, "/shipments", shipment_payload(customer["id"]))
    base = f"{API}/shipments/{shipment['id']}/vehicles"

    vehicle = await _create(
        client,
        acme,
        f"/shipments/{shipment['id']}/vehicles",
        {"make": "Toyota", "model": "Camry", "year": 2020, "vin": "4T1BF1FK5LU000001"},
    )
    assert vehicle["condition"] == "running"
    assert vehicle["shipmentId"] == shipment["id"]

    resp = await client.patch(
        f"{base}/{vehicle['id']}", json={"condition": "damaged"}, headers=acme.headers
    )
    assert resp.json()["data"]["condition"] == "damaged"

    listed = await client.get(base, headers=acme.headers)
    assert listed.json()["meta"]["total"] == 1

    # Another tenant sees neither the shipment nor its vehicles
    assert (await client.get(base, headers=globex.headers)).status_code == 404
    assert (await client.get(f"{base}/{vehicle['id']}", headers=globex.headers)).status_code == 404
    resp = await client.post(
        base, json={"make": "Kia", "model": "Rio", "year": 2019}, headers=globex.headers
    )
    assert resp.status_code == 404

    assert (await client.delete(f"{base}/{vehicle['id']}", headers=acme.headers)).status_code == 204


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_list_pages_and_sort_validation(client: AsyncClient, tenants: tuple[Tenant, Tenant]) -> None:
    acme, _ = tenants
    for name in ("Alpha Autos", "Bravo Motors", "Charlie Cars"):
        await _create(client, acme, "/customers", customer_payload(name))

    resp = await client.get(
        f"{API}/customers",
        params={"page": 2, "limit": 2, "sort": "name", "order": "asc"},
        headers=acme.headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["meta"] == {"total": 3, "page": 2, "limit": 2, "pages": 2}
    assert [c["name"] for c in body["data"]] == ["Charlie Cars"]

    resp = await client.get(
        f"{API}/customers", params={"sort": "name; DROP TABLE customers"}, headers=acme.headers
    )
    assert resp.status_code == 422
