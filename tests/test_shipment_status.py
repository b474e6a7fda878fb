"""Tests for the shipment status lifecycle and carrier assignment rules."""

from datetime import date

import pytest

from logistics.core.exceptions import ConflictError
from logistics.domain.shipment import ShipmentStatus
from logistics.repositories.carrier import CarrierRepository
from logistics.repositories.customer import CustomerRepository
from logistics.schemas.carrier import CarrierCreate
from logistics.schemas.shipment import ShipmentCreate, ShipmentUpdate
from logistics.services.carrier import CarrierService
from logistics.services.shipment import ShipmentService, check_transition
from tests.factories import Tenant, shipment_fields

P, A, T, D, C = (
    ShipmentStatus.PENDING,
    ShipmentStatus.ASSIGNED,
    ShipmentStatus.IN_TRANSIT,
    ShipmentStatus.DELIVERED,
    ShipmentStatus.CANCELLED,
)


@pytest.mark.parametrize(
    "current, target",
    [(P, A), (P, C), (A, T), (A, C), (T, D), (T, C)],
)
def test_allowed_transitions(current, target) -> None:
    check_transition(current, target, has_carrier=True)


@pytest.mark.parametrize(
    "current, target",
    [(P, T), (P, D), (A, P), (A, D), (T, A), (D, C), (D, T), (C, P), (C, A)],
)
def test_rejected_transitions(current, target) -> None:
    with pytest.raises(ConflictError):
        check_transition(current, target, has_carrier=True)


def test_carrier_required_past_pending() -> None:
    with pytest.raises(ConflictError):
        check_transition(P, A, has_carrier=False)
    check_transition(P, C, has_carrier=False)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


@pytest.fixture
def acme(tenants: tuple[Tenant, Tenant]) -> Tenant:
    return tenants[0]


async def _customer_id(session, tenant: Tenant) -> str:
    customer = await CustomerRepository(session, tenant.identity).create(name="Jane Buyer")
    return customer.id


async def _carrier_id(session, tenant: Tenant, *, active: bool = True) -> str:
    carrier = await CarrierRepository(session, tenant.identity).create(
        company_name="Lone Star Haulers", active=active
    )
    return carrier.id


@pytest.mark.asyncio
async def test_new_shipment_status_follows_carrier(session, acme: Tenant) -> None:
    service = ShipmentService(session, acme.identity)
    customer_id = await _customer_id(session, acme)
    carrier_id = await _carrier_id(session, acme)

    without = await service.create_shipment(ShipmentCreate.model_validate(shipment_fields(customer_id)))
    with_carrier = await service.create_shipment(
        ShipmentCreate.model_validate(shipment_fields(customer_id, carrier_id=carrier_id))
    )

    assert without.status == "pending"
    assert without.carrier_id is None
    assert with_carrier.status == "assigned"
    assert with_carrier.carrier_name == "Lone Star Haulers"


@pytest.mark.asyncio
async def test_pending_shipment_cannot_skip_to_transit(session, acme: Tenant) -> None:
    service = ShipmentService(session, acme.identity)
    shipment = await service.create_shipment(
        ShipmentCreate.model_validate(shipment_fields(await _customer_id(session, acme)))
    )

    with pytest.raises(ConflictError):
        await service.change_status(shipment.id, ShipmentStatus.IN_TRANSIT)


@pytest.mark.asyncio
async def test_full_lifecycle_records_milestone_dates(session, acme: Tenant) -> None:
    service = ShipmentService(session, acme.identity)
    shipment = await service.create_shipment(
        ShipmentCreate.model_validate(shipment_fields(await _customer_id(session, acme)))
    )

    shipment = await service.assign_carrier(shipment.id, await _carrier_id(session, acme))
    assert shipment.status == "assigned"

    shipment = await service.change_status(shipment.id, ShipmentStatus.IN_TRANSIT)
    assert shipment.status == "in_transit"
    assert shipment.pickup_date_actual == date.today()
    assert shipment.delivery_date_actual is None

    shipment = await service.change_status(shipment.id, ShipmentStatus.DELIVERED)
    assert shipment.status == "delivered"
    assert shipment.delivery_date_actual == date.today()

    with pytest.raises(ConflictError):
        await service.change_status(shipment.id, ShipmentStatus.CANCELLED)


@pytest.mark.asyncio
async def test_same_status_is_a_no_op(session, acme: Tenant) -> None:
    service = ShipmentService(session, acme.identity)
    shipment = await service.create_shipment(
        ShipmentCreate.model_validate(shipment_fields(await _customer_id(session, acme)))
    )

    again = await service.change_status(shipment.id, ShipmentStatus.PENDING)

    assert again.status == "pending"


@pytest.mark.asyncio
async def test_caller_supplied_milestone_date_is_kept(session, acme: Tenant) -> None:
    service = ShipmentService(session, acme.identity)
    carrier_id = await _carrier_id(session, acme)
    shipment = await service.create_shipment(
        ShipmentCreate.model_validate(
            shipment_fields(await _customer_id(session, acme), carrier_id=carrier_id)
        )
    )
    picked_up = date(2024, 3, 1)

    updated = await service.update_shipment(
        shipment.id,
        ShipmentUpdate(status=ShipmentStatus.IN_TRANSIT, pickup_date_actual=picked_up),
    )

    assert updated.status == "in_transit"
    assert updated.pickup_date_actual == picked_up


@pytest.mark.asyncio
async def test_setting_carrier_on_pending_shipment_assigns_it(session, acme: Tenant) -> None:
    service = ShipmentService(session, acme.identity)
    shipment = await service.create_shipment(
        ShipmentCreate.model_validate(shipment_fields(await _customer_id(session, acme)))
    )

    updated = await service.update_shipment(
        shipment.id, ShipmentUpdate(carrier_id=await _carrier_id(session, acme))
    )

    assert updated.status == "assigned"
    assert updated.carrier_id is not None


@pytest.mark.asyncio
async def test_carrier_is_fixed_once_in_transit(session, acme: Tenant) -> None:
    service = ShipmentService(session, acme.identity)
    shipment = await service.create_shipment(
        ShipmentCreate.model_validate(
            shipment_fields(await _customer_id(session, acme), carrier_id=await _carrier_id(session, acme))
        )
    )
    await service.change_status(shipment.id, ShipmentStatus.IN_TRANSIT)
    other = await _carrier_id(session, acme)

    with pytest.raises(ConflictError):
        await service.assign_carrier(shipment.id, other)
    with pytest.raises(ConflictError):
        await service.update_shipment(shipment.id, ShipmentUpdate(carrier_id=other))


@pytest.mark.asyncio
async def test_inactive_carrier_cannot_be_assigned(session, acme: Tenant) -> None:
    service = ShipmentService(session, acme.identity)
    customer_id = await _customer_id(session, acme)
    idle = await _carrier_id(session, acme, active=False)

    with pytest.raises(ConflictError):
        await service.create_shipment(
            ShipmentCreate.model_validate(shipment_fields(customer_id, carrier_id=idle))
        )

    shipment = await service.create_shipment(ShipmentCreate.model_validate(shipment_fields(customer_id)))
    with pytest.raises(ConflictError):
        await service.assign_carrier(shipment.id, idle)


@pytest.mark.asyncio
async def test_stats_count_every_status(session, tenants: tuple[Tenant, Tenant]) -> None:
    acme, globex = tenants
    service = ShipmentService(session, acme.identity)
    customer_id = await _customer_id(session, acme)
    carrier_id = await _carrier_id(session, acme)
    first = await service.create_shipment(ShipmentCreate.model_validate(shipment_fields(customer_id)))
    await service.create_shipment(ShipmentCreate.model_validate(shipment_fields(customer_id)))
    await service.create_shipment(
        ShipmentCreate.model_validate(shipment_fields(customer_id, carrier_id=carrier_id))
    )
    await service.change_status(first.id, ShipmentStatus.CANCELLED)
    # Another tenant's shipments never show up
    await ShipmentService(session, globex.identity).create_shipment(
        ShipmentCreate.model_validate(shipment_fields(await _customer_id(session, globex)))
    )

    stats = await service.stats()

    assert stats.total == 3
    assert stats.by_status == {
        "pending": 1,
        "assigned": 1,
        "in_transit": 0,
        "delivered": 0,
        "cancelled": 1,
    }


# ---------------------------------------------------------------------------
# Carrier deletion
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_carrier_on_active_shipment_cannot_be_deleted(session, acme: Tenant) -> None:
    carriers = CarrierService(session, acme.identity)
    carrier = await carriers.create_carrier(CarrierCreate(company_name="Busy Bee Transport"))
    await ShipmentService(session, acme.identity).create_shipment(
        ShipmentCreate.model_validate(
            shipment_fields(await _customer_id(session, acme), carrier_id=carrier.id)
        )
    )

    with pytest.raises(ConflictError):
        await carriers.delete_carrier(carrier.id)
    assert (await carriers.get_carrier(carrier.id)).id == carrier.id


@pytest.mark.asyncio
async def test_deleting_carrier_detaches_finished_shipments(session, acme: Tenant) -> None:
    carriers = CarrierService(session, acme.identity)
    shipments = ShipmentService(session, acme.identity)
    carrier = await carriers.create_carrier(CarrierCreate(company_name="Done Deal Freight"))
    shipment = await shipments.create_shipment(
        ShipmentCreate.model_validate(
            shipment_fields(await _customer_id(session, acme), carrier_id=carrier.id)
        )
    )
    await shipments.change_status(shipment.id, ShipmentStatus.CANCELLED)

    await carriers.delete_carrier(carrier.id)

    kept = await shipments.get_shipment(shipment.id)
    assert kept.carrier_id is None
    assert kept.status == "cancelled"
