import pytest

from patient_ticketing.core.errors import (
    QueueRootNotFoundError,
    QueueSetNotFoundError,
    RoleNotFoundError,
    TicketNotFoundError,
    UserNotFoundError,
)
from patient_ticketing.services.queue_service import PRIORITY_FIELD
from tests.helpers.world import TicketingWorld


def test_search_filters_by_id_and_name(world: TicketingWorld) -> None:
    service = world.queue_set_service

    assert [item.id for item in service.search({})] == [1, 2, 3, 4]
    assert [item.id for item in service.search({"name": "retina"})] == [2]
    assert [item.id for item in service.search({"id": 4})] == [4]
    assert service.search({"id": 4, "name": "glaucoma"}) == []


def test_model_to_resource_resolves_initial_queue(world: TicketingWorld) -> None:
    resource = world.queue_set_service.read(1)

    assert resource.name == "Glaucoma Virtual Clinic"
    assert resource.description == "Glaucoma pathway"
    assert resource.category_id == 1
    assert resource.permissioned_user_ids == [2]
    assert resource.initial_queue is not None
    assert resource.initial_queue.id == 1
    assert resource.initial_queue.is_initial is True
    assert resource.initial_queue.is_closing is False


def test_read_unknown_queue_set(world: TicketingWorld) -> None:
    with pytest.raises(QueueSetNotFoundError) as exc_info:
        world.queue_set_service.read(404)

    assert exc_info.value.details == {"queue_set_id": 404}


def test_get_queue_sets_for_category_skips_inactive_sets(world: TicketingWorld) -> None:
    assert [item.id for item in world.queue_set_service.get_queue_sets_for_category(1)] == [1]
    assert [item.id for item in world.queue_set_service.get_queue_sets_for_firm(None)] == [1, 2, 4]


def test_get_queue_set_queues_for_permissioned_user(world: TicketingWorld) -> None:
    queue_set = world.queue_set_service.read(1)

    queues = world.queue_set_service.get_queue_set_queues(queue_set, 2)

    assert [queue.id for queue in queues] == [1, 2, 4, 3]
    assert [queue.is_closing for queue in queues] == [False, False, True, True]


def test_get_queue_set_queues_without_closing_queues(world: TicketingWorld) -> None:
    queue_set = world.queue_set_service.read(1)

    queues = world.queue_set_service.get_queue_set_queues(queue_set, 2, include_closing=False)

    assert [queue.id for queue in queues] == [1, 2]


def test_get_queue_set_queues_is_empty_without_permission(world: TicketingWorld) -> None:
    queue_set = world.queue_set_service.read(1)

    # user 3 holds the role but is not permissioned on this set; user 4 has no role
    assert world.queue_set_service.get_queue_set_queues(queue_set, 3) == []
    assert world.queue_set_service.get_queue_set_queues(queue_set, 4) == []


def test_set_permissioned_users_replaces_list(world: TicketingWorld) -> None:
    world.queue_set_service.set_permissioned_users(1, [3, 4, 3])

    assert world.queue_set_service.read(1).permissioned_user_ids == [3, 4]
    assert world.database.commits == 1
    # without a role, user 4 still lacks the process capability
    assert world.queue_set_service.get_queue_set_queues(world.queue_set_service.read(1), 4) == []


def test_set_permissioned_users_assigns_role(world: TicketingWorld) -> None:
    world.queue_set_service.set_permissioned_users(1, [2, 4], role="Patient Ticketing")

    assignments = world.database.tables["auth_assignments"]
    assert ("Patient Ticketing", 4) in assignments
    queue_set = world.queue_set_service.read(1)
    assert [queue.id for queue in world.queue_set_service.get_queue_set_queues(queue_set, 4)] == [
        1,
        2,
        4,
        3,
    ]


def test_set_permissioned_users_rejects_unknown_user(world: TicketingWorld) -> None:
    with pytest.raises(UserNotFoundError) as exc_info:
        world.queue_set_service.set_permissioned_users(1, [3, 99])

    assert exc_info.value.message == "User not found for id 99"
    assert world.queue_set_service.read(1).permissioned_user_ids == [2]
    assert world.database.opened == 0


def test_set_permissioned_users_rejects_unknown_role(world: TicketingWorld) -> None:
    with pytest.raises(RoleNotFoundError) as exc_info:
        world.queue_set_service.set_permissioned_users(1, [3], role="Porter")

    assert exc_info.value.message == "Unrecognised role Porter for permissioning"
    assert world.queue_set_service.read(1).permissioned_user_ids == [2]


def test_set_permissioned_users_rolls_back_on_write_failure(world: TicketingWorld) -> None:
    world.queue_set_repository.fail_on_replace = RuntimeError("write failed")

    with pytest.raises(RuntimeError):
        world.queue_set_service.set_permissioned_users(1, [3], role="Patient Ticketing")

    assert world.database.rollbacks == 1
    assert world.queue_set_service.read(1).permissioned_user_ids == [2]


def test_set_permissioned_users_unknown_queue_set(world: TicketingWorld) -> None:
    with pytest.raises(QueueSetNotFoundError):
        world.queue_set_service.set_permissioned_users(404, [2])


def test_get_queue_set_roles(world: TicketingWorld) -> None:
    assert world.queue_set_service.get_queue_set_roles() == ["Patient Ticketing"]


def test_get_queue_set_for_queue_walks_to_root(world: TicketingWorld) -> None:
    assert world.queue_set_service.get_queue_set_for_queue(3).id == 1
    assert world.queue_set_service.get_queue_set_for_queue(1).id == 1
    assert world.queue_set_service.get_queue_set_for_queue(6).id == 2


def test_get_queue_set_for_queue_without_root(world: TicketingWorld) -> None:
    world.queue_repository.outcomes = {}

    with pytest.raises(QueueRootNotFoundError):
        world.queue_set_service.get_queue_set_for_queue(3)


def test_get_queue_set_for_ticket(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[6]
    ticket = world.ticketing_api.create_ticket_for_patient(
        42,
        queue,
        2,
        None,
        {PRIORITY_FIELD: "2"},
    )
    assert ticket is not None

    assert world.queue_set_service.get_queue_set_for_ticket(ticket.id).id == 2

    with pytest.raises(TicketNotFoundError):
        world.queue_set_service.get_queue_set_for_ticket(999)


def test_ticket_in_closing_queue_does_not_block_queue_set(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[7]
    world.ticketing_api.create_ticket_for_patient(42, queue, 2, None, {PRIORITY_FIELD: "3"})

    assert world.queue_set_service.can_add_patient_to_queue_set(42, 4) is True
    assert world.queue_set_service.can_add_patient_to_queue_set(42, 1) is True
