import pytest

from patient_ticketing.core.database import TransactionScope
from patient_ticketing.core.errors import AppError, QueueInactiveError, TicketCreationError
from patient_ticketing.models.entities import ClinicalEvent
from patient_ticketing.services.queue_service import NOTES_FIELD, PRIORITY_FIELD
from tests.helpers.fakes import FakeConnection
from tests.helpers.world import TicketingWorld


def _valid_data(**overrides: str) -> dict[str, str]:
    data = {PRIORITY_FIELD: "1", "glreview": "yes", NOTES_FIELD: "Review in clinic"}
    data.update(overrides)
    return data


def test_extract_queue_data_reports_missing_required_fields(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[1]

    values, errors = world.ticketing_api.extract_queue_data(queue, {}, validate=True)

    assert values == {PRIORITY_FIELD: "", "glreview": "", NOTES_FIELD: ""}
    assert errors == {
        PRIORITY_FIELD: "Priority is required",
        "glreview": "Glaucoma review is required",
    }


def test_extract_queue_data_reports_invalid_choices(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[1]

    _, errors = world.ticketing_api.extract_queue_data(
        queue,
        {PRIORITY_FIELD: "9", "glreview": "maybe"},
        validate=True,
    )

    assert errors == {
        PRIORITY_FIELD: "Priority: invalid choice",
        "glreview": "Glaucoma review: invalid choice",
    }


def test_extract_queue_data_treats_zero_as_a_present_value(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[1]

    _, errors = world.ticketing_api.extract_queue_data(
        queue,
        _valid_data(**{PRIORITY_FIELD: "0"}),
        validate=True,
    )

    assert errors == {PRIORITY_FIELD: "Priority: invalid choice"}


def test_extract_queue_data_sanitizes_values_without_validating(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[1]

    values = world.ticketing_api.extract_queue_data(
        queue,
        _valid_data(**{NOTES_FIELD: "<b>Urgent</b> review", "glreview": "nonsense"}),
    )

    assert values == {
        PRIORITY_FIELD: "1",
        "glreview": "nonsense",
        NOTES_FIELD: "Urgent review",
    }


def test_extract_queue_data_skips_priority_for_non_initial_queue(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[2]

    values, errors = world.ticketing_api.extract_queue_data(queue, {}, validate=True)

    assert values == {NOTES_FIELD: ""}
    assert errors == {}


def test_create_ticket_for_patient_persists_ticket_and_queue_entry(
    world: TicketingWorld,
) -> None:
    queue = world.queue_repository.queues[1]

    ticket = world.ticketing_api.create_ticket_for_patient(42, queue, 2, 9, _valid_data())

    assert ticket is not None
    assert ticket.patient_id == 42
    assert ticket.created_user_id == 2
    assert ticket.last_modified_user_id == 2
    assert ticket.priority_id == 1
    assert ticket.current_queue_id == 1
    assert ticket.initial_queue_id == 1
    assert world.database.commits == 1
    assert world.database.rollbacks == 0

    [assignment] = world.database.tables["assignments"]
    assert assignment.ticket_id == ticket.id
    assert assignment.assignment_firm_id == 9
    assert assignment.notes == "Review in clinic"
    assert assignment.details == [{"id": "glreview", "value": "yes"}]


def test_create_ticket_for_patient_rolls_back_when_queueing_fails(
    world: TicketingWorld,
) -> None:
    queue = world.queue_repository.queues[1]
    world.assignment_repository.fail_with = RuntimeError("assignment insert failed")

    with pytest.raises(RuntimeError, match="assignment insert failed"):
        world.ticketing_api.create_ticket_for_patient(42, queue, 2, None, _valid_data())

    assert world.database.tables["tickets"] == {}
    assert world.database.rollbacks == 1
    assert world.database.commits == 0


def test_create_ticket_for_patient_rejects_inactive_queue(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[5]

    with pytest.raises(QueueInactiveError) as exc_info:
        world.ticketing_api.create_ticket_for_patient(42, queue, 2, None, _valid_data())

    assert exc_info.value.code == "QUEUE_INACTIVE"
    assert world.database.opened == 0


def test_create_ticket_for_patient_requires_priority(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[1]

    with pytest.raises(AppError) as exc_info:
        world.ticketing_api.create_ticket_for_patient(42, queue, 2, None, {"glreview": "yes"})

    assert exc_info.value.code == "INVALID_TICKET_DATA"
    assert world.database.tables["tickets"] == {}


def test_create_ticket_for_patient_joins_outer_scope(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[1]
    outer = TransactionScope(connection=FakeConnection(world.database), owns_transaction=True)

    ticket = world.ticketing_api.create_ticket_for_patient(
        42,
        queue,
        2,
        None,
        _valid_data(),
        scope=outer,
    )

    assert ticket is not None
    assert world.database.opened == 0
    assert world.database.commits == 0
    assert world.database.rollbacks == 0


def test_create_ticket_for_patient_leaves_rollback_to_outer_scope(
    world: TicketingWorld,
) -> None:
    queue = world.queue_repository.queues[1]
    outer = TransactionScope(connection=FakeConnection(world.database), owns_transaction=True)
    world.assignment_repository.fail_with = RuntimeError("assignment insert failed")

    with pytest.raises(RuntimeError):
        world.ticketing_api.create_ticket_for_patient(
            42,
            queue,
            2,
            None,
            _valid_data(),
            scope=outer,
        )

    assert world.database.rollbacks == 0
    assert len(world.database.tables["tickets"]) == 1


def test_create_ticket_for_event_stamps_event(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[1]
    event = ClinicalEvent(id=77, patient_id=42)

    ticket = world.ticketing_api.create_ticket_for_event(event, queue, 3, None, _valid_data())

    assert ticket.event_id == 77
    assert ticket.patient_id == 42
    assert ticket.last_modified_user_id == 3
    assert world.database.commits == 1
    assert world.ticketing_api.get_ticket_for_event(77) == ticket
    assert world.ticketing_api.get_ticket_for_event(78) is None
    assert world.ticketing_api.get_ticket_for_event(None) is None


def test_create_ticket_for_event_fails_when_no_ticket_is_produced(
    world: TicketingWorld,
) -> None:
    queue = world.queue_repository.queues[1]
    world.ticket_repository.fetch_returns_none = True

    with pytest.raises(TicketCreationError) as exc_info:
        world.ticketing_api.create_ticket_for_event(
            ClinicalEvent(id=77, patient_id=42),
            queue,
            2,
            None,
            _valid_data(),
        )

    assert exc_info.value.message == "Ticket was not created for an unknown reason"
    assert world.database.rollbacks == 1
    assert world.database.tables["tickets"] == {}


def test_get_menu_items_numbers_positions_in_category_order(world: TicketingWorld) -> None:
    items = world.ticketing_api.get_menu_items(2, position=5)

    assert [(item.title, item.position) for item in items] == [
        ("Glaucoma", 5),
        ("Medical Retina", 6),
        ("Cataract", 7),
    ]
    assert items[0].uri == "/PatientTicketing/default/?cat_id=1"


def test_get_menu_items_only_lists_permissioned_categories(world: TicketingWorld) -> None:
    assert [item.title for item in world.ticketing_api.get_menu_items(3)] == ["Medical Retina"]
    assert world.ticketing_api.get_menu_items(4) == []


def test_initial_queue_lookups_skip_inactive_queues(world: TicketingWorld) -> None:
    initial = world.ticketing_api.get_initial_queues(firm_id=None)

    assert [queue.id for queue in initial] == [1, 6, 7]
    assert world.ticketing_api.get_queue_for_user_and_firm(2, None, 5) is None
    assert world.ticketing_api.get_queue_for_user_and_firm(2, None, 999) is None
    found = world.ticketing_api.get_queue_for_user_and_firm(2, None, 2)
    assert found is not None
    assert found.name == "Awaiting Results"


def test_get_queue_set_list_is_empty_without_patient(world: TicketingWorld) -> None:
    assert world.ticketing_api.get_queue_set_list(None) == {}


def test_get_queue_set_list_excludes_sets_with_open_ticket(world: TicketingWorld) -> None:
    queue = world.queue_repository.queues[1]

    assert world.ticketing_api.get_queue_set_list(None, patient_id=42) == {
        1: "Glaucoma Virtual Clinic",
        6: "Medical Retina",
        7: "Cataract",
    }

    world.ticketing_api.create_ticket_for_patient(42, queue, 2, None, _valid_data())

    assert world.ticketing_api.get_queue_set_list(None, patient_id=42) == {
        6: "Medical Retina",
        7: "Cataract",
    }
    assert 1 in world.ticketing_api.get_queue_set_list(None, patient_id=43)


def test_can_add_patient_to_queue_once_ticket_is_closed(world: TicketingWorld) -> None:
    queues = world.queue_repository.queues
    ticket = world.ticketing_api.create_ticket_for_patient(42, queues[1], 2, None, _valid_data())
    assert ticket is not None

    assert world.ticketing_api.can_add_patient_to_queue(42, queues[2]) is False
    assert world.ticketing_api.can_add_patient_to_queue(43, queues[2]) is True

    world.queue_service.add_ticket(queues[3], ticket, 2, None, {})

    assert world.ticketing_api.can_add_patient_to_queue(42, queues[2]) is True


def test_queue_assignment_form_uri(world: TicketingWorld) -> None:
    assert (
        world.ticketing_api.get_queue_assignment_form_uri()
        == "/PatientTicketing/Default/GetQueueAssignmentForm/"
    )
