from patient_ticketing.models.entities import AuthItemEntity, AuthItemType, QueueSetEntity
from patient_ticketing.services.auth_manager import AuthManager, can_process_queue_set
from tests.helpers.fakes import FakeAuthRepository, FakeDatabase

OPERATION = "OprnProcessQueueSet"


def _queue_set(*user_ids: int) -> QueueSetEntity:
    return QueueSetEntity(1, "Glaucoma", None, True, 1, 1, list(user_ids))


def _manager(
    children: list[tuple[str, str]] | None = None,
    assignments: set[tuple[str, int]] | None = None,
    business_rules: dict | None = None,
) -> AuthManager:
    database = FakeDatabase()
    database.tables["auth_assignments"].update(assignments or {("Processor", 2)})
    repository = FakeAuthRepository(
        database,
        [
            AuthItemEntity(OPERATION, AuthItemType.OPERATION, bizrule="canProcessQueueSet"),
            AuthItemEntity("TaskProcessQueueSet", AuthItemType.TASK),
            AuthItemEntity("Processor", AuthItemType.ROLE),
        ],
        children
        if children is not None
        else [("TaskProcessQueueSet", OPERATION), ("Processor", "TaskProcessQueueSet")],
    )
    return AuthManager(repository, business_rules=business_rules)


def test_check_access_through_role_hierarchy() -> None:
    manager = _manager()

    assert manager.check_access(OPERATION, 2, {"queue_set": _queue_set(2)}) is True
    assert manager.check_access("TaskProcessQueueSet", 2) is True


def test_check_access_denied_by_business_rule() -> None:
    manager = _manager()

    assert manager.check_access(OPERATION, 2, {"queue_set": _queue_set(3)}) is False
    assert manager.check_access(OPERATION, 2) is False


def test_check_access_without_assignments() -> None:
    manager = _manager()

    assert manager.check_access(OPERATION, 5, {"queue_set": _queue_set(5)}) is False


def test_check_access_tolerates_cycles() -> None:
    manager = _manager(
        children=[
            ("TaskProcessQueueSet", OPERATION),
            (OPERATION, "TaskProcessQueueSet"),
        ],
    )

    assert manager.check_access(OPERATION, 2, {"queue_set": _queue_set(2)}) is False


def test_unregistered_business_rule_denies_access() -> None:
    manager = _manager(business_rules={})

    assert manager.check_access(OPERATION, 2, {"queue_set": _queue_set(2)}) is False


def test_auth_items_by_type_and_children() -> None:
    manager = _manager()

    roles = manager.get_auth_items(AuthItemType.ROLE)
    assert [role.name for role in roles] == ["Processor"]
    assert roles[0].has_child("TaskProcessQueueSet") is True
    assert roles[0].has_child(OPERATION) is False
    assert manager.get_auth_item("Missing") is None


def test_assign_role() -> None:
    manager = _manager()
    role = manager.get_auth_item("Processor")
    assert role is not None

    assert role.get_assignment(7) is False
    role.assign(7)
    assert role.get_assignment(7) is True


def test_can_process_queue_set_rule() -> None:
    assert can_process_queue_set(2, {"queue_set": _queue_set(1, 2)}) is True
    assert can_process_queue_set(2, {"queue_set": _queue_set()}) is False
    assert can_process_queue_set(2, {}) is False
