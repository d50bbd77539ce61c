from patient_ticketing.core.errors import CategoryNotFoundError
from patient_ticketing.models.entities import QueueSetCategoryEntity
from patient_ticketing.repositories.queue_set_category_repository import (
    QueueSetCategoryRepository,
)
from patient_ticketing.services.queue_set_service import QueueSetService


class QueueSetCategoryService:
    def __init__(
        self,
        category_repository: QueueSetCategoryRepository,
        queue_set_service: QueueSetService,
    ) -> None:
        self.category_repository = category_repository
        self.queue_set_service = queue_set_service

    def read(self, category_id: int) -> QueueSetCategoryEntity:
        category = self.category_repository.get_by_id(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    def get_categories_for_user(self, user_id: int) -> list[QueueSetCategoryEntity]:
        visible: list[QueueSetCategoryEntity] = []
        for category in self.category_repository.list_active():
            queue_sets = self.queue_set_service.get_queue_sets_for_category(category.id)
            if any(
                self.queue_set_service.is_queue_set_permissioned_for_user(queue_set, user_id)
                for queue_set in queue_sets
            ):
                visible.append(category)
        return visible
