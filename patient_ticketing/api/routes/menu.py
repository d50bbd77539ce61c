from typing import Annotated

from fastapi import APIRouter, Depends, Query

from patient_ticketing.api.dependencies import get_current_user_id, get_ticketing_api
from patient_ticketing.models.schemas.menu import MenuItemListResponse
from patient_ticketing.services.ticketing_api import TicketingApi

router = APIRouter(prefix="/menu-items")


@router.get("", response_model=MenuItemListResponse)
def list_menu_items(
    user_id: Annotated[int, Depends(get_current_user_id)],
    ticketing_api: Annotated[TicketingApi, Depends(get_ticketing_api)],
    position: Annotated[int, Query(ge=0)] = 1,
) -> MenuItemListResponse:
    return MenuItemListResponse(data=ticketing_api.get_menu_items(user_id, position=position))
