from pydantic import BaseModel


class MenuItem(BaseModel):
    uri: str
    title: str
    position: int


class MenuItemListResponse(BaseModel):
    data: list[MenuItem]
