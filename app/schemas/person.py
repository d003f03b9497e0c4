from pydantic import BaseModel


class RegisterRequest(BaseModel):
    name: str


class NameUpdateRequest(BaseModel):
    name: str


class NameUpdateResponse(BaseModel):
    name: str
    updated: bool


class PeopleCountResponse(BaseModel):
    total: int
