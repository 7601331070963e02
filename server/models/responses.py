from pydantic import BaseModel


class CountResponse(BaseModel):
    count: int


class DeleteResponse(BaseModel):
    success: bool
    id: str


class HealthResponse(BaseModel):
    status: str
    version: str


class ErrorResponse(BaseModel):
    detail: str
