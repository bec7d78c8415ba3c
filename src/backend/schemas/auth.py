"""Staff session schemas."""

from pydantic import BaseModel


class StaffLoginRequest(BaseModel):
    password: str = ""


class StaffSessionResponse(BaseModel):
    """Whether the caller currently holds the staff capability."""

    staff: bool
