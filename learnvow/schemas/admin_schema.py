from pydantic import BaseModel
from typing import List

from .user_schema import UserDisplay

class PaginatedUsersAdmin(BaseModel):
    total: int
    users: List[UserDisplay]
    page: int
    size: int
