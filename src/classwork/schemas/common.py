from typing import Optional

from pydantic import BaseModel


class AuthorRead(BaseModel):
    id: str
    name: str
    avatar: Optional[str] = None


class StudentRead(BaseModel):
    id: str
    name: str
    avatar: Optional[str] = None
    group: Optional[str] = None
