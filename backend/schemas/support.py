from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime

from schemas.common import ORMBase


class ChatStatus(BaseModel):
    online: bool


class ChatSendRequest(ORMBase):
    user_id: int = Field(alias="userId")
    text: str = Field(min_length=1)
    sender: Literal["user", "admin"] = "user"


class ChatMessageOut(ORMBase):
    id: int
    user_id: int = Field(serialization_alias="userId")
    sender: str
    text: str
    is_read: bool = Field(serialization_alias="isRead")
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")


# A user with their support thread, newest message first
class ChatThreadOut(ORMBase):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    chat_messages: List[ChatMessageOut]


class CallRequestCreate(ORMBase):
    user_id: Optional[int] = Field(default=None, alias="userId")
    name: Optional[str] = None
    phone: str = Field(min_length=5, max_length=32)


class CallRequestOut(ORMBase):
    id: int
    user_id: Optional[int] = Field(default=None, serialization_alias="userId")
    name: Optional[str] = None
    phone: str
    status: str
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
