from pydantic import Field
from typing import Any, List, Optional
from datetime import datetime

from schemas.common import ORMBase


class AuditEntryOut(ORMBase):
    id: int
    ts: datetime
    user_id: Optional[int] = Field(default=None, serialization_alias="userId")
    user_email: Optional[str] = Field(default=None, serialization_alias="userEmail")
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    meta: Optional[Any] = None


class AuditPage(ORMBase):
    items: List[AuditEntryOut]
    total: int
    page: int
    page_size: int = Field(serialization_alias="pageSize")
