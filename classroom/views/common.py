"""Common response schemas."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel

from classroom.utils.clock import as_aware_utc

# Stored timestamps are naive UTC; responses always carry the offset.
UtcDateTime = Annotated[datetime, AfterValidator(as_aware_utc)]


class ErrorResponse(BaseModel):
    message: str
    code: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
