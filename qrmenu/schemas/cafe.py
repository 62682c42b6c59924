from pydantic import BaseModel, Field
from typing import Optional


class CafeFromGoogle(BaseModel):
    googleUrl: Optional[str] = None
    googleLink: Optional[str] = None
    ownerId: Optional[int] = None

    @property
    def url(self) -> Optional[str]:
        return self.googleUrl or self.googleLink


class ExtractMenuRequest(BaseModel):
    googleUrl: str = Field(..., min_length=1)


class PublishRequest(BaseModel):
    publish: bool
