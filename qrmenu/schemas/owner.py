from pydantic import BaseModel, EmailStr
from typing import Optional

# Request field -> users column
_OWNER_COLUMNS = {
    "email": "email",
    "name": "name",
    "password": "password",
    "cafeId": "cafe_id",
    "isActive": "is_active",
}


class OwnerCreate(BaseModel):
    email: EmailStr
    name: str
    password: Optional[str] = None  # generated when omitted
    cafeId: Optional[int] = None


class OwnerUpdate(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    password: Optional[str] = None
    cafeId: Optional[int] = None
    isActive: Optional[bool] = None

    def to_columns(self) -> dict:
        """Only fields that were sent; an explicit ``cafeId: null`` unlinks the café."""
        columns = {}
        for key, value in self.model_dump(exclude_unset=True).items():
            if value is None and key != "cafeId":
                continue
            if key == "isActive":
                value = 1 if value else 0
            columns[_OWNER_COLUMNS[key]] = value
        return columns
