from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class TagBase(BaseModel):
    name: str = Field(..., max_length=100)
    color: Optional[str] = "#000000"
    description: Optional[str] = Field(None, max_length=500)

class TagCreate(TagBase):
    pass

class TagUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = None
    description: Optional[str] = Field(None, max_length=500)

class TagOut(TagBase):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }
