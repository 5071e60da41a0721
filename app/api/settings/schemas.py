from pydantic import BaseModel, Field
from typing import Optional

THEMES = ("light", "dark")

class ThemePreference(BaseModel):
    theme: str = "light"

class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)

class Profile(BaseModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    theme_preference: Optional[str] = None
    email_verified: bool = False

    model_config = {
        "from_attributes": True
    }
