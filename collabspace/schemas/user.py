from pydantic import BaseModel
from typing import Optional


class CurrentUser(BaseModel):
    """Authenticated caller, as resolved by collabspace.auth.get_current_user."""
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
