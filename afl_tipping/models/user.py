from typing import Optional
from pydantic import BaseModel


class UserSummary(BaseModel):
    """
    Display fields of a user, read from the users collection.

    Users themselves are managed by the external auth layer.
    """

    id: str
    username: str
    image_url: Optional[str] = None
