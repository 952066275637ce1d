"""
Bird request / response schemas.

Requests are accepted as plain JSON objects and filtered through the
service's allow-list, so only the response side is modelled here.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BirdResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    species: Optional[str] = None
    likes: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


BIRD_BODY_EXAMPLES = {
    "create": {
        "summary": "A new bird",
        "value": {"name": "Ruby", "species": "Archilochus colubris"},
    },
    "like": {
        "summary": "Bump the like counter",
        "value": {"likes": 3},
    },
}
