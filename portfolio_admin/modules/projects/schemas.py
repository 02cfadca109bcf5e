"""
Project Schemas
===============

Pydantic models that validate project documents before they are written.
Attributes are snake_case; the stored and JSON forms are camelCase.
"""

from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

CategoryType = Literal['product', 'software', 'content', 'innovation']
ShortLabel = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=30)]


class StoredImage(BaseModel):
    """Read URLs of an uploaded image and its thumbnail"""
    model_config = ConfigDict(extra='ignore')

    original: str
    thumbnail: Optional[str] = None
    path: Optional[str] = None


class Project(BaseModel):
    """
    Portfolio project
    Collection name: "projects"
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra='ignore',
    )

    title: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=300)
    category: CategoryType
    image: Optional[StoredImage] = None
    link: Optional[str] = None
    tags: List[ShortLabel] = Field(default_factory=list)
    skills: List[ShortLabel] = Field(default_factory=list)

    @field_validator('link', mode='before')
    @classmethod
    def blank_link_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator('tags', 'skills', mode='before')
    @classmethod
    def split_labels(cls, value):
        # Forms send "a, b, c"
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(',') if part.strip()]
        return value

    def to_document(self):
        return self.model_dump(by_alias=True, exclude_none=False)
