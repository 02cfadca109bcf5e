import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


class BasicInfo(BaseModel):
    """
    Profile shown at the top of the portfolio (singleton document)
    Collection name: "basic_info"
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra='ignore',
    )

    name: str = Field(..., min_length=1, max_length=100)
    years_of_experience: str = Field(..., min_length=1, max_length=20, description="e.g. '3+'")
    phone: str = Field(..., min_length=1, max_length=30)
    email: str = Field(..., min_length=1, max_length=254)

    @field_validator('years_of_experience', mode='before')
    @classmethod
    def years_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator('email')
    @classmethod
    def check_email(cls, value):
        if not EMAIL_PATTERN.match(value):
            raise ValueError('Email must be a valid email address')
        return value.lower()
