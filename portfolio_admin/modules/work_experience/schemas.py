from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from ..projects.schemas import StoredImage


class WorkExperience(BaseModel):
    """
    Work history entry
    Collection name: "workexperiences"
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra='ignore',
    )

    company_name: str = Field(..., min_length=1, max_length=100)
    position: str = Field(..., min_length=1, max_length=100)
    start_date: date
    is_present: bool = False
    # Declared after start_date and is_present so the validator can see them
    end_date: Optional[date] = Field(None, validate_default=True)
    description: str = Field(..., min_length=1, max_length=500)
    website: Optional[str] = None
    logo: Optional[StoredImage] = None

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_date(cls, value):
        if value in (None, ''):
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str):
            # Accept full ISO timestamps from date pickers
            return value.strip()[:10]
        return value

    @field_validator('is_present', mode='before')
    @classmethod
    def parse_flag(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in ('true', '1', 'on', 'yes')
        return value

    @field_validator('website', mode='before')
    @classmethod
    def blank_website_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator('end_date')
    @classmethod
    def check_end_date(cls, value, info: ValidationInfo):
        if info.data.get('is_present'):
            return None
        if value is None:
            raise ValueError('End date is required unless this is your current position')
        start = info.data.get('start_date')
        if start and value < start:
            raise ValueError('End date cannot be before start date')
        return value

    def to_document(self):
        """Dates are stored as midnight UTC datetimes"""
        document = self.model_dump(by_alias=True)
        for key in ('startDate', 'endDate'):
            if document[key] is not None:
                document[key] = datetime.combine(document[key], time())
        return document
