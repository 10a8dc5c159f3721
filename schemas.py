from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List, Optional
from models import TargetAudience


class CamelModel(BaseModel):
    """Wire format is camelCase, Python attributes stay snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Ad Schemas
class Ad(CamelModel):
    id: str
    title: str
    medicine_name: Optional[str] = None
    indications: Optional[str] = None  # comma-separated conditions
    description: Optional[str] = None
    image_url: Optional[str] = None
    link: Optional[str] = None
    category: Optional[str] = None
    department_id: Optional[str] = None

    @field_validator('id', 'department_id', mode='before')
    @classmethod
    def coerce_id(cls, v):
        # Supabase may hand back integer keys
        return str(v) if v is not None else v

    @property
    def indication_list(self) -> List[str]:
        if not self.indications:
            return []
        return [item.strip() for item in self.indications.split(",")]


class AdRecord(Ad):
    target_audience: TargetAudience = TargetAudience.ALL
    is_active: bool = True
    is_new_medicine: bool = False
    click_count: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class AdCreate(CamelModel):
    title: Optional[str] = None
    medicine_name: Optional[str] = None
    indications: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    link: Optional[str] = None
    department_id: Optional[str] = None
    target_audience: TargetAudience = TargetAudience.ALL
    is_active: bool = True
    is_new_medicine: bool = False
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator('link', 'image_url', 'department_id', mode='before')
    @classmethod
    def clean_blank(cls, v):
        return _blank_to_none(v)


class AdUpdate(CamelModel):
    title: Optional[str] = None
    medicine_name: Optional[str] = None
    indications: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    link: Optional[str] = None
    department_id: Optional[str] = None
    target_audience: Optional[TargetAudience] = None
    is_active: Optional[bool] = None
    is_new_medicine: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator('link', 'image_url', 'department_id', mode='before')
    @classmethod
    def clean_blank(cls, v):
        return _blank_to_none(v)

    @field_validator('target_audience', 'is_active', 'is_new_medicine')
    @classmethod
    def not_null(cls, v):
        # Optional only so the field can be left out; the columns are NOT NULL
        if v is None:
            raise ValueError('may be omitted but not null')
        return v


class Pagination(CamelModel):
    has_more: bool = False
    next_cursor: Optional[str] = None


class AdListResponse(CamelModel):
    success: bool = True
    ads: List[AdRecord] = []
    pagination: Pagination = Pagination()


class AdResponse(CamelModel):
    success: bool = True
    ad: AdRecord


class MessageResponse(CamelModel):
    success: bool = True
    message: str
