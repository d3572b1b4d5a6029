# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Currency schemas."""

import re
import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

CURRENCY_CODE_PATTERN = r"^[A-Z]{3}$"


class CurrencyCreate(BaseModel):
    """Schema for registering a currency."""

    code: str = Field(..., min_length=3, max_length=3)
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        """Validate currency code format."""
        if not re.match(CURRENCY_CODE_PATTERN, v):
            raise ValueError("Currency code must contain only uppercase letters")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject blank names."""
        if not v.strip():
            raise ValueError("Currency name is required")
        return v.strip()


class CurrencyResponse(BaseModel):
    """Schema for currency response."""

    id: uuid.UUID
    code: str
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
