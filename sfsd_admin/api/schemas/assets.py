"""Esquemas para endpoints de imágenes (Cloudinary)."""
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class DeleteImagePayload(BaseModel):
    public_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("publicId", "public_id"))


class DeleteImageOut(BaseModel):
    success: bool = True
    result: str


class UploadImageOut(BaseModel):
    url: str
    public_id: Optional[str] = None
    avatar_url: Optional[str] = None
