"""
Esquemas Pydantic de las operaciones administrativas.

Los clientes envían camelCase (`targetId`, `newPassword`); internamente usamos snake_case.
"""
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from sfsd_admin.services.profile_mutation import ProfileChanges


class UpdateRolePayload(BaseModel):
    """`{targetId, changes}`. Compatibilidad: `{targetUserId, newRole}` equivale a cambiar `system_role`."""
    model_config = ConfigDict(populate_by_name=True)

    target_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("targetId", "targetUserId", "target_id"))
    changes: ProfileChanges = Field(default_factory=ProfileChanges)

    @model_validator(mode="before")
    @classmethod
    def _legacy_new_role(cls, data: Any) -> Any:
        if isinstance(data, dict) and "newRole" in data and "changes" not in data:
            data = dict(data)
            data["changes"] = {"system_role": data.pop("newRole")}
        return data


class DeleteUserPayload(BaseModel):
    user_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("userId", "user_id"))


class UpdatePasswordPayload(BaseModel):
    target_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("targetUserId", "targetId", "target_id"))
    new_password: Optional[str] = Field(default=None, validation_alias=AliasChoices("newPassword", "new_password"))


class SuccessOut(BaseModel):
    success: bool = True


class CleanupResults(BaseModel):
    financeDeleted: int
    vehicleDeleted: int
    actionsDeleted: int
    errors: list[str]


class CleanupOut(BaseModel):
    success: bool
    message: str
    timestamp: str
    results: CleanupResults


class DeleteCasePayload(BaseModel):
    case_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("caseId", "case_id"))


class DeleteCaseOut(BaseModel):
    success: bool = True
    message: str
    images_deleted: int
    records: Dict[str, int]
