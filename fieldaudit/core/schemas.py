"""
Request schemas and their constraint tables.

Every attribute is Optional at bind time: an absent field binds as None and
is reported by the validator's "required" rule, so binding itself only
rejects bodies whose JSON types do not fit the schema.
"""

from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .constraints import Constraint

ConstraintTable = Dict[str, Tuple[Constraint, ...]]

# Integers bind only within the signed 64-bit range
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class RequestSchema(BaseModel):
    """Base for request records checked by the SchemaValidator."""

    model_config = ConfigDict(populate_by_name=True, strict=True, frozen=True)

    constraints: ClassVar[ConstraintTable] = {}

    def identifiers(self) -> Dict[str, Any]:
        """Identifying attributes for the diagnostic log."""
        return self.model_dump(by_alias=True)


class FavoriteNumRequest(RequestSchema):
    user_id: Optional[str] = Field(default=None, alias="userId")
    fav_num: Optional[int] = Field(default=None, alias="favNum", ge=INT64_MIN, le=INT64_MAX)

    constraints: ClassVar[ConstraintTable] = {
        "user_id": (Constraint("required"), Constraint("uuid_rfc4122")),
        "fav_num": (Constraint("required"), Constraint("gt", 0)),
    }


class PetNameRequest(RequestSchema):
    pet_name: Optional[str] = Field(default=None, alias="petName")
    owner_id: Optional[str] = Field(default=None, alias="ownerId")

    constraints: ClassVar[ConstraintTable] = {
        "pet_name": (Constraint("required"), Constraint("min", 2), Constraint("max", 50)),
        "owner_id": (Constraint("required"), Constraint("uuid_rfc4122")),
    }


class ThaiCIDRequest(RequestSchema):
    citizen_id: Optional[str] = Field(default=None, alias="citizenId")
    full_name: Optional[str] = Field(default=None, alias="fullName")

    constraints: ClassVar[ConstraintTable] = {
        "citizen_id": (Constraint("required"), Constraint("len", 13), Constraint("numeric")),
        "full_name": (Constraint("required"), Constraint("min", 3)),
    }


class GuessCatNameRequest(RequestSchema):
    guess_name: Optional[str] = Field(default=None, alias="guessName")
    user_id: Optional[str] = Field(default=None, alias="userId")
    attempts: Optional[int] = Field(default=None, alias="attempts", ge=INT64_MIN, le=INT64_MAX)

    constraints: ClassVar[ConstraintTable] = {
        "guess_name": (Constraint("required"), Constraint("min", 1), Constraint("max", 30)),
        "user_id": (Constraint("required"), Constraint("uuid_rfc4122")),
        "attempts": (Constraint("required"), Constraint("gte", 1), Constraint("lte", 3)),
    }
