"""
===============================================================================
TARJETA CRC — schemas/accounts.py
===============================================================================

Módulo:
    Schemas HTTP de cuentas (signup / admin-signup / roles / me)

Notas:
    - Los campos requeridos se validan en el caso de uso para devolver
      "Campos faltantes: ..." (400), igual que el alta original.
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from app.application.usecases.accounts import (
    AccountData,
    ProfileResult,
    UserRolesResult,
)
from app.domain.roles import AppRole
from pydantic import BaseModel, Field


class SignUpReq(BaseModel):
    email: str = Field(default="", max_length=320)
    password: str = Field(default="", max_length=256)
    first_name: str = Field(default="", max_length=100)
    middle_name: str | None = Field(default=None, max_length=100)
    surname_1: str = Field(default="", max_length=100)
    surname_2: str | None = Field(default=None, max_length=100)
    id_number: str = Field(default="", max_length=20)
    phone: str = Field(default="", max_length=30)
    address: str = Field(default="", max_length=300)

    def to_account_data(self) -> AccountData:
        return AccountData(
            email=self.email,
            password=self.password,
            first_name=self.first_name,
            middle_name=self.middle_name,
            surname_1=self.surname_1,
            surname_2=self.surname_2,
            id_number=self.id_number,
            phone=self.phone,
            address=self.address,
        )


class AdminSignUpReq(SignUpReq):
    role: str = Field(default="", max_length=30)


class ReplaceRolesReq(BaseModel):
    roles: list[str] = Field(default_factory=list, max_length=8)


class UserRolesRes(BaseModel):
    message: str
    user_id: UUID
    roles: list[AppRole]


def to_user_roles_res(result: UserRolesResult) -> UserRolesRes:
    return UserRolesRes(
        message=result.message or "",
        user_id=result.user_id,
        roles=result.roles,
    )


class AccountRes(BaseModel):
    message: str
    user_id: UUID
    email: str | None = None
    role: AppRole | None = None


class ProfileRes(BaseModel):
    first_name: str
    middle_name: str | None = None
    surname_1: str
    surname_2: str | None = None
    id_number: str
    phone: str | None = None
    address: str | None = None
    avatar_url: str | None = None


class MeRes(BaseModel):
    user_id: UUID
    email: str | None = None
    profile: ProfileRes | None = None
    roles: list[AppRole]
    active_role: AppRole | None = None


def to_me_res(result: ProfileResult) -> MeRes:
    profile = None
    if result.profile is not None:
        p = result.profile
        profile = ProfileRes(
            first_name=p.first_name,
            middle_name=p.middle_name,
            surname_1=p.surname_1,
            surname_2=p.surname_2,
            id_number=p.id_number,
            phone=p.phone,
            address=p.address,
            avatar_url=p.avatar_url,
        )
    return MeRes(
        user_id=result.user_id,
        email=result.email,
        profile=profile,
        roles=result.roles,
        active_role=result.active_role,
    )
