"""
Session use cases: login, role selection, restore, switch, cancel/sign-out.
"""

from .cancel_selection import CancelRoleSelectionUseCase, SignOutUseCase
from .login import LoginInput, LoginUseCase
from .restore_session import RestoreSessionUseCase
from .select_role import SelectRoleInput, SelectRoleUseCase
from .session_results import SessionError, SessionErrorCode, SessionResult
from .session_support import SessionCredentials, cooperative_now
from .switch_role import SwitchRoleInput, SwitchRoleUseCase

__all__ = [
    "LoginInput",
    "LoginUseCase",
    "SelectRoleInput",
    "SelectRoleUseCase",
    "SwitchRoleInput",
    "SwitchRoleUseCase",
    "CancelRoleSelectionUseCase",
    "SignOutUseCase",
    "RestoreSessionUseCase",
    "SessionCredentials",
    "SessionError",
    "SessionErrorCode",
    "SessionResult",
    "cooperative_now",
]
