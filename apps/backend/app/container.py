"""
===============================================================================
TARJETA CRC — app/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, servicios, adapters) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache) para recursos pesados.
  - Centralizar decisiones runtime basadas en Settings (config).

Colaboradores:
  - app.crosscutting.config.get_settings
  - app.domain.repositories.* / app.domain.services.* (puertos)
  - app.infrastructure.* (implementaciones)
  - app.application.usecases.* (casos de uso)

Patrones aplicados:
  - Composition Root
  - Dependency Inversion (use cases dependen de puertos)
  - Lazy singletons con lru_cache

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO debe depender de FastAPI (solo expone factories).
  - En test (APP_ENV=test) todo es in-memory: sin DB, sin red, sin Redis.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.usecases.accounts import (
    AdminCreateUserUseCase,
    GetProfileUseCase,
    ReplaceUserRolesUseCase,
    RevokeUserRoleUseCase,
    SignUpUseCase,
)
from .application.usecases.audit import ListAuditEventsUseCase
from .application.usecases.bus_chat import (
    CloseBusChatUseCase,
    ListBusChatMessagesUseCase,
    ListBusChatsUseCase,
    OpenBusChatUseCase,
    PostBusChatMessageUseCase,
)
from .application.usecases.incidents import (
    GetIncidentUseCase,
    ListIncidentsUseCase,
    ModerateIncidentUseCase,
    ReportIncidentUseCase,
)
from .application.usecases.notifications import (
    ListNotificationsUseCase,
    MarkNotificationReadUseCase,
)
from .application.usecases.role_requests import (
    ListRoleRequestsUseCase,
    ResolveRoleRequestUseCase,
    SubmitRoleRequestUseCase,
)
from .application.usecases.schedules import (
    CreateScheduleUseCase,
    DeleteScheduleUseCase,
    ListSchedulesUseCase,
    ToggleScheduleUseCase,
)
from .application.usecases.session import (
    CancelRoleSelectionUseCase,
    LoginUseCase,
    RestoreSessionUseCase,
    SelectRoleUseCase,
    SignOutUseCase,
    SwitchRoleUseCase,
)
from .application.usecases.support_chat import (
    ListSupportMessagesUseCase,
    ListSupportThreadsUseCase,
    OpenSupportThreadUseCase,
    PostSupportMessageUseCase,
)
from .crosscutting.config import get_settings
from .domain.repositories import (
    AuditEventRepository,
    BusChatRepository,
    ChatRepository,
    IncidentRepository,
    NotificationRepository,
    ProfileRepository,
    RoleGrantRepository,
    RoleRequestRepository,
    ScheduleRepository,
)
from .domain.services import AuthGateway, SelectionStore
from .infrastructure.repositories import (
    InMemoryAuditEventRepository,
    InMemoryBusChatRepository,
    InMemoryChatRepository,
    InMemoryIncidentRepository,
    InMemoryNotificationRepository,
    InMemoryProfileRepository,
    InMemoryRoleGrantRepository,
    InMemoryRoleRequestRepository,
    InMemoryScheduleRepository,
    PostgresAuditEventRepository,
    PostgresBusChatRepository,
    PostgresChatRepository,
    PostgresIncidentRepository,
    PostgresNotificationRepository,
    PostgresProfileRepository,
    PostgresRoleGrantRepository,
    PostgresRoleRequestRepository,
    PostgresScheduleRepository,
)
from .infrastructure.services import HostedAuthClient, InMemoryAuthGateway
from .infrastructure.session_store import InMemorySelectionStore, RedisSelectionStore

# =============================================================================
# Helpers internos
# =============================================================================


def _is_test_env() -> bool:
    """
    Determina si estamos en entorno de test.

    Regla:
      - app_env ∈ {"test", "testing", "ci"} => se favorecen in-memory adapters.
    """
    return get_settings().is_test()


# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_profile_repository() -> ProfileRepository:
    if _is_test_env():
        return InMemoryProfileRepository()
    return PostgresProfileRepository()


@lru_cache(maxsize=1)
def get_role_grant_repository() -> RoleGrantRepository:
    if _is_test_env():
        return InMemoryRoleGrantRepository()
    return PostgresRoleGrantRepository()


@lru_cache(maxsize=1)
def get_schedule_repository() -> ScheduleRepository:
    if _is_test_env():
        return InMemoryScheduleRepository()
    return PostgresScheduleRepository()


@lru_cache(maxsize=1)
def get_role_request_repository() -> RoleRequestRepository:
    if _is_test_env():
        return InMemoryRoleRequestRepository()
    return PostgresRoleRequestRepository()


@lru_cache(maxsize=1)
def get_notification_repository() -> NotificationRepository:
    if _is_test_env():
        return InMemoryNotificationRepository()
    return PostgresNotificationRepository()


@lru_cache(maxsize=1)
def get_chat_repository() -> ChatRepository:
    if _is_test_env():
        return InMemoryChatRepository()
    return PostgresChatRepository()


@lru_cache(maxsize=1)
def get_bus_chat_repository() -> BusChatRepository:
    if _is_test_env():
        return InMemoryBusChatRepository()
    return PostgresBusChatRepository()


@lru_cache(maxsize=1)
def get_incident_repository() -> IncidentRepository:
    if _is_test_env():
        return InMemoryIncidentRepository()
    return PostgresIncidentRepository()


@lru_cache(maxsize=1)
def get_audit_repository() -> AuditEventRepository:
    if _is_test_env():
        return InMemoryAuditEventRepository()
    return PostgresAuditEventRepository()


# =============================================================================
# Servicios externos (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_auth_gateway() -> AuthGateway:
    """Servicio de auth gestionado (in-memory en test)."""
    if _is_test_env():
        return InMemoryAuthGateway()
    settings = get_settings()
    return HostedAuthClient(
        base_url=settings.auth_url,
        anon_key=settings.auth_anon_key,
        service_key=settings.auth_service_key,
        timeout_s=settings.backend_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_selection_store() -> SelectionStore:
    """
    Almacén de selectedRole por sesión.

    Regla:
      - Sin REDIS_URL (dev/test) => in-memory (se pierde al reiniciar).
    """
    settings = get_settings()
    if _is_test_env() or not settings.redis_url.strip():
        return InMemorySelectionStore(
            ttl_seconds=settings.selection_ttl_seconds,
            max_entries=settings.selection_store_max_entries,
        )
    return RedisSelectionStore(
        redis_url=settings.redis_url,
        ttl_seconds=settings.selection_ttl_seconds,
        socket_timeout_seconds=settings.redis_socket_timeout_seconds,
    )


def reset_container() -> None:
    """Limpia los singletons (tests / recarga de settings)."""
    for factory in (
        get_profile_repository,
        get_role_grant_repository,
        get_schedule_repository,
        get_role_request_repository,
        get_notification_repository,
        get_chat_repository,
        get_bus_chat_repository,
        get_incident_repository,
        get_audit_repository,
        get_auth_gateway,
        get_selection_store,
    ):
        factory.cache_clear()


# =============================================================================
# Casos de uso: sesión / selector de rol
# =============================================================================


def get_login_use_case() -> LoginUseCase:
    return LoginUseCase(
        auth=get_auth_gateway(),
        grants=get_role_grant_repository(),
        schedules=get_schedule_repository(),
        store=get_selection_store(),
    )


def get_select_role_use_case() -> SelectRoleUseCase:
    return SelectRoleUseCase(
        auth=get_auth_gateway(),
        grants=get_role_grant_repository(),
        schedules=get_schedule_repository(),
        store=get_selection_store(),
    )


def get_switch_role_use_case() -> SwitchRoleUseCase:
    return SwitchRoleUseCase(
        auth=get_auth_gateway(),
        grants=get_role_grant_repository(),
        schedules=get_schedule_repository(),
        store=get_selection_store(),
    )


def get_cancel_role_selection_use_case() -> CancelRoleSelectionUseCase:
    return CancelRoleSelectionUseCase(
        auth=get_auth_gateway(), store=get_selection_store()
    )


def get_sign_out_use_case() -> SignOutUseCase:
    return SignOutUseCase(auth=get_auth_gateway(), store=get_selection_store())


def get_restore_session_use_case() -> RestoreSessionUseCase:
    return RestoreSessionUseCase(
        auth=get_auth_gateway(),
        grants=get_role_grant_repository(),
        schedules=get_schedule_repository(),
        store=get_selection_store(),
    )


# =============================================================================
# Casos de uso: cuentas
# =============================================================================


def get_sign_up_use_case() -> SignUpUseCase:
    return SignUpUseCase(
        auth=get_auth_gateway(),
        profiles=get_profile_repository(),
        grants=get_role_grant_repository(),
        audit_repo=get_audit_repository(),
    )


def get_admin_create_user_use_case() -> AdminCreateUserUseCase:
    return AdminCreateUserUseCase(
        auth=get_auth_gateway(),
        profiles=get_profile_repository(),
        grants=get_role_grant_repository(),
        audit_repo=get_audit_repository(),
    )


def get_replace_user_roles_use_case() -> ReplaceUserRolesUseCase:
    return ReplaceUserRolesUseCase(
        profiles=get_profile_repository(),
        grants=get_role_grant_repository(),
        audit_repo=get_audit_repository(),
    )


def get_revoke_user_role_use_case() -> RevokeUserRoleUseCase:
    return RevokeUserRoleUseCase(
        profiles=get_profile_repository(),
        grants=get_role_grant_repository(),
        audit_repo=get_audit_repository(),
    )


def get_profile_use_case() -> GetProfileUseCase:
    return GetProfileUseCase(
        profiles=get_profile_repository(),
        grants=get_role_grant_repository(),
        store=get_selection_store(),
    )


# =============================================================================
# Casos de uso: solicitudes de roles
# =============================================================================


def get_submit_role_request_use_case() -> SubmitRoleRequestUseCase:
    return SubmitRoleRequestUseCase(
        grants=get_role_grant_repository(),
        requests=get_role_request_repository(),
        notifications=get_notification_repository(),
        profiles=get_profile_repository(),
        audit_repo=get_audit_repository(),
    )


def get_resolve_role_request_use_case() -> ResolveRoleRequestUseCase:
    return ResolveRoleRequestUseCase(
        grants=get_role_grant_repository(),
        requests=get_role_request_repository(),
        notifications=get_notification_repository(),
        audit_repo=get_audit_repository(),
    )


def get_list_role_requests_use_case() -> ListRoleRequestsUseCase:
    return ListRoleRequestsUseCase(
        grants=get_role_grant_repository(),
        requests=get_role_request_repository(),
    )


# =============================================================================
# Casos de uso: horarios
# =============================================================================


def get_create_schedule_use_case() -> CreateScheduleUseCase:
    return CreateScheduleUseCase(
        schedules=get_schedule_repository(),
        grants=get_role_grant_repository(),
        audit_repo=get_audit_repository(),
    )


def get_toggle_schedule_use_case() -> ToggleScheduleUseCase:
    return ToggleScheduleUseCase(
        schedules=get_schedule_repository(), audit_repo=get_audit_repository()
    )


def get_delete_schedule_use_case() -> DeleteScheduleUseCase:
    return DeleteScheduleUseCase(
        schedules=get_schedule_repository(), audit_repo=get_audit_repository()
    )


def get_list_schedules_use_case() -> ListSchedulesUseCase:
    return ListSchedulesUseCase(schedules=get_schedule_repository())


# =============================================================================
# Casos de uso: notificaciones / soporte / auditoría
# =============================================================================


def get_list_notifications_use_case() -> ListNotificationsUseCase:
    return ListNotificationsUseCase(notifications=get_notification_repository())


def get_mark_notification_read_use_case() -> MarkNotificationReadUseCase:
    return MarkNotificationReadUseCase(notifications=get_notification_repository())


def get_open_support_thread_use_case() -> OpenSupportThreadUseCase:
    return OpenSupportThreadUseCase(chat=get_chat_repository())


def get_post_support_message_use_case() -> PostSupportMessageUseCase:
    return PostSupportMessageUseCase(chat=get_chat_repository())


def get_list_support_messages_use_case() -> ListSupportMessagesUseCase:
    return ListSupportMessagesUseCase(chat=get_chat_repository())


def get_list_support_threads_use_case() -> ListSupportThreadsUseCase:
    return ListSupportThreadsUseCase(chat=get_chat_repository())


def get_list_audit_events_use_case() -> ListAuditEventsUseCase:
    return ListAuditEventsUseCase(audit_repo=get_audit_repository())


# =============================================================================
# Casos de uso: chat de buses / incidentes de vía
# =============================================================================


def get_open_bus_chat_use_case() -> OpenBusChatUseCase:
    return OpenBusChatUseCase(
        chats=get_bus_chat_repository(),
        grants=get_role_grant_repository(),
        audit_repo=get_audit_repository(),
    )


def get_list_bus_chats_use_case() -> ListBusChatsUseCase:
    return ListBusChatsUseCase(chats=get_bus_chat_repository())


def get_list_bus_chat_messages_use_case() -> ListBusChatMessagesUseCase:
    return ListBusChatMessagesUseCase(chats=get_bus_chat_repository())


def get_post_bus_chat_message_use_case() -> PostBusChatMessageUseCase:
    return PostBusChatMessageUseCase(chats=get_bus_chat_repository())


def get_close_bus_chat_use_case() -> CloseBusChatUseCase:
    return CloseBusChatUseCase(
        chats=get_bus_chat_repository(), audit_repo=get_audit_repository()
    )


def get_report_incident_use_case() -> ReportIncidentUseCase:
    return ReportIncidentUseCase(
        incidents=get_incident_repository(), audit_repo=get_audit_repository()
    )


def get_list_incidents_use_case() -> ListIncidentsUseCase:
    return ListIncidentsUseCase(incidents=get_incident_repository())


def get_incident_use_case() -> GetIncidentUseCase:
    return GetIncidentUseCase(incidents=get_incident_repository())


def get_moderate_incident_use_case() -> ModerateIncidentUseCase:
    return ModerateIncidentUseCase(
        incidents=get_incident_repository(), audit_repo=get_audit_repository()
    )
