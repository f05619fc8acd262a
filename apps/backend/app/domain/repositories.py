"""
CRC — domain/repositories.py

Name
- Domain Repository Interfaces (Protocols)

Responsibilities
- Define persistence contracts for the back-office tables (ports).
- Keep the application/domain independent from infrastructure (PostgreSQL, in-memory).
- Enable dependency inversion and straightforward unit testing (fake repositories).

Collaborators
- domain.entities: Profile, RoleRequest, Notification, ChatThread, ChatMessage,
  BusChat, BusChatMessage, RoadIncident, IncidentAuditEntry, AuditEvent
- domain.schedules: ScheduleWindow
- infrastructure.repositories: postgres/*, in_memory/* implementations

Constraints
- Pure interfaces only: no side effects, no infrastructure imports, no SQL.
- Implementations MUST match method signatures exactly.
- "Not found" is signalled with None/False, never with exceptions.
"""

from datetime import datetime
from typing import List, Optional, Protocol, Sequence
from uuid import UUID

from .entities import (
    AuditEvent,
    BusChat,
    BusChatMessage,
    BusChatStatus,
    ChatMessage,
    ChatThread,
    IncidentAuditEntry,
    IncidentStatus,
    Notification,
    Profile,
    RoadIncident,
    RoleRequest,
    RoleRequestStatus,
)
from .roles import AppRole
from .schedules import ScheduleWindow


class ProfileRepository(Protocol):
    """R: Interface for the profiles table (1:1 with auth identities)."""

    def get_profile(self, user_id: UUID) -> Optional[Profile]:
        """R: Profile by auth user id."""
        ...

    def get_profile_by_id_number(self, id_number: str) -> Optional[Profile]:
        """R: Profile by national id number (cédula), unique."""
        ...

    def create_profile(self, profile: Profile) -> None:
        """R: Insert a profile row."""
        ...


class RoleGrantRepository(Protocol):
    """R: Interface for the user_roles table."""

    def list_roles(self, user_id: UUID) -> List[AppRole]:
        """R: Roles granted to a user (may be empty)."""
        ...

    def list_users_with_role(self, role: AppRole) -> List[UUID]:
        """R: User ids holding a role (e.g. every administrator)."""
        ...

    def add_role(self, user_id: UUID, role: AppRole) -> bool:
        """R: Grant a role. Returns False if the grant already existed."""
        ...

    def remove_role(self, user_id: UUID, role: AppRole) -> bool:
        """R: Revoke a role. Returns False if the user did not hold it."""
        ...

    def replace_roles(self, user_id: UUID, roles: Sequence[AppRole]) -> None:
        """R: Atomically replace every grant of a user (empty = revoke all)."""
        ...


class ScheduleRepository(Protocol):
    """R: Interface for the employee_schedules table."""

    def list_for_user(self, user_id: UUID) -> List[ScheduleWindow]:
        """R: Every window (active or not) of a user, any role."""
        ...

    def list_schedules(
        self, *, employee_id: Optional[UUID] = None
    ) -> List[ScheduleWindow]:
        """R: Windows ordered by (day_of_week, start_time)."""
        ...

    def get_schedule(self, schedule_id: UUID) -> Optional[ScheduleWindow]: ...

    def create_schedule(self, window: ScheduleWindow) -> None: ...

    def set_active(
        self, schedule_id: UUID, is_active: bool
    ) -> Optional[ScheduleWindow]:
        """R: Flip is_active; returns the updated window or None."""
        ...

    def delete_schedule(self, schedule_id: UUID) -> bool: ...


class RoleRequestRepository(Protocol):
    """R: Interface for the role_requests table."""

    def create_request(self, request: RoleRequest) -> None: ...

    def get_request(self, request_id: UUID) -> Optional[RoleRequest]: ...

    def list_requests(
        self,
        *,
        requester_id: Optional[UUID] = None,
        statuses: Optional[Sequence[RoleRequestStatus]] = None,
    ) -> List[RoleRequest]:
        """R: Newest first."""
        ...

    def save_resolution(self, request: RoleRequest) -> None:
        """
        R: Persist approved/rejected lists, status and review fields.
        """
        ...


class NotificationRepository(Protocol):
    """R: Interface for the notifications table."""

    def create_notification(self, notification: Notification) -> None: ...

    def get_notification(self, notification_id: UUID) -> Optional[Notification]: ...

    def list_for_user(
        self, user_id: UUID, *, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        """R: Newest first."""
        ...

    def mark_read(
        self, notification_id: UUID, read_at: datetime
    ) -> Optional[Notification]: ...


class ChatRepository(Protocol):
    """R: Interface for chat_threads / chat_messages."""

    def create_thread(self, thread: ChatThread) -> None: ...

    def get_thread(self, thread_id: UUID) -> Optional[ChatThread]: ...

    def list_threads_for_client(self, client_id: UUID) -> List[ChatThread]:
        """R: Most recent activity first."""
        ...

    def touch_thread(self, thread_id: UUID, at: datetime) -> None:
        """R: Update last_message_at."""
        ...

    def add_message(self, message: ChatMessage) -> None: ...

    def list_messages(self, thread_id: UUID) -> List[ChatMessage]:
        """R: Insertion order (change-feed order)."""
        ...


class BusChatRepository(Protocol):
    """R: Interface for bus_chats / chat_messages (bus_chat_id)."""

    def create_chat(self, chat: BusChat) -> None: ...

    def get_chat(self, chat_id: UUID) -> Optional[BusChat]: ...

    def find_active_chat(
        self, *, bus_id: UUID, owner_id: UUID, driver_id: UUID
    ) -> Optional[BusChat]: ...

    def list_for_owner(self, owner_id: UUID) -> List[BusChat]:
        """R: Most recent activity first."""
        ...

    def list_for_driver(self, driver_id: UUID) -> List[BusChat]:
        """R: Most recent activity first."""
        ...

    def set_status(self, chat_id: UUID, status: BusChatStatus) -> Optional[BusChat]: ...

    def touch_chat(self, chat_id: UUID, at: datetime) -> None:
        """R: Update last_activity_at."""
        ...

    def add_message(self, message: BusChatMessage) -> None: ...

    def list_messages(self, chat_id: UUID) -> List[BusChatMessage]:
        """R: Oldest first."""
        ...

    def mark_read(self, chat_id: UUID, reader_id: UUID, at: datetime) -> int:
        """R: Stamp read_at on unread messages sent by the other participant."""
        ...


class IncidentRepository(Protocol):
    """R: Interface for road_incidents / incident_audit_log."""

    def create_incident(self, incident: RoadIncident) -> None: ...

    def get_incident(self, incident_id: UUID) -> Optional[RoadIncident]: ...

    def list_incidents(
        self, *, status: Optional[IncidentStatus] = None, limit: int = 100
    ) -> List[RoadIncident]:
        """R: Newest first."""
        ...

    def update_moderation(
        self, incident: RoadIncident, *, expected_status: IncidentStatus
    ) -> bool:
        """
        R: Persist status/moderator/timestamps only if the stored status is
        still expected_status. False when the row changed or vanished.
        """
        ...

    def add_log_entry(self, entry: IncidentAuditEntry) -> None: ...

    def list_log_entries(self, incident_id: UUID) -> List[IncidentAuditEntry]:
        """R: Oldest first."""
        ...


class AuditEventRepository(Protocol):
    """R: Interface for the audit_log table (append-only)."""

    def record_event(self, event: AuditEvent) -> None: ...

    def list_events(
        self,
        *,
        action_prefix: Optional[str] = None,
        actor: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[AuditEvent]:
        """R: Newest first."""
        ...
