"""
Use Cases Layer (Business Operations)

This package exposes entry points for business logic, organized by feature.

Structure
---------
usecases/
├── session/         # Login, role selector, restore, switch, sign-out
├── role_requests/   # Submit / resolve / list role requests
├── schedules/       # Employee schedule windows
├── accounts/        # Sign-up, admin-created users, own profile
├── notifications/   # In-app notifications
├── support_chat/    # Support chat with canned bot replies
└── audit/           # Audit log listing

Usage
-----
Import from subpackages:

    from app.application.usecases.session import LoginUseCase
    from app.application.usecases.role_requests import ResolveRoleRequestUseCase
"""
