from .incident_results import (
    IncidentError,
    IncidentErrorCode,
    IncidentListResult,
    IncidentResult,
)
from .list_incidents import GetIncidentUseCase, ListIncidentsUseCase
from .moderate_incident import ModerateIncidentInput, ModerateIncidentUseCase
from .report_incident import ReportIncidentInput, ReportIncidentUseCase

__all__ = [
    "ReportIncidentInput",
    "ReportIncidentUseCase",
    "ListIncidentsUseCase",
    "GetIncidentUseCase",
    "ModerateIncidentInput",
    "ModerateIncidentUseCase",
    "IncidentError",
    "IncidentErrorCode",
    "IncidentListResult",
    "IncidentResult",
]
