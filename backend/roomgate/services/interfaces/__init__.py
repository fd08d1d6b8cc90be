"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .admission import AdmissionOutcome, AdmissionResult, AdmissionStrategy, OutcomeKind
from .optimistic_admission import OptimisticAdmission

__all__ = [
    'AdmissionOutcome',
    'AdmissionResult',
    'AdmissionStrategy',
    'OutcomeKind',
    'OptimisticAdmission',
]
