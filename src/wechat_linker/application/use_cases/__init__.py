"""应用用例"""

from .credential_store import CredentialStore
from .generate_links import LinkGenerator
from .report_errors import ReportErrorsUseCase

__all__ = [
    "CredentialStore",
    "LinkGenerator",
    "ReportErrorsUseCase",
]
