"""领域实体"""

from .credential_profile import CredentialProfile, CredentialSnapshot
from .error_record import ErrorRecord
from .link_request import LinkBatchResult, LinkRequestBatch, LinkRequestItem, LinkResult

__all__ = [
    "CredentialProfile",
    "CredentialSnapshot",
    "ErrorRecord",
    "LinkBatchResult",
    "LinkRequestBatch",
    "LinkRequestItem",
    "LinkResult",
]
