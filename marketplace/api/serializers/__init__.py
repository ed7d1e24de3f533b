from authentication.api.serializers import ErrorResponseSerializer

from .marketplace_serializers import (
    ProviderField,
    ServiceOfferingSerializer,
    ServiceProposalSerializer,
    ServiceRequestBriefSerializer,
    ServiceRequestSerializer,
    ServiceTransactionSerializer,
)
from .request_serializers import (
    MessageResponseSerializer,
    PaginationSerializer,
    PaymentReceiptSerializer,
    PaymentRequestSerializer,
    ProposalCreateSerializer,
    ProposalStatusSerializer,
    ServiceOfferingWriteSerializer,
    ServiceRequestWriteSerializer,
    TransactionUpdateSerializer,
)

__all__ = [
    "ErrorResponseSerializer",
    "MessageResponseSerializer",
    "PaginationSerializer",
    "PaymentReceiptSerializer",
    "PaymentRequestSerializer",
    "ProposalCreateSerializer",
    "ProposalStatusSerializer",
    "ProviderField",
    "ServiceOfferingSerializer",
    "ServiceOfferingWriteSerializer",
    "ServiceProposalSerializer",
    "ServiceRequestBriefSerializer",
    "ServiceRequestSerializer",
    "ServiceRequestWriteSerializer",
    "ServiceTransactionSerializer",
    "TransactionUpdateSerializer",
]
