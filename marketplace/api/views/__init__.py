from .offering_views import ServiceOfferingViewSet
from .proposal_views import ProposalViewSet
from .request_views import ServiceRequestViewSet
from .transaction_views import PaymentViewSet, TransactionViewSet

__all__ = [
    "PaymentViewSet",
    "ProposalViewSet",
    "ServiceOfferingViewSet",
    "ServiceRequestViewSet",
    "TransactionViewSet",
]
