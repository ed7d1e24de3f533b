"""
Marketplace Service Layer

This package contains all business logic for the marketplace app, organized
into domain services.

Services:
- RequestService: Client-authored service requests
- OfferingService: Provider-authored service listings
- ProposalService: Bids on requests and the accept/reject/complete workflow
- TransactionService: Transaction status, reviews and payment
- ProviderStatsService: Provider rating and completed-service counts

Usage:
    from marketplace.services import ProposalService

    result = ProposalService().submit_proposal(user, request_id, description, price, delivery_time)

    if result.ok:
        proposal = result.value
    else:
        error = result.error
"""

from .base import BaseService, ErrorCodes, MarketplaceService, ServiceResult, service_err, service_ok
from .offering_service import OfferingService
from .proposal_service import ProposalService
from .provider_stats_service import ProviderStatsService
from .request_service import RequestService
from .transaction_service import TransactionService

__all__ = [
    # Base classes
    "BaseService",
    "MarketplaceService",
    "ServiceResult",
    # Helper functions
    "service_ok",
    "service_err",
    # Error codes
    "ErrorCodes",
    # Services
    "OfferingService",
    "ProposalService",
    "ProviderStatsService",
    "RequestService",
    "TransactionService",
]
