from marketplace.domain.models import ServiceOffering, ServiceProposal, ServiceRequest, ServiceTransaction


__all__ = [
    "ServiceOffering",
    "ServiceProposal",
    "ServiceRequest",
    "ServiceTransaction",
]
