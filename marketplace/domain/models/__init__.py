from .offering import ServiceOffering
from .proposal import ServiceProposal
from .request import ServiceRequest
from .transaction import ServiceTransaction


__all__ = [
    "ServiceOffering",
    "ServiceProposal",
    "ServiceRequest",
    "ServiceTransaction",
]
