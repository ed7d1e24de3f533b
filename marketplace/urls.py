from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api.views import (
    PaymentViewSet,
    ProposalViewSet,
    ServiceOfferingViewSet,
    ServiceRequestViewSet,
    TransactionViewSet,
    prometheus_metrics,
)

# Create the main router
router = DefaultRouter()
router.register(r"service-requests", ServiceRequestViewSet, basename="service-request")
router.register(r"service-offerings", ServiceOfferingViewSet, basename="service-offering")
router.register(r"proposals", ProposalViewSet, basename="proposal")
router.register(r"transactions", TransactionViewSet, basename="transaction")
router.register(r"payments", PaymentViewSet, basename="payment")

app_name = "marketplace"

urlpatterns = [
    # Prometheus metrics endpoint
    path("metrics/", prometheus_metrics.marketplace_prometheus_metrics, name="marketplace-metrics"),
    # Main API routes
    path("", include(router.urls)),
]
