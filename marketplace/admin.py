from django.contrib import admin

from .models import ServiceOffering, ServiceProposal, ServiceRequest, ServiceTransaction


class ServiceProposalInline(admin.TabularInline):
    model = ServiceProposal
    extra = 0
    fields = ("provider", "price", "delivery_time", "status", "created_at")
    readonly_fields = ("provider", "price", "delivery_time", "status", "created_at")


@admin.register(ServiceRequest)
class ServiceRequestAdmin(admin.ModelAdmin):
    list_display = ("title", "requested_by", "category", "budget", "status", "proposal_count", "created_at")
    list_filter = ("status", "category", "created_at")
    search_fields = ("title", "description", "requested_by__email")
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [ServiceProposalInline]

    fieldsets = (
        ("Basic Information", {"fields": ("id", "title", "description", "category")}),
        ("Client", {"fields": ("requested_by",)}),
        ("Terms", {"fields": ("budget", "deadline", "status")}),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("requested_by")

    def proposal_count(self, obj):
        return obj.proposals.count()

    proposal_count.short_description = "Proposals"


@admin.register(ServiceOffering)
class ServiceOfferingAdmin(admin.ModelAdmin):
    list_display = ("title", "provider", "category", "price", "delivery_time", "is_active", "created_at")
    list_filter = ("is_active", "category", "created_at")
    search_fields = ("title", "description", "provider__email")
    readonly_fields = ("id", "created_at", "updated_at")

    actions = ["activate_offerings", "deactivate_offerings"]

    def activate_offerings(self, request, queryset):
        queryset.update(is_active=True)
        self.message_user(request, f"{queryset.count()} offerings activated.")

    activate_offerings.short_description = "Activate selected offerings"

    def deactivate_offerings(self, request, queryset):
        queryset.update(is_active=False)
        self.message_user(request, f"{queryset.count()} offerings deactivated.")

    deactivate_offerings.short_description = "Deactivate selected offerings"


@admin.register(ServiceProposal)
class ServiceProposalAdmin(admin.ModelAdmin):
    list_display = ("id", "request", "provider", "price", "status", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("request__title", "provider__email", "description")
    readonly_fields = ("id", "created_at", "updated_at")


@admin.register(ServiceTransaction)
class ServiceTransactionAdmin(admin.ModelAdmin):
    list_display = ("id", "client", "provider", "amount", "status", "client_rating", "provider_rating", "created_at")
    list_filter = ("status", "created_at", "completed_at")
    search_fields = ("client__email", "provider__email", "proposal__request__title")
    # Status moves go through the API so the cascade to proposal/request is applied
    readonly_fields = (
        "id",
        "proposal",
        "client",
        "provider",
        "amount",
        "status",
        "created_at",
        "updated_at",
        "completed_at",
    )
