from django.contrib import admin

from freight_router.models import RoutePlan


@admin.register(RoutePlan)
class RoutePlanAdmin(admin.ModelAdmin):
    list_display = (
        "pickup_city",
        "pickup_state",
        "delivery_city",
        "delivery_state",
        "contact_email",
        "route_count",
        "best_score",
        "created_at",
    )
    list_filter = ("pickup_state", "delivery_state")
    search_fields = ("pickup_city", "delivery_city", "contact_email")
    ordering = ("-created_at",)
