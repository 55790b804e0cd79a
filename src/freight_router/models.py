from __future__ import annotations

from django.db import models

from freight_router.schemas import RoutePlanResponse


class RoutePlan(models.Model):
    objects = models.Manager["RoutePlan"]()

    # Order summary
    pickup_city = models.CharField(max_length=100)
    pickup_state = models.CharField(max_length=50)
    delivery_city = models.CharField(max_length=100)
    delivery_state = models.CharField(max_length=50)
    contact_email = models.CharField(max_length=254)

    # Ranking summary
    route_count = models.PositiveIntegerField(default=0)
    excluded_count = models.PositiveIntegerField(default=0)
    best_score = models.FloatField(null=True, blank=True)
    response = models.JSONField(default=dict)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at",)
        indexes = (models.Index(fields=["contact_email"], name="route_plan_contact_idx"),)

    @classmethod
    def from_response(cls, response: RoutePlanResponse) -> RoutePlan:
        return cls(
            pickup_city=response.pickup.city,
            pickup_state=response.pickup.state,
            delivery_city=response.delivery.city,
            delivery_state=response.delivery.state,
            contact_email=response.contact.email,
            route_count=len(response.routes),
            excluded_count=len(response.excluded_routes),
            best_score=response.routes[0].score if response.routes else None,
            response=response.model_dump(mode="json", exclude={"plan_id"}),
        )

    def __str__(self) -> str:
        return (
            f"{self.pickup_city}, {self.pickup_state} -> "
            f"{self.delivery_city}, {self.delivery_state}"
        )
