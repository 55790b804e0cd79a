from django.urls import path

from freight_router import views

urlpatterns = [
    path("api/v1/health", views.health_view, name="health"),
    path("api/v1/route-plan", views.route_plan_view, name="route-plan"),
    path("api/v1/email/parse", views.email_parse_view, name="email-parse"),
    path("api/v1/offer-email", views.offer_email_view, name="offer-email"),
]
