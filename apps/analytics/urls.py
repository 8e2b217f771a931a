"""URL routing for analytics."""

from django.urls import path  # type: ignore

from .views import AdminDashboardView, AgendaView

urlpatterns = [
    path('dashboard/', AdminDashboardView.as_view(), name='analytics-dashboard'),
    path('agenda/', AgendaView.as_view(), name='analytics-agenda'),
]
