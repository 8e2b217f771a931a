"""URL routing for payments."""

from django.urls import path  # type: ignore

from .views import PaymentLinkView, PaymentSummaryView

urlpatterns = [
    path('payment-link/', PaymentLinkView.as_view(), name='payment-link'),
    path('summary/<int:event_id>/', PaymentSummaryView.as_view(), name='payment-summary'),
]
