"""URL routing for the quote chat."""

from django.urls import path  # type: ignore

from .views import ChatAccessView, ChatInfoView, ChatMessagesView

urlpatterns = [
    path('<int:event_service_id>/', ChatInfoView.as_view(), name='chat-info'),
    path('<int:event_service_id>/access/', ChatAccessView.as_view(), name='chat-access'),
    path('<int:event_service_id>/messages/', ChatMessagesView.as_view(), name='chat-messages'),
]
