"""Notifications app package.

Transactional email from admin-editable templates (sent asynchronously
with Celery) and in-app notifications for quote and chat activity.
"""
