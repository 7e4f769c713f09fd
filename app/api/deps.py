# app/api/deps.py
from fastapi import Request

from app.services.notification_service import NotificationService
from app.services.view_cache import ViewCache


def get_notifier(request: Request) -> NotificationService:
    return request.app.state.notifier


def get_view_cache(request: Request) -> ViewCache:
    return request.app.state.view_cache
