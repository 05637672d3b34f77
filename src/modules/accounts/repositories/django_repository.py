"""Django ORM implementation of the User repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.accounts.models import User
from modules.accounts.repositories.interfaces import IUserRepository
from modules.core.repositories.interfaces import translate_storage_errors

logger = structlog.get_logger(__name__)


class UserDjangoRepository(IUserRepository):
    @translate_storage_errors
    def get_by_id(self, id: Any) -> Optional[User]:
        try:
            return User.objects.filter(pk=int(id)).first()
        except (TypeError, ValueError):
            return None

    @translate_storage_errors
    def get_by_username(self, username: str) -> Optional[User]:
        return User.objects.filter(username=username).first()

    @translate_storage_errors
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[User]:
        queryset = User.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @translate_storage_errors
    @transaction.atomic
    def save(self, entity: User) -> User:
        is_new = entity._state.adding
        entity.save()
        logger.info("user.saved", user_id=entity.pk, is_new=is_new)
        return entity

    @translate_storage_errors
    @transaction.atomic
    def delete(self, id: Any) -> bool:
        user = self.get_by_id(id)
        if not user:
            return False
        user.delete()
        logger.info("user.deleted", user_id=id)
        return True
