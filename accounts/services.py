"""
Account services - registration, profile edits and password change.
"""
import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from core.exceptions import Conflict
from students.services import ensure_teacher_profile
from .models import User

logger = logging.getLogger(__name__)


def _email_taken(email, exclude_user=None):
    qs = User.objects.filter(email__iexact=email)
    if exclude_user is not None:
        qs = qs.exclude(pk=exclude_user.pk)
    return qs.exists()


def register_user(email, password, full_name):
    """Create the account and its teacher profile together."""
    email = email.lower()
    if _email_taken(email):
        raise Conflict('Email is already in use')
    try:
        with transaction.atomic():
            user = User.objects.create_user(email=email, password=password, full_name=full_name)
            ensure_teacher_profile(user)
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        logger.warning(f"[register] duplicate email on insert: {email}")
        raise Conflict('Email is already in use')
    logger.info(f"[register] user_id={user.id}")
    return user


def update_profile(user, **changes):
    """Partial update of full_name / email / image. Empty image clears it."""
    if 'email' in changes:
        changes['email'] = changes['email'].lower()
        if _email_taken(changes['email'], exclude_user=user):
            raise Conflict('Email is already in use')
    if changes.get('image') == '':
        changes['image'] = None
    for field, value in changes.items():
        setattr(user, field, value)
    user.save()
    return user


def change_password(user, current_password, new_password):
    if not user.check_password(current_password):
        raise ValidationError({'currentPassword': 'Current password is incorrect'})
    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])
    logger.info(f"[change_password] user_id={user.id}")
