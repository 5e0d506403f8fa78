"""
Piece services - repertoire CRUD scoped to the caller's teacher profile.
"""
from django.db import transaction
from django.db.models import Count

from core.utils import filter_by_teacher, get_owned_or_404
from students.services import get_teacher, require_teacher
from .models import Piece


def list_pieces(user):
    qs = Piece.objects.annotate(lesson_count=Count('lessons'))
    return filter_by_teacher(qs, get_teacher(user)).order_by('-created_at')


def get_piece(user, piece_id):
    return get_owned_or_404(Piece.objects.all(), require_teacher(user), piece_id)


def create_piece(user, title, difficulty=1, description=None):
    teacher = require_teacher(user)
    return Piece.objects.create(
        teacher=teacher,
        title=title,
        difficulty=difficulty,
        description=description,
    )


def update_piece(user, piece_id, **changes):
    teacher = require_teacher(user)
    with transaction.atomic():
        piece = get_owned_or_404(Piece.objects.all(), teacher, piece_id, for_update=True)
        for field in ('title', 'difficulty', 'description'):
            if field in changes:
                setattr(piece, field, changes[field])
        piece.save()
    return piece


def delete_piece(user, piece_id):
    """Lessons keep their row; their piece link is cleared (SET_NULL)."""
    teacher = require_teacher(user)
    with transaction.atomic():
        piece = get_owned_or_404(Piece.objects.all(), teacher, piece_id, for_update=True)
        piece.delete()
