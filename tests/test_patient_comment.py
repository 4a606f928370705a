"""
Tests for PatientComment.
"""

from datetime import timedelta

import pytest

from clinictriage.domain.entities.patient_comment import PatientComment
from clinictriage.domain.enums.triage import CommentType, UserRole
from clinictriage.domain.errors import CommentValidationError


def make_comment(**overrides) -> PatientComment:
    data = {
        "patient_id": "patient-1",
        "author_id": "user-1",
        "author_name": "Dr. Grey",
        "author_role": UserRole.DOCTOR,
        "content": "Started IV fluids",
        "type": CommentType.TREATMENT,
    }
    data.update(overrides)
    return PatientComment.create(**data)


def test_create_assigns_id_and_defaults():
    comment = make_comment()
    assert comment.id.startswith("comment-")
    assert not comment.is_edited
    assert comment.edited_at is None
    assert comment.is_recent()


@pytest.mark.parametrize(
    "overrides",
    [
        {"content": "ok"},
        {"content": "    abc   "},
        {"patient_id": ""},
        {"author_id": ""},
        {"type": "gossip"},
        {"author_role": "visitor"},
    ],
)
def test_invalid_comment(overrides):
    with pytest.raises(CommentValidationError):
        make_comment(**overrides)


def test_edit_marks_comment_as_edited():
    comment = make_comment()
    comment.edit("  Switched to oral fluids  ")
    assert comment.content == "Switched to oral fluids"
    assert comment.is_edited
    assert comment.edited_at is not None
    with pytest.raises(CommentValidationError):
        comment.edit("no")


def test_is_recent_window():
    comment = make_comment()
    assert not comment.is_recent(now=comment.created_at + timedelta(hours=2))
    assert comment.is_recent(timedelta(hours=3), now=comment.created_at + timedelta(hours=2))
