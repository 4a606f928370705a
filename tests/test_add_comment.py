"""
Tests for AddCommentToPatientUseCase.
"""

import pytest

from clinictriage.application.dto.triage_dto import AddCommentRequest
from clinictriage.application.use_cases.add_comment import AddCommentToPatientUseCase
from clinictriage.domain.entities.user import User
from clinictriage.domain.enums.triage import CommentType, UserRole


@pytest.fixture
def use_case(patient_repository, comment_repository, user_repository):
    return AddCommentToPatientUseCase(patient_repository, comment_repository, user_repository)


@pytest.fixture
async def nurse(user_repository):
    return await user_repository.save(
        User.create(email="nurse@hospital.org", name="Rosa Diaz", role=UserRole.NURSE)
    )


@pytest.mark.asyncio
async def test_comment_is_added(use_case, nurse, patient_repository, comment_repository, make_patient):
    patient = await patient_repository.save_entity(make_patient())

    response = await use_case.execute(
        AddCommentRequest(patient.id, nurse.id, "  Patient reports dizziness  ", "diagnosis")
    )

    assert response.success
    comment = response.comment
    assert comment.content == "Patient reports dizziness"
    assert comment.type == CommentType.DIAGNOSIS
    assert comment.author_name == "Rosa Diaz"
    assert comment.author_role == UserRole.NURSE

    stored = await patient_repository.find_entity_by_id(patient.id)
    assert [c.id for c in stored.comments] == [comment.id]
    assert await comment_repository.count_by_patient_id(patient.id) == 1


@pytest.mark.parametrize(
    "content,comment_type",
    [("ok", "observation"), ("Valid content here", "gossip")],
)
@pytest.mark.asyncio
async def test_invalid_comment(use_case, nurse, patient_repository, make_patient, content, comment_type):
    patient = await patient_repository.save_entity(make_patient())

    response = await use_case.execute(AddCommentRequest(patient.id, nurse.id, content, comment_type))

    assert response.success is False
    assert response.error_code == "INVALID_COMMENT_DATA"
    assert (await patient_repository.find_entity_by_id(patient.id)).comments == []


@pytest.mark.asyncio
async def test_unknown_author_or_patient(use_case, nurse, patient_repository, make_patient):
    patient = await patient_repository.save_entity(make_patient())

    no_author = await use_case.execute(AddCommentRequest(patient.id, "user-ghost", "Looks stable"))
    no_patient = await use_case.execute(AddCommentRequest("patient-ghost", nurse.id, "Looks stable"))

    assert no_author.error_code == "USER_NOT_FOUND"
    assert no_patient.error_code == "PATIENT_NOT_FOUND"
