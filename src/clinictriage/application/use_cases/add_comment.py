"""Add Comment use case."""

from typing import Optional

from ...core.structured_logger import StructuredLogger, get_logger
from ...domain.entities.patient_comment import PatientComment
from ...domain.enums.triage import CommentType
from ...domain.errors import (
    CommentValidationError,
    DomainError,
    PatientNotFoundError,
    UserNotFoundError,
)
from ..dto.triage_dto import AddCommentRequest, AddCommentResponse
from ..ports.repositories.comment_repo import PatientCommentRepository
from ..ports.repositories.patient_repo import PatientRepository
from ..ports.repositories.user_repo import UserRepository


class AddCommentToPatientUseCase:
    """Use case for adding a clinical comment to a patient."""

    def __init__(
        self,
        patient_repository: PatientRepository,
        comment_repository: PatientCommentRepository,
        user_repository: UserRepository,
        logger: Optional[StructuredLogger] = None,
    ):
        self._patient_repository = patient_repository
        self._comment_repository = comment_repository
        self._user_repository = user_repository
        self._logger = logger or get_logger(__name__)

    async def execute(self, request: AddCommentRequest) -> AddCommentResponse:
        try:
            comment_type = self._parse_type(request.type)
            if not request.author_id:
                raise CommentValidationError("Author ID is required", "author_id", request.author_id)

            patient = await self._patient_repository.find_entity_by_id(request.patient_id)
            if patient is None:
                raise PatientNotFoundError(request.patient_id)

            author = await self._user_repository.find_by_id(request.author_id)
            if author is None:
                raise UserNotFoundError(request.author_id)

            comment = PatientComment.create(
                patient_id=patient.id,
                author_id=author.id,
                author_name=author.name,
                author_role=author.role,
                content=request.content,
                type=comment_type,
            )
            patient.add_comment(comment)

            comment = await self._comment_repository.save(comment)
            await self._patient_repository.save_entity(patient)
        except DomainError as exc:
            self._logger.warning(
                "Adding comment failed", patient_id=request.patient_id, error=exc.message
            )
            return AddCommentResponse.failure(exc)
        except Exception as exc:
            self._logger.exception("Unexpected error adding comment", patient_id=request.patient_id)
            return AddCommentResponse.failure(exc)

        self._logger.info(
            "Comment added",
            patient_id=patient.id,
            comment_id=comment.id,
            author_id=comment.author_id,
            type=comment.type.value,
        )
        return AddCommentResponse(success=True, comment=comment, message="Comment added")

    @staticmethod
    def _parse_type(value: str) -> CommentType:
        try:
            return CommentType(value)
        except ValueError:
            raise CommentValidationError(f"Invalid comment type: {value}", "type", value) from None
