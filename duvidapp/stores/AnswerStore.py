import logging
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from duvidapp.client.RemoteClient import RemoteClient
from duvidapp.exceptions import DuvidAppError, HttpError, PermissionDenied, ValidationError
from duvidapp.models.AnswerModel import Answer, AnswerCreate, AnswerUpdate, set_verification, utcnow
from duvidapp.models.UserModel import User
from duvidapp.models.VoteModel import VoteType
from duvidapp.stores.NotificationCenter import NotificationCenter
from duvidapp.stores.QuestionStore import QuestionStore
from duvidapp.stores.SessionStore import SessionStore
from duvidapp.stores.base import NotifyingStore
from duvidapp.stores.optimistic import run_optimistic

logger = logging.getLogger(__name__)


class AnswerStore(NotifyingStore):
    """Answer operations on top of the question cache.

    Answer lists live on their questions in QuestionStore and are read
    and written only through it, so a refetch is seen by list and
    detail views alike. Writes to an answer that is not cached still go
    to the backend; only the local patch is skipped.
    """

    def __init__(
        self,
        client: RemoteClient,
        session: SessionStore,
        notifications: NotificationCenter,
        questions: QuestionStore,
    ):
        super().__init__(notifications)
        self._client = client
        self._session = session
        self._questions = questions

    def answers_for(self, question_id: str) -> List[Answer]:
        question = self._questions.get_by_id(question_id)
        return list(question.answers) if question is not None else []

    def get_answer(self, answer_id: str) -> Optional[Answer]:
        for question in self._questions.questions:
            for answer in question.answers:
                if answer.id == answer_id:
                    return answer
        return None

    def user_vote(self, answer_id: str) -> Optional[VoteType]:
        user = self._session.user
        answer = self.get_answer(answer_id)
        if user is None or answer is None:
            return None
        return answer.vote_of(user.id)

    def _store(self, question_id: str, answers: List[Answer]) -> None:
        if self._questions.get_by_id(question_id) is not None:
            self._questions.update_question(question_id, answers=answers)
        self._emit()

    def _replace(self, answer: Answer) -> None:
        answers = self.answers_for(answer.questionId)
        self._store(answer.questionId, [answer if a.id == answer.id else a for a in answers])

    def _find(self, answer_id: str) -> Answer:
        answer = self.get_answer(answer_id)
        if answer is None:
            raise HttpError(404, "Resposta não encontrada.")
        return answer

    def _check_owner(self, user: User, answer: Optional[Answer]) -> None:
        # Uncached answers are left to the backend, which answers 403
        if answer is not None and answer.authorId != user.id and not user.is_teacher:
            raise PermissionDenied()

    def _check_verifier(self, user: User, answer: Optional[Answer]) -> None:
        if user.is_teacher or answer is None:
            return
        question = self._questions.get_by_id(answer.questionId)
        if question is None or question.author.id != user.id:
            raise PermissionDenied("Apenas professores ou o autor da dúvida podem verificar respostas.")

    async def fetch_answers(self, question_id: str) -> List[Answer]:
        try:
            self._session.require_user()
            payload = await self._client.get(f"/resposta/{question_id}")
            try:
                answers = [Answer.model_validate(item) for item in payload or []]
            except PydanticValidationError as e:
                raise HttpError(502, "Resposta inválida do servidor.") from e
        except DuvidAppError as e:
            self._fail("fetch_answers", e)
            return self.answers_for(question_id)

        self._store(question_id, answers)
        return answers

    async def add_answer(self, question_id: str, content: str) -> bool:
        try:
            payload = AnswerCreate(questionId=question_id, content=content)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        try:
            self._session.require_user()
            await self._client.post("/resposta", json=payload.to_api())
        except DuvidAppError as e:
            return self._fail("add_answer", e)

        self._succeed("Resposta enviada com sucesso!")
        await self.fetch_answers(question_id)
        return True

    async def update_answer(self, answer_id: str, content: str) -> bool:
        try:
            payload = AnswerUpdate(content=content)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        try:
            user = self._session.require_user()
            answer = self.get_answer(answer_id)
            self._check_owner(user, answer)
            await self._client.put(f"/resposta/{answer_id}", json=payload.model_dump())
        except DuvidAppError as e:
            return self._fail("update_answer", e)

        # Re-read: the cache may have been refetched while the request was in flight
        current = self.get_answer(answer_id)
        if current is not None:
            self._replace(current.model_copy(update={"content": payload.content, "updatedAt": utcnow()}))
        return self._succeed("Resposta atualizada.")

    async def delete_answer(self, answer_id: str) -> bool:
        try:
            user = self._session.require_user()
            self._check_owner(user, self.get_answer(answer_id))
            await self._client.delete(f"/resposta/{answer_id}")
        except DuvidAppError as e:
            return self._fail("delete_answer", e)

        current = self.get_answer(answer_id)
        if current is not None:
            remaining = [a for a in self.answers_for(current.questionId) if a.id != answer_id]
            self._store(current.questionId, remaining)
        return self._succeed("Resposta removida.")

    async def verify_answer(
        self,
        answer_id: str,
        comment: Optional[str] = None,
        is_verified: bool = True,
        is_correct: Optional[bool] = None,
    ) -> bool:
        """Set an answer's verification flags; `is_correct` follows `is_verified` when omitted"""
        body = {"isVerified": is_verified}
        if is_correct is not None:
            body["isCorrect"] = is_correct
        if comment is not None:
            body["comment"] = comment

        try:
            user = self._session.require_user()
            self._check_verifier(user, self.get_answer(answer_id))
            await self._client.patch(f"/resposta/{answer_id}/verify", json=body)
        except DuvidAppError as e:
            return self._fail("verify_answer", e)

        current = self.get_answer(answer_id)
        if current is not None:
            answers = set_verification(
                self.answers_for(current.questionId), answer_id, is_verified, is_correct, comment
            )
            self._store(current.questionId, answers)
        if is_verified:
            return self._succeed("Resposta marcada como correta!")
        return self._succeed("Verificação removida.")

    async def unverify_answer(self, answer_id: str) -> bool:
        return await self.verify_answer(answer_id, is_verified=False)

    async def vote_answer(self, answer_id: str, vote_type: VoteType) -> bool:
        try:
            user = self._session.require_user()
            answer = self._find(answer_id)
        except DuvidAppError as e:
            return self._fail("vote_answer", e)

        action = "like" if vote_type == "up" else "dislike"

        def apply_local():
            self._replace(answer.with_vote(user.id, vote_type))

        def revert_local():
            current = self.get_answer(answer_id)
            if current is not None:
                self._replace(current.model_copy(update={
                    "likes": answer.likes,
                    "dislikes": answer.dislikes,
                }))

        async def commit_remote():
            return await self._client.patch(f"/resposta/{answer_id}/{action}")

        try:
            result = await run_optimistic(apply_local, commit_remote, revert_local)
        except DuvidAppError as e:
            return self._fail(f"{action}_answer", e)

        if result and self.get_answer(answer_id) is not None:
            try:
                self._replace(Answer.model_validate(result))
            except PydanticValidationError:
                logger.warning("Ignoring malformed %s response for answer %s", action, answer_id)
        return True

    async def like_answer(self, answer_id: str) -> bool:
        return await self.vote_answer(answer_id, "up")

    async def dislike_answer(self, answer_id: str) -> bool:
        return await self.vote_answer(answer_id, "down")
