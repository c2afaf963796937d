"""
Local cache of questions mirrored from the backend.

The cache is only ever replaced by a successful refetch or patched by
this store's own mutators; list_questions() derives the visible list
from (cache, filters) on every call.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from duvidapp.client.RemoteClient import RemoteClient
from duvidapp.exceptions import DuvidAppError, HttpError, PermissionDenied, ValidationError
from duvidapp.models.AnswerModel import Answer, utcnow
from duvidapp.models.QuestionModel import Question, QuestionCreate, QuestionFilters
from duvidapp.models.VoteModel import Vote, VoteType, apply_vote
from duvidapp.stores.NotificationCenter import NotificationCenter
from duvidapp.stores.SessionStore import SessionStore
from duvidapp.stores.base import NotifyingStore
from duvidapp.stores.filtering import apply_filters, tag_counts
from duvidapp.stores.optimistic import run_optimistic

logger = logging.getLogger(__name__)


class QuestionStore(NotifyingStore):
    def __init__(self, client: RemoteClient, session: SessionStore, notifications: NotificationCenter):
        super().__init__(notifications)
        self._client = client
        self._session = session
        self._questions: List[Question] = []
        self._votes: List[Vote] = []
        self._filters = QuestionFilters()
        self.is_loading = False

    @property
    def questions(self) -> List[Question]:
        """The whole cache, unfiltered"""
        return list(self._questions)

    @property
    def votes(self) -> List[Vote]:
        return list(self._votes)

    @property
    def filters(self) -> QuestionFilters:
        return self._filters

    def list_questions(self) -> List[Question]:
        return apply_filters(self._questions, self._filters)

    def set_filters(self, **changes) -> QuestionFilters:
        data = self._filters.model_dump()
        data.update(changes)
        self._filters = QuestionFilters.model_validate(data)
        self._emit()
        return self._filters

    def clear_filters(self) -> None:
        self._filters = QuestionFilters()
        self._emit()

    def get_by_id(self, question_id: str) -> Optional[Question]:
        return next((q for q in self._questions if q.id == question_id), None)

    def tag_counts(self) -> List[Tuple[str, int]]:
        return tag_counts(self._questions)

    def user_vote(self, question_id: str) -> Optional[Vote]:
        user = self._session.user
        if user is None:
            return None
        return next((v for v in self._votes if v.questionId == question_id and v.userId == user.id), None)

    # Local writes

    def _replace(self, question: Question) -> None:
        self._questions = [question if q.id == question.id else q for q in self._questions]
        self._emit()

    def update_question(self, question_id: str, **fields) -> Optional[Question]:
        """Merge fields into the cached question and bump updatedAt; no network write"""
        unknown = set(fields) - set(Question.model_fields)
        if unknown:
            raise TypeError(f"Unknown question fields: {', '.join(sorted(unknown))}")
        question = self.get_by_id(question_id)
        if question is None:
            return None
        updated = question.model_copy(update={**fields, "updatedAt": utcnow()})
        self._replace(updated)
        return updated

    def increment_views(self, question_id: str) -> Optional[Question]:
        question = self.get_by_id(question_id)
        if question is None:
            return None
        return self.update_question(question_id, views=question.views + 1)

    # Network

    async def _load_answers(self, question_id: str) -> List[Answer]:
        try:
            payload = await self._client.get(f"/resposta/{question_id}")
            return [Answer.model_validate(item) for item in payload or []]
        except (DuvidAppError, PydanticValidationError) as e:
            # One broken answer list must not sink the whole refetch
            logger.warning("Loading answers for question %s failed: %s", question_id, e)
            return []

    async def refetch(self) -> bool:
        self.is_loading = True
        self._emit()
        try:
            self._session.require_user()
            payload = await self._client.get("/duvida")
            try:
                questions = [Question.model_validate(item) for item in payload or []]
            except PydanticValidationError as e:
                raise HttpError(502, "Resposta inválida do servidor.") from e

            answer_lists = await asyncio.gather(*(self._load_answers(q.id) for q in questions))
            self._questions = [
                q.model_copy(update={"answers": answers})
                for q, answers in zip(questions, answer_lists)
            ]
            logger.info("Loaded %d questions", len(self._questions))
            return True
        except DuvidAppError as e:
            # Stale data is worse than none
            self._questions = []
            return self._fail("refetch", e)
        finally:
            self.is_loading = False
            self._emit()

    async def add_question(self, title: str, content: str, tags: List[str]) -> bool:
        try:
            payload = QuestionCreate(title=title, content=content, tags=tags)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        try:
            self._session.require_user()
            await self._client.post("/duvida", json=payload.model_dump())
        except DuvidAppError as e:
            return self._fail("add_question", e)

        self._succeed("Dúvida publicada com sucesso!")
        await self.refetch()
        return True

    async def delete_question(self, question_id: str) -> bool:
        try:
            user = self._session.require_user()
            question = self.get_by_id(question_id)
            if question is not None and question.author.id != user.id and not user.is_teacher:
                raise PermissionDenied()
            await self._client.delete(f"/duvida/{question_id}")
        except DuvidAppError as e:
            return self._fail("delete_question", e)

        self._questions = [q for q in self._questions if q.id != question_id]
        self._votes = [v for v in self._votes if v.questionId != question_id]
        self._emit()
        return self._succeed("Dúvida removida.")

    async def vote(self, question_id: str, vote_type: VoteType = "up") -> bool:
        try:
            user = self._session.require_user()
            question = self.get_by_id(question_id)
            if question is None:
                raise HttpError(404, "Dúvida não encontrada.")
        except DuvidAppError as e:
            return self._fail("vote", e)

        previous_votes = self._votes
        previous_likes = question.likes
        previous_updated_at = question.updatedAt
        pending = {}

        def apply_local():
            self._votes, delta = apply_vote(previous_votes, user.id, vote_type, question_id=question_id)
            pending["likes"] = previous_likes + delta
            self.update_question(question_id, likes=pending["likes"])

        def revert_local():
            self._votes = previous_votes
            current = self.get_by_id(question_id)
            if current is not None:
                self._replace(current.model_copy(update={
                    "likes": previous_likes,
                    "updatedAt": previous_updated_at,
                }))

        async def commit_remote():
            return await self._client.put(f"/duvida/{question_id}", json={"likes": pending["likes"]})

        try:
            await run_optimistic(apply_local, commit_remote, revert_local)
        except DuvidAppError as e:
            return self._fail("vote", e)
        return True
