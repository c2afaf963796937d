"""Filtered and sorted projections of the question cache."""

from typing import Iterable, List, Tuple

from duvidapp.models.QuestionModel import Question, QuestionFilters


def matches_search(question: Question, term: str) -> bool:
    # Plain substring match; surrounding spaces are part of the term
    term = term.casefold()
    if not term:
        return True
    return term in question.title.casefold() or term in question.content.casefold()


def matches_tags(question: Question, tags: Iterable[str]) -> bool:
    # ANY-match: one shared tag is enough
    wanted = {tag.casefold() for tag in tags}
    if not wanted:
        return True
    return any(tag.casefold() in wanted for tag in question.tags)


def matches_status(question: Question, status: str) -> bool:
    if status == "resolved":
        return question.isResolved
    if status == "unresolved":
        return not question.isResolved
    return True


def sort_questions(questions: List[Question], sort_by: str) -> List[Question]:
    # sorted() is stable, ties keep their input order in both directions
    if sort_by == "oldest":
        return sorted(questions, key=lambda q: q.createdAt)
    if sort_by == "mostViewed":
        return sorted(questions, key=lambda q: q.views, reverse=True)
    if sort_by == "mostAnswered":
        return sorted(questions, key=lambda q: q.answer_count, reverse=True)
    return sorted(questions, key=lambda q: q.createdAt, reverse=True)


def apply_filters(questions: Iterable[Question], filters: QuestionFilters) -> List[Question]:
    filtered = [
        q for q in questions
        if matches_search(q, filters.searchTerm)
        and matches_tags(q, filters.tags)
        and matches_status(q, filters.status)
        and (filters.authorId is None or q.author.id == filters.authorId)
    ]
    return sort_questions(filtered, filters.sortBy)


def tag_counts(questions: Iterable[Question]) -> List[Tuple[str, int]]:
    counts = {}
    for question in questions:
        for tag in question.tags:
            counts[tag] = counts.get(tag, 0) + 1
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)
