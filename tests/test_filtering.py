from duvidapp.models import QuestionFilters
from duvidapp.stores.filtering import apply_filters, tag_counts


def ids(questions):
    return [q.id for q in questions]


def test_search_matches_title_case_insensitively(make_question):
    questions = [make_question(title='Como implementar autenticação em React?')]

    assert ids(apply_filters(questions, QuestionFilters(searchTerm='react'))) == ['1']
    assert apply_filters(questions, QuestionFilters(searchTerm='zzz-no-match')) == []


def test_search_matches_content(make_question):
    questions = [
        make_question(title='Dúvida sobre hooks', content='Uso o useEffect com Context API'),
        make_question(title='Outra dúvida qualquer', content='Nada relacionado'),
    ]
    assert ids(apply_filters(questions, QuestionFilters(searchTerm='CONTEXT'))) == ['1']


def test_tags_use_any_match(make_question):
    questions = [
        make_question(tags=['react', 'javascript']),
        make_question(tags=['python']),
        make_question(tags=['javascript', 'fundamentos']),
    ]

    filtered = apply_filters(questions, QuestionFilters(tags=['react', 'fundamentos'], sortBy='oldest'))
    assert ids(filtered) == ['1', '3']
    assert len(apply_filters(questions, QuestionFilters(tags=[]))) == 3


def test_status_filter(make_question):
    questions = [
        make_question(answers=1, verified=True),
        make_question(answers=2),
        make_question(),
    ]

    resolved = apply_filters(questions, QuestionFilters(status='resolved', sortBy='oldest'))
    unresolved = apply_filters(questions, QuestionFilters(status='unresolved', sortBy='oldest'))
    assert ids(resolved) == ['1']
    assert ids(unresolved) == ['2', '3']


def test_author_filter(make_question):
    questions = [make_question(author_id='1'), make_question(author_id='2')]
    assert ids(apply_filters(questions, QuestionFilters(authorId='2'))) == ['2']


def test_most_answered_order(make_question):
    questions = [make_question(answers=0), make_question(answers=3), make_question(answers=1)]

    ordered = apply_filters(questions, QuestionFilters(sortBy='mostAnswered'))
    assert [q.answer_count for q in ordered] == [3, 1, 0]


def test_date_and_views_ordering(make_question):
    questions = [
        make_question(created_offset=2, views=10),
        make_question(created_offset=1, views=45),
        make_question(created_offset=3, views=5),
    ]

    assert ids(apply_filters(questions, QuestionFilters(sortBy='newest'))) == ['3', '1', '2']
    assert ids(apply_filters(questions, QuestionFilters(sortBy='oldest'))) == ['2', '1', '3']
    assert ids(apply_filters(questions, QuestionFilters(sortBy='mostViewed'))) == ['2', '1', '3']


def test_ties_keep_input_order(make_question):
    questions = [make_question(views=5), make_question(views=9), make_question(views=5), make_question(views=5)]

    ordered = apply_filters(questions, QuestionFilters(sortBy='mostViewed'))
    assert ids(ordered) == ['2', '1', '3', '4']


def test_filtering_is_pure(make_question):
    questions = [make_question(tags=['react'], answers=2), make_question(tags=['python'])]
    filters = QuestionFilters(tags=['react'], searchTerm='pergunta')
    snapshot = [q.model_dump() for q in questions]

    first = apply_filters(questions, filters)
    second = apply_filters(questions, filters)

    assert [q.model_dump() for q in first] == [q.model_dump() for q in second]
    assert [q.model_dump() for q in questions] == snapshot


def test_tag_counts(make_question):
    questions = [
        make_question(tags=['javascript', 'react']),
        make_question(tags=['javascript']),
        make_question(tags=['python']),
    ]
    assert tag_counts(questions) == [('javascript', 2), ('react', 1), ('python', 1)]


def test_search_is_a_plain_substring(make_question):
    questions = [make_question(title='Como implementar autenticação em React?')]

    assert apply_filters(questions, QuestionFilters(searchTerm='react ')) == []
    assert ids(apply_filters(questions, QuestionFilters(searchTerm='em react'))) == ['1']
