import pytest
from pydantic import ValidationError as PydanticValidationError

from duvidapp.exceptions import ValidationError
from duvidapp.models import (
    Answer,
    AnswerCreate,
    Question,
    QuestionCreate,
    User,
    UserCreate,
    UserUpdate,
    Vote,
    apply_vote,
    set_verification,
)


def make_answer(answer_id, **fields):
    return Answer(id=answer_id, questionId='q1', content='Uma resposta qualquer', authorId='u1', **fields)


def test_question_accepts_backend_field_names():
    question = Question.model_validate({
        '_id': '66a1',
        'title': 'Diferença entre let, const e var',
        'content': 'Quando usar cada um?',
        'tags': ['javascript'],
        'viewing': 67,
        'likes': 12,
        'createdAt': '2025-06-30T15:00:00',
    })

    assert question.id == '66a1'
    assert question.views == 67
    assert question.author.name == 'Autor Desconhecido'
    assert question.updatedAt == question.createdAt
    assert question.createdAt.tzinfo is not None


def test_is_resolved_follows_verified_answers():
    question = Question(id='q1', title='t', content='c', answers=[make_answer('a1')])
    assert question.isResolved is False

    resolved = question.model_copy(update={'answers': [make_answer('a1', isVerified=True)]})
    assert resolved.isResolved is True
    assert resolved.model_dump()['isResolved'] is True


def test_author_role_is_mapped_from_backend_vocabulary():
    question = Question(id='q1', title='t', content='c', author={'id': '7', 'name': 'Prof', 'role': 'admin'})
    assert question.author.role == 'teacher'


def test_question_create_normalizes_tags():
    payload = QuestionCreate(
        title='  Como implementar autenticação em React?  ',
        content='Estou tentando implementar um sistema de autenticação.',
        tags=[' React', 'react', 'JavaScript '],
    )
    assert payload.title == 'Como implementar autenticação em React?'
    assert payload.tags == ['react', 'javascript']


@pytest.mark.parametrize('fields,message', [
    ({'title': 'Curto 123'}, 'O título deve ter pelo menos 10 caracteres'),
    ({'content': 'curto'}, 'A descrição deve ter pelo menos 20 caracteres'),
    ({'tags': []}, 'Adicione pelo menos uma tag'),
    ({'tags': ['a', 'b', 'c', 'd', 'e', 'f']}, 'Use no máximo 5 tags'),
])
def test_question_create_rejects_invalid_fields(fields, message):
    data = {
        'title': 'Título válido e longo',
        'content': 'Conteúdo com mais de vinte caracteres',
        'tags': ['python'],
        **fields,
    }
    with pytest.raises(PydanticValidationError) as exc_info:
        QuestionCreate(**data)

    error = ValidationError.from_pydantic(exc_info.value)
    assert error.errors == [message]


def test_answer_create_uses_backend_body():
    payload = AnswerCreate(questionId='q1', content='  Use o hook useContext.  ')
    assert payload.to_api() == {'duvidaId': 'q1', 'content': 'Use o hook useContext.'}

    with pytest.raises(PydanticValidationError):
        AnswerCreate(questionId='q1', content='curta')


def test_answer_vote_toggles():
    answer = make_answer('a1')

    liked = answer.with_vote('u2', 'up')
    assert liked.likes == ['u2'] and liked.votes == 1
    assert liked.vote_of('u2') == 'up'

    switched = liked.with_vote('u2', 'down')
    assert switched.likes == [] and switched.dislikes == ['u2']
    assert switched.votes == -1

    retracted = switched.with_vote('u2', 'down')
    assert retracted.votes == 0
    assert retracted.vote_of('u2') is None
    assert answer.likes == []


def test_verifying_keeps_a_single_correct_answer():
    answers = [
        make_answer('a1', isVerified=True, isCorrect=True),
        make_answer('a2'),
        make_answer('a3'),
    ]

    updated = set_verification(answers, 'a2', comment='Explicação precisa')

    assert [a.isCorrect for a in updated] == [False, True, False]
    assert updated[0].isVerified is True
    assert updated[1].isVerified is True
    assert updated[1].verificationComment == 'Explicação precisa'


def test_apply_vote_toggle_and_replace():
    votes, delta = apply_vote([], 'u1', 'up', question_id='q1')
    assert delta == 1 and len(votes) == 1

    replaced, delta = apply_vote(votes, 'u1', 'down', question_id='q1')
    assert delta == -2
    assert replaced[0].id == votes[0].id and replaced[0].type == 'down'

    removed, delta = apply_vote(replaced, 'u1', 'down', question_id='q1')
    assert delta == 1
    assert removed == []


def test_vote_needs_exactly_one_target():
    with pytest.raises(PydanticValidationError):
        Vote(userId='u1', type='up')
    with pytest.raises(PydanticValidationError):
        Vote(userId='u1', questionId='q1', answerId='a1', type='up')


def test_user_from_claims():
    user = User.from_claims({'sub': 42, 'name': 'Ana', 'email': 'ana@escola.br', 'role': 'admin', 'exp': 1})
    assert user.id == '42'
    assert user.is_teacher


def test_user_create_maps_role_for_backend():
    payload = UserCreate(name='Prof. Carla', email='carla@escola.br', password='segredo', role='teacher')
    assert payload.to_api()['role'] == 'admin'

    with pytest.raises(PydanticValidationError):
        UserCreate(name='Ana', email='ana@escola.br', password='123')


def test_new_password_requires_current_password():
    with pytest.raises(PydanticValidationError):
        UserUpdate(password='novasenha')
    assert UserUpdate(password='novasenha', currentPassword='antiga').password == 'novasenha'


def test_set_verification_can_withdraw():
    answers = [make_answer('a1', isVerified=True, isCorrect=True), make_answer('a2')]

    withdrawn = set_verification(answers, 'a1', is_verified=False)
    assert [(a.isVerified, a.isCorrect) for a in withdrawn] == [(False, False), (False, False)]

    helpful = set_verification(answers, 'a2', is_verified=True, is_correct=False)
    assert [a.isCorrect for a in helpful] == [True, False]
