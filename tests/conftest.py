"""
DuvidApp - Test Configuration and Fixtures
"""
import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, List, Optional

# Set testing environment
os.environ['DUVIDAPP_SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['DUVIDAPP_MONGO_URL'] = ''
os.environ['DUVIDAPP_TOAST_DURATION'] = '5'

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from duvidapp.app import DuvidApp
from duvidapp.client import MemoryTokenStorage, RemoteClient
from duvidapp.config.database import reset_database
from duvidapp.main import app as backend_app
from duvidapp.models import Answer, Question

PASSWORD = 'segredo123'


class FlakyTransport(httpx.AsyncBaseTransport):
    """Forwards to the in-process backend, failing the requests a test asks for"""

    def __init__(self, inner: httpx.AsyncBaseTransport):
        self.inner = inner
        self.failures = {}
        self.requests: List[httpx.Request] = []

    def fail(self, method: str, path_fragment: str, outcome='network'):
        self.failures[(method, path_fragment)] = outcome

    def heal(self):
        self.failures.clear()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (method, fragment), outcome in self.failures.items():
            if request.method == method and fragment in request.url.path:
                if outcome == 'network':
                    raise httpx.ConnectError('simulated outage', request=request)
                return httpx.Response(outcome, json={'statusCode': outcome, 'message': 'Falha simulada'})
        return await self.inner.handle_async_request(request)

    def count(self, method: str, path_fragment: str = '') -> int:
        return sum(1 for r in self.requests if r.method == method and path_fragment in r.url.path)


@pytest.fixture(autouse=True)
def clean_database():
    """Every test starts from an empty development database"""
    reset_database()
    yield
    reset_database()


@pytest.fixture
async def api() -> AsyncGenerator[AsyncClient, None]:
    """Raw HTTP client on the development backend"""
    transport = ASGITransport(app=backend_app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


@pytest.fixture
def transport() -> FlakyTransport:
    return FlakyTransport(ASGITransport(app=backend_app))


@pytest.fixture
async def duvidapp(transport) -> AsyncGenerator[DuvidApp, None]:
    """Fully wired stores talking to the in-process backend"""
    client = RemoteClient(base_url='http://test', transport=transport)
    app = DuvidApp(client=client, storage=MemoryTokenStorage())
    yield app
    await app.aclose()


@pytest.fixture
async def second_app(transport) -> AsyncGenerator[DuvidApp, None]:
    """Another user's client, sharing the same backend"""
    client = RemoteClient(base_url='http://test', transport=transport)
    app = DuvidApp(client=client, storage=MemoryTokenStorage())
    yield app
    await app.aclose()


async def register(api: AsyncClient, name: str, email: str, role: str = 'user') -> dict:
    response = await api.post('/auth/register', json={
        'name': name, 'email': email, 'password': PASSWORD, 'role': role,
    })
    assert response.status_code == 201, response.text
    return response.json()


async def auth_headers(api: AsyncClient, email: str) -> dict:
    response = await api.post('/auth/login', json={'email': email, 'password': PASSWORD})
    assert response.status_code == 200, response.text
    return {'Authorization': f"Bearer {response.json()['access_token']}"}


async def sign_in(app: DuvidApp, api: AsyncClient, name: str, email: str, role: str = 'user') -> None:
    await register(api, name, email, role)
    assert await app.session.login(email, PASSWORD)


async def post_question(api: AsyncClient, headers: dict, title: str, tags: Optional[List[str]] = None) -> dict:
    response = await api.post('/duvida', headers=headers, json={
        'title': title,
        'content': 'Descrição detalhada da dúvida para a turma.',
        'tags': tags or ['python'],
    })
    assert response.status_code == 201, response.text
    return response.json()


async def post_answer(api: AsyncClient, headers: dict, question_id: str, content: str) -> dict:
    response = await api.post('/resposta', headers=headers, json={'duvidaId': question_id, 'content': content})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def make_question():
    """Build cached questions without a backend"""
    start = datetime(2025, 7, 1, 10, 0, tzinfo=timezone.utc)
    counter = {'n': 0}

    def _make(title='Pergunta sem título definido', content='Conteúdo da pergunta', tags=None,
              answers=0, verified=False, views=0, author_id='1', created_offset=None, **extra):
        counter['n'] += 1
        n = counter['n']
        question_id = extra.pop('id', str(n))
        answer_list = [
            Answer(
                id=f'{question_id}-a{i}',
                questionId=question_id,
                content='Resposta de exemplo suficiente',
                authorId='9',
                isVerified=verified and i == 0,
                isCorrect=verified and i == 0,
            )
            for i in range(answers)
        ]
        offset = created_offset if created_offset is not None else n
        return Question(
            id=question_id,
            title=title,
            content=content,
            tags=tags or [],
            author={'id': author_id, 'name': f'Autor {author_id}'},
            createdAt=start + timedelta(hours=offset),
            views=views,
            answers=answer_list,
            **extra,
        )

    return _make
