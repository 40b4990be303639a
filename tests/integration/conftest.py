import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import cable_iam.domain.entities  # noqa: F401
from cable_iam.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from cable_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from cable_iam.depends import get_mail_sender, get_password_hasher, get_unit_of_work
from cable_iam.domain.entities import GlobalRole, Site, SiteMembership, SiteRole, User
from cable_iam.libs.result import Return

PASSWORD = "Str0ng!Pass"

# Low cost keeps the suite fast; production uses BCRYPT_ROUNDS
hasher = BcryptPasswordHasher(rounds=4)


class RecordingMailSender:
    def __init__(self):
        self.sent = []

    async def send(self, to, subject, body):
        self.sent.append((to, subject, body))
        return Return.ok(None)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mailbox():
    return RecordingMailSender()


@pytest_asyncio.fixture
async def client(session_factory, mailbox):
    from cable_iam.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_mail_sender] = lambda: mailbox

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def seed(db_session):
    """
    Two sites and four users:

    admin  - GLOBAL_ADMIN, no memberships
    alice  - SITE_ADMIN of site 1
    bob    - SITE_USER of site 1 and site 2
    carol  - SITE_USER of site 2
    """
    db_session.add_all([Site(id=1, name="Plant A", code="A"), Site(id=2, name="Plant B", code="B")])

    users = {}
    for name, role in [
        ("admin", GlobalRole.GLOBAL_ADMIN),
        ("alice", GlobalRole.USER),
        ("bob", GlobalRole.USER),
        ("carol", GlobalRole.USER),
    ]:
        user = User(
            email=f"{name}@example.com",
            username=name,
            password_hash=hasher.hash(PASSWORD),
            global_role=role,
        )
        db_session.add(user)
        users[name] = user
    await db_session.flush()

    db_session.add_all(
        [
            SiteMembership(site_id=1, user_id=users["alice"].id, site_role=SiteRole.SITE_ADMIN),
            SiteMembership(site_id=1, user_id=users["bob"].id, site_role=SiteRole.SITE_USER),
            SiteMembership(site_id=2, user_id=users["bob"].id, site_role=SiteRole.SITE_USER),
            SiteMembership(site_id=2, user_id=users["carol"].id, site_role=SiteRole.SITE_USER),
        ]
    )
    await db_session.commit()
    return {name: user.id for name, user in users.items()}


@pytest_asyncio.fixture
async def login(client):
    async def _login(name: str, password: str = PASSWORD) -> dict:
        response = await client.post(
            "/auth/login", json={"email": f"{name}@example.com", "password": password}
        )
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
