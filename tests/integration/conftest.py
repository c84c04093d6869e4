import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.services.job_queue import InMemoryJobQueue
from src.depends import build_create_subscription
from src.domain.customer import Customer
from src.domain.plan import Plan


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Create in-memory SQLite engine with the full schema"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def job_queue():
    return InMemoryJobQueue()


@pytest_asyncio.fixture
async def use_case(db_session, job_queue):
    """CreateSubscription wired to the test session"""
    return build_create_subscription(db_session, job_queue, tracking_enabled=True)


@pytest_asyncio.fixture
async def customer(db_session):
    customer = Customer(organization_id="org_1", customer_id="cus_1")
    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)
    return customer


@pytest_asyncio.fixture
async def plans(db_session):
    """bronze (arrear, 500), silver (arrear, 1000), gold (advance, 2000), gold_yearly (arrear, 2000)"""
    plans = {
        "bronze": Plan(
            organization_id="org_1", code="bronze", name="Bronze",
            yearly_amount_cents=500, pay_in_advance=False,
        ),
        "silver": Plan(
            organization_id="org_1", code="silver", name="Silver",
            yearly_amount_cents=1000, pay_in_advance=False,
        ),
        "gold": Plan(
            organization_id="org_1", code="gold", name="Gold",
            yearly_amount_cents=2000, pay_in_advance=True,
        ),
        "gold_yearly": Plan(
            organization_id="org_1", code="gold_yearly", name="Gold Yearly",
            yearly_amount_cents=2000, pay_in_advance=False,
        ),
    }
    db_session.add_all(plans.values())
    await db_session.commit()
    for plan in plans.values():
        await db_session.refresh(plan)
    return plans
