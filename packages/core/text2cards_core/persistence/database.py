"""SQLAlchemy-backed generation store."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, Text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from text2cards_core.persistence.base import (
    NOT_FOUND_CODE,
    SESSION_EXPIRED_CODE,
    GenerationStore,
    PersistenceError,
    is_session_expired,
)
from text2cards_core.schemas.generations import (
    GenerationCreate,
    GenerationErrorLogCreate,
    GenerationRecord,
    GenerationStatus,
    GenerationUpdate,
)

# SQLite only autoincrements INTEGER primary keys
_Identity = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Generation(Base):
    """One flashcard generation attempt."""

    __tablename__ = "generations"

    id: Mapped[int] = mapped_column(_Identity, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    model: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    generated_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    accepted_unedited_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    accepted_edited_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    source_text_hash: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True
    )
    source_text_length: Mapped[int] = mapped_column(Integer, nullable=False)
    generation_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=GenerationStatus.PENDING.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class GenerationErrorLog(Base):
    """A failed generation attempt. Rows are never updated."""

    __tablename__ = "generation_error_logs"

    id: Mapped[int] = mapped_column(_Identity, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    model: Mapped[str] = mapped_column(String(255), nullable=False)
    source_text_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    source_text_length: Mapped[int] = mapped_column(Integer, nullable=False)
    error_code: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    error_message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True
    )


def create_session_maker(
    database_url: str,
    echo: bool = False,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create an async engine and its session factory."""
    engine = create_async_engine(database_url, echo=echo)
    return engine, async_sessionmaker(engine, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create the generation tables if they do not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def _translate(error: DBAPIError, action: str) -> PersistenceError:
    """Map a driver error onto the store's error shape."""
    if is_session_expired(error):
        return PersistenceError("JWT expired", code=SESSION_EXPIRED_CODE)
    return PersistenceError(f"Failed to {action}: {error.orig or error}")


class SqlAlchemyGenerationStore(GenerationStore):
    """Generation store on top of an async SQLAlchemy session factory."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def insert(self, generation: GenerationCreate) -> GenerationRecord:
        row = Generation(**generation.model_dump(mode="json"))
        async with self.session_maker() as session:
            try:
                session.add(row)
                await session.commit()
                await session.refresh(row)
            except DBAPIError as e:
                await session.rollback()
                raise _translate(e, "insert generation") from e
        return GenerationRecord.model_validate(row)

    async def update(
        self,
        generation_id: int,
        changes: GenerationUpdate,
    ) -> GenerationRecord:
        async with self.session_maker() as session:
            try:
                row = await session.get(Generation, generation_id)
                if row is None:
                    raise PersistenceError(
                        f"Generation {generation_id} not found", code=NOT_FOUND_CODE
                    )
                for field, value in changes.model_dump(mode="json").items():
                    setattr(row, field, value)
                await session.commit()
                await session.refresh(row)
            except DBAPIError as e:
                await session.rollback()
                raise _translate(e, "update generation") from e
        return GenerationRecord.model_validate(row)

    async def insert_error_log(self, entry: GenerationErrorLogCreate) -> None:
        async with self.session_maker() as session:
            try:
                session.add(GenerationErrorLog(**entry.model_dump(mode="json")))
                await session.commit()
            except DBAPIError as e:
                await session.rollback()
                raise _translate(e, "insert generation error log") from e
