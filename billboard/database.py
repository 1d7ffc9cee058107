import threading
from collections.abc import Generator
from contextlib import contextmanager
from sqlite3 import Connection as SQLiteConnection

from loguru import logger
from sqlalchemy import (
    ForeignKey,
    LargeBinary,
    String,
    create_engine,
    delete,
    event,
    select,
)
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, mapped_column
from sqlalchemy.pool import ConnectionPoolEntry

from billboard.errors import StoreUnavailableError


class Base(DeclarativeBase):
    pass


class Bucket(Base):
    __tablename__ = "bucket"

    name = mapped_column(String(255), primary_key=True)


class Entry(Base):
    __tablename__ = "entry"

    bucket = mapped_column(
        String(255), ForeignKey("bucket.name", ondelete="CASCADE"), primary_key=True
    )
    key = mapped_column(LargeBinary(), primary_key=True)
    value = mapped_column(LargeBinary(), nullable=False)

    def __repr__(self) -> str:
        return f"Entry({self.bucket=}, {self.key=})"


def _enable_wal(dbapi_connection: SQLiteConnection, _: ConnectionPoolEntry) -> None:
    # Readers get a snapshot and never wait on the writer
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class KeyValueStore:
    """Single-file key-value store, entries grouped into named buckets.

    Keys are ordered by their raw bytes. Writes are serialized inside the
    process, reads run concurrently against a snapshot.
    """

    def __init__(self, path: str, timeout: float = 1.0) -> None:
        self._path = path
        self._write_lock = threading.Lock()
        self._engine = create_engine(
            f"sqlite:///{path}",
            connect_args={"timeout": timeout, "check_same_thread": False},
        )
        event.listen(self._engine, "connect", _enable_wal)
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as error:
            self._engine.dispose()
            raise StoreUnavailableError(path) from error
        logger.info("Opened song store at {}", path)

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        with Session(self._engine) as session:
            try:
                yield session
                session.commit()
            except SQLAlchemyError as error:
                session.rollback()
                raise StoreUnavailableError(self._path) from error

    @contextmanager
    def update(self) -> Generator[Session, None, None]:
        with self._write_lock, self._session() as session:
            yield session

    @contextmanager
    def view(self) -> Generator[Session, None, None]:
        with self._session() as session:
            yield session

    def create_bucket_if_not_exists(self, bucket: str) -> None:
        with self.update() as session:
            session.execute(insert(Bucket).values(name=bucket).on_conflict_do_nothing())

    def reset_bucket(self, bucket: str) -> None:
        with self.update() as session:
            session.execute(delete(Entry).where(Entry.bucket == bucket))
            session.execute(delete(Bucket).where(Bucket.name == bucket))
            session.execute(insert(Bucket).values(name=bucket))

    def put(self, bucket: str, key: bytes, value: bytes) -> None:
        with self.update() as session:
            session.execute(insert(Bucket).values(name=bucket).on_conflict_do_nothing())
            upsert = insert(Entry).values(bucket=bucket, key=key, value=value)
            session.execute(
                upsert.on_conflict_do_update(
                    index_elements=["bucket", "key"],
                    set_={"value": upsert.excluded.value},
                )
            )

    def items(self, bucket: str) -> list[tuple[bytes, bytes]]:
        with self.view() as session:
            rows = session.execute(
                select(Entry.key, Entry.value)
                .where(Entry.bucket == bucket)
                .order_by(Entry.key)
            )
            return [(key, value) for key, value in rows]

    def close(self) -> None:
        self._engine.dispose()
