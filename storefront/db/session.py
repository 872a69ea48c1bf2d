from sqlalchemy import event
from sqlmodel import SQLModel, create_engine, Session
from storefront.core.config import settings

def _enable_sqlite_savepoints(engine) -> None:
    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; let SQLAlchemy emit it
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

def build_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        # check_same_thread is needed for SQLite, remove for PostgreSQL
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, **kwargs)
        _enable_sqlite_savepoints(engine)
        return engine
    return create_engine(url, **kwargs)

engine = build_engine(settings.DATABASE_URL)

def get_session():
    with Session(engine) as session:
        yield session

def create_db_and_tables(bind=None):
    # Models must be imported so their tables are registered on the metadata
    import storefront.models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)
