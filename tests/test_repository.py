import pytest
from sqlalchemy.exc import IntegrityError

from todo_api.database import init_db, make_engine, make_session_factory
from todo_api.errors import UpdateValuesMissingError
from todo_api.models import Base
from todo_api.repository import TaskRepository


@pytest.fixture
def repo():
    engine = make_engine("sqlite:///:memory:")
    init_db(engine)
    db = make_session_factory(engine)()
    yield TaskRepository(db)
    db.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


def test_create_is_not_persisted(repo):
    record = repo.create(title="Groceries", description="Milk")
    assert record.id is None
    assert repo.find() == []


def test_save_assigns_id(repo):
    saved = repo.save(repo.create(title="Groceries", description="Milk"))
    assert saved.id == 1
    assert saved.is_finished is False
    assert repo.find_one(1) is saved


def test_find_returns_all_in_id_order(repo):
    for title in ("a", "b", "c"):
        repo.save(repo.create(title=title, description=title))
    assert [task.title for task in repo.find()] == ["a", "b", "c"]


def test_find_one_missing(repo):
    assert repo.find_one(42) is None


def test_update_returns_affected_count(repo):
    repo.save(repo.create(title="Groceries", description="Milk"))
    assert repo.update(1, {"is_finished": True}) == 1
    assert repo.update(2, {"is_finished": True}) == 0

    repo.session.expire_all()
    task = repo.find_one(1)
    assert task.is_finished is True
    assert task.title == "Groceries"


def test_update_without_fields(repo):
    repo.save(repo.create(title="Groceries", description="Milk"))
    with pytest.raises(UpdateValuesMissingError):
        repo.update(1, {})


def test_delete_returns_affected_count(repo):
    repo.save(repo.create(title="Groceries", description="Milk"))
    assert repo.delete(1) == 1
    assert repo.delete(1) == 0
    assert repo.find() == []


def test_save_failure_rolls_back(repo):
    with pytest.raises(IntegrityError):
        repo.save(repo.create(title="No description"))
    # Session is usable again after the rollback.
    saved = repo.save(repo.create(title="Groceries", description="Milk"))
    assert saved.id == 1
