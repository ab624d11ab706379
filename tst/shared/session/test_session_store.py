import pytest
from starlette.requests import Request

from leadrelay.shared.config.settings import Settings
from leadrelay.shared.session.database import SqlSessionStore
from leadrelay.shared.session.dependencies import build_session_store, get_session_id, SESSION_ID_KEY
from leadrelay.shared.session.store import InMemorySessionStore


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    if request.param == "memory":
        return InMemorySessionStore()
    return SqlSessionStore("sqlite://")


def test_unknown_session_has_no_timestamp(any_store):
    assert any_store.get_last_submission("missing") is None


def test_record_and_overwrite(any_store):
    any_store.record_submission("sid", 1000.0)
    assert any_store.get_last_submission("sid") == 1000.0

    any_store.record_submission("sid", 1042.5)
    assert any_store.get_last_submission("sid") == 1042.5


def test_sessions_do_not_share_slots(any_store):
    any_store.record_submission("first", 1000.0)

    assert any_store.get_last_submission("second") is None


def test_sql_store_survives_new_store_on_same_database(tmp_path):
    url = f"sqlite:///{tmp_path / 'sessions.db'}"
    SqlSessionStore(url).record_submission("sid", 1000.0)

    assert SqlSessionStore(url).get_last_submission("sid") == 1000.0


def test_build_session_store_selection():
    assert isinstance(build_session_store(Settings(bot_token="t", chat_id="1")), InMemorySessionStore)
    sql = build_session_store(Settings(bot_token="t", chat_id="1", session_store_url="sqlite://"))
    assert isinstance(sql, SqlSessionStore)


def test_session_id_is_created_once():
    request = Request({"type": "http", "session": {}})

    session_id = get_session_id(request)

    assert session_id
    assert request.session[SESSION_ID_KEY] == session_id
    assert get_session_id(request) == session_id
