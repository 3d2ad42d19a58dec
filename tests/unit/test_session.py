from core.models.user import AuthenticatedUser
from core.session import SessionContext


def test_start_persists_user(config):
    session = SessionContext(config)
    session.start(AuthenticatedUser(id="bob@example.com", email="bob@example.com"))

    assert session.is_authenticated
    restored = SessionContext(config).restore()
    assert restored == AuthenticatedUser(id="bob@example.com", email="bob@example.com")


def test_restore_without_slot(config):
    session = SessionContext(config)
    assert session.restore() is None
    assert not session.is_authenticated


def test_clear_removes_slot(config):
    session = SessionContext(config)
    session.start(AuthenticatedUser(id="bob@example.com", email="bob@example.com"))
    session.clear()

    assert session.current_user is None
    assert config.get_session_user_json() is None


def test_corrupt_slot_is_discarded(config):
    config.set_session_user_json("{not json")
    session = SessionContext(config)

    assert session.restore() is None
    assert config.get_session_user_json() is None


def test_slot_with_wrong_shape_is_discarded(config):
    config.set_session_user_json('{"email": "bob@example.com"}')
    assert SessionContext(config).restore() is None
    assert config.get_session_user_json() is None
