import pytest

from chatnet.user import User, UserManager


def test_user_defaults():
    user = User(5)
    assert user.session_id == 5
    assert user.user_id == 0
    assert user.nick_name == ""
    assert (user.win_count, user.lose_count) == (0, 0)


def test_user_fields_are_kept():
    user = User(1, user_id=2, nick_name="alice", win_count=3, lose_count=4)
    assert user == User(1, 2, "alice", 3, 4)


def test_user_manager_starts_empty():
    manager = UserManager(30)
    assert manager.max_sessions == 30
    assert manager.users == {}
    assert manager.user_to_session == {}


def test_user_manager_rejects_negative_size():
    with pytest.raises(ValueError):
        UserManager(-1)