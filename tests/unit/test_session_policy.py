from talentdesk.client.session import ClientState, SessionUser, StoragePolicy


def test_password_user_is_remote_backed() -> None:
    user = SessionUser.from_login({"id": "65f1c0ffee0000000000beef", "email": "Admin@Example.com", "token": "t"})
    assert user.email == "admin@example.com"
    assert not user.is_demo
    assert StoragePolicy.for_user(user).remote_backed


def test_google_and_demo_users_are_local_backed() -> None:
    google = SessionUser.from_login({"id": "1", "email": "g@example.com", "is_google_user": True})
    by_provider = SessionUser.from_login({"id": "2", "email": "p@example.com"}, provider="google")
    demo = SessionUser.from_login({"id": "3", "email": "demo@example.com"})
    demo_like = SessionUser.from_login({"id": "4", "email": "sales-demo@example.com"})
    for user in (google, by_provider, demo, demo_like):
        assert StoragePolicy.for_user(user).local_backed


def test_signed_out_state_is_remote_backed() -> None:
    state = ClientState()
    assert state.user_id == ""
    assert state.policy().backing == "remote"


def test_session_user_survives_dict_round_trip() -> None:
    user = SessionUser.from_login({"id": 42, "name": "Ada", "email": "demo@example.com", "token": "abc"})
    restored = SessionUser.from_dict(user.to_dict())
    assert restored == user
    assert restored.id == "42"
    assert ClientState(user=restored).policy().local_backed
