"""Basic smoke tests for the service scaffolding."""

def test_imports():
    import analysis  # noqa: F401
    import api_server  # noqa: F401
    from config.settings import settings

    assert settings.DB_PATH.endswith(".db")


def test_event_human_line():
    from observability.logger import _format_human

    line = _format_human({"kind": "session.persisted", "session_id": "s-1", "user_id": "alice", "ms": 12, "ts": 1.0})

    assert line == "session=s-1 kind=session.persisted user_id=alice ms=12"


def test_log_event_does_not_raise():
    from observability import log_event

    log_event("session.deleted", "s-1", user_id="alice")
