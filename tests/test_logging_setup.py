# tests/test_logging_setup.py

import logging

from taskman_app.core.logging_setup import qt_message_handler, setup_logging


def test_setup_logging_replaces_handlers(tmp_path) -> None:
    root = logging.getLogger()
    saved = list(root.handlers)
    try:
        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path)
        assert len(root.handlers) == 2
        assert (tmp_path / "taskman.log").exists()
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved:
            root.addHandler(handler)


def test_qt_messages_are_routed_to_logging(caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="qt"):
        qt_message_handler(None, None, "ffmpeg backend loaded")
    assert [r.getMessage() for r in caplog.records if r.name == "qt"] == ["ffmpeg backend loaded"]
