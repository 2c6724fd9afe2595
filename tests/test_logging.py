from __future__ import annotations

import logging

from commit_canvas.logging import configure_logging, get_logger, redact


def test_redact_given_token_in_https_url_when_redacted_then_credential_is_masked() -> None:
    # Given
    text = "git push https://ghp_abc123@github.com/octo/canvas.git failed"

    # When
    masked = redact(text)

    # Then
    assert masked == "git push https://***@github.com/octo/canvas.git failed"


def test_redact_given_plain_url_when_redacted_then_text_is_unchanged() -> None:
    # Given / When / Then
    assert redact("see https://github.com/octo/canvas") == "see https://github.com/octo/canvas"


def test_get_logger_given_module_name_when_called_then_logger_is_namespaced() -> None:
    # Given / When / Then
    assert get_logger("publisher").name == "commit_canvas.publisher"
    assert get_logger().name == "commit_canvas"


def test_configure_logging_given_repeated_calls_with_log_file_when_configured_then_handlers_are_replaced(
    tmp_path,
) -> None:
    # Given
    log_file = tmp_path / "logs" / "run.log"

    # When
    configure_logging()
    logger = configure_logging(verbose=True, log_file=log_file)
    get_logger("test").debug("hello file")
    for handler in logger.handlers:
        handler.flush()

    # Then
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert "hello file" in log_file.read_text(encoding="utf-8")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
