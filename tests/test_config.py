import logging

import pytest

from fk_ops.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_INPUT_BYTES,
    CsvOptions,
    EngineSettings,
    PadOptions,
    build_options,
    snake_case_key,
)
from fk_ops.errors import OptionsError
from fk_ops.formats import structured_to_csv
from fk_ops.log import LOGGER_NAME, configure_logger


def test_snake_case_key():
    assert snake_case_key("includeHeaders") == "include_headers"
    assert snake_case_key("fieldPath") == "field_path"
    assert snake_case_key("already_snake") == "already_snake"

def test_build_options_defaults_and_passthrough():
    assert build_options(CsvOptions, None) == CsvOptions()
    opts = CsvOptions(delimiter=";")
    assert build_options(CsvOptions, opts) is opts

def test_build_options_aliases():
    assert build_options(CsvOptions, {"headers": False}).include_headers is False
    assert build_options(CsvOptions, {"csvDelimiter": "|"}).delimiter == "|"
    assert build_options(PadOptions, {"padLength": 4, "padSide": "left"}) == PadOptions(length=4, side="left")

def test_build_options_rejects_unknown_key():
    with pytest.raises(OptionsError) as exc:
        build_options(CsvOptions, {"sheet": 1})
    assert "sheet" in str(exc.value)

def test_engine_settings_from_env():
    settings = EngineSettings.from_env({"FK_LOG_LEVEL": "debug", "FK_MAX_DEPTH": "8"})
    assert settings.log_level == "DEBUG"
    assert settings.max_depth == 8
    assert settings.max_input_bytes == DEFAULT_MAX_INPUT_BYTES

def test_engine_settings_defaults():
    assert EngineSettings.from_env({}) == EngineSettings("INFO", DEFAULT_MAX_DEPTH, DEFAULT_MAX_INPUT_BYTES)

def test_configure_logger_is_idempotent():
    logger = configure_logger()
    count = len(logger.handlers)
    assert configure_logger(logging.DEBUG) is logger
    assert len(logger.handlers) == count
    assert logger.name == LOGGER_NAME

def test_dropped_csv_keys_are_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="fk_ops.formats"):
        structured_to_csv([{"a": 1}, {"a": 2, "b": 3}])
    assert any("outside the header" in r.getMessage() for r in caplog.records)
