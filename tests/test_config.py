import logging

from rich.console import Console

from pdf_raster.engine.config import ExtractionOptions
from pdf_raster.logging_config import configure_logging


def test_defaults():
    options = ExtractionOptions.default()
    assert options.enabled
    assert not options.strict
    assert options.include_pixels
    assert options.max_image_pixels is None
    assert options.validate()


def test_dict_round_trip():
    options = ExtractionOptions(strict=True, max_image_pixels=100)
    assert ExtractionOptions.from_dict(options.to_dict()) == options


def test_unknown_keys_are_ignored(caplog):
    with caplog.at_level(logging.WARNING):
        options = ExtractionOptions.from_dict({'strict': True, 'dpi': 300})
    assert options.strict
    assert "Unknown config key 'dpi'" in caplog.text


def test_invalid_pixel_limit():
    assert not ExtractionOptions(max_image_pixels=0).validate()


def test_configure_logging(monkeypatch):
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    package_logger = logging.getLogger("pdf_raster")
    saved_package_level = package_logger.level
    monkeypatch.setenv("LOG_LEVEL", "debug")
    try:
        console = configure_logging(force_terminal=False)
        assert isinstance(console, Console)
        assert package_logger.level == logging.DEBUG
        assert root.level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        package_logger.setLevel(saved_package_level)
