import configparser
import logging

from core.config import ConfigService
from pdfpara_lib.pipeline import PipelineOptions


def test_missing_file_is_created_with_defaults(tmp_path):
    path = tmp_path / "pdfpara.cfg"
    settings = ConfigService(str(path)).get_settings()

    assert path.exists()
    assert settings["Dedup"]["margin"] == "0.2"
    assert settings["Assemble"]["heading_break"] == "append"

    written = configparser.ConfigParser(interpolation=None)
    written.read(path)
    assert written["Truncate"]["heading_pattern"] == (
        r"(r?eferences?|acknowledgements?|bibliography)$"
    )


def test_file_values_override_defaults(tmp_path):
    path = tmp_path / "pdfpara.cfg"
    path.write_text("[Dedup]\nenabled = no\nmax_pages = 4\n\n[Segment]\nmin_lines = 3\n")

    settings = ConfigService(str(path)).get_settings()
    options = PipelineOptions.from_settings(settings)

    assert options.dedup is False
    assert options.max_pages == 4
    assert options.min_lines == 3
    assert options.margin == 0.2


def test_save_settings_round_trips(tmp_path):
    path = tmp_path / "pdfpara.cfg"
    service = ConfigService(str(path))
    settings = service.get_settings()
    settings["Assemble"]["heading_break"] = "replace"
    service.save_settings(settings)

    assert ConfigService(str(path)).get_settings()["Assemble"]["heading_break"] == "replace"


def test_unknown_options_are_reported(tmp_path, caplog):
    path = tmp_path / "pdfpara.cfg"
    path.write_text("[Dedup]\nmargins = 0.1\n\n[Render]\ndpi = 300\n")

    with caplog.at_level(logging.WARNING, logger="pdfpara.config"):
        ConfigService(str(path)).get_settings()

    assert "unknown option 'margins' in [Dedup]" in caplog.text
    assert "unknown config section [Render]" in caplog.text
