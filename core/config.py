import configparser
import logging

log = logging.getLogger("pdfpara.config")

# One section per pipeline stage; values are kept as strings like the INI file.
DEFAULT_SETTINGS = {
    "Merge": {
        "precision": "1",
    },
    "Truncate": {
        "enabled": "true",
        "heading_pattern": r"(r?eferences?|acknowledgements?|bibliography)$",
        "min_depth": "0.9",
    },
    "Dedup": {
        "enabled": "true",
        "margin": "0.2",
        "max_interior_repeats": "3",
        "max_pages": "",
        "workers": "1",
    },
    "Segment": {
        "min_lines": "5",
        "gap_factor": "2.0",
        "keyword_pattern": "abstract",
    },
    "Assemble": {
        "heading_break": "append",
    },
}


class ConfigService:
    """Loads and stores pipeline settings in an INI file (pdfpara.cfg)."""

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.defaults = DEFAULT_SETTINGS

    def _new_parser(self):
        return configparser.ConfigParser(interpolation=None)

    def get_settings(self) -> dict:
        """Returns the settings of the file layered over the defaults.

        A missing file is created holding the defaults.
        """
        parser = self._new_parser()
        parser.read_dict(self.defaults)
        if not parser.read(self.config_path):
            log.info("No config at %s, writing defaults.", self.config_path)
            self.save_settings(self.defaults)
        settings = {s: dict(parser.items(s)) for s in parser.sections()}
        self._warn_unknown(settings)
        return settings

    def save_settings(self, settings: dict):
        parser = self._new_parser()
        parser.read_dict(
            {section: {k: str(v) for k, v in values.items()} for section, values in settings.items()}
        )
        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                parser.write(f)
        except OSError as e:
            log.error("Could not save settings to %s: %s", self.config_path, e)
            return
        log.info("Saved settings to %s", self.config_path)

    def _warn_unknown(self, settings):
        for section, values in settings.items():
            known = self.defaults.get(section)
            if known is None:
                log.warning("Ignoring unknown config section [%s].", section)
                continue
            for key in values.keys() - known.keys():
                log.warning("Ignoring unknown option '%s' in [%s].", key, section)
