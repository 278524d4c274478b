"""Localized strings loaded from bundled JSON files."""
import json
import logging

from .config import settings
from .errors import MissingResourceError, ResourceError

logger = logging.getLogger(__name__)


class ResourceBundle:
    """
    Key/value strings for one locale. `<base>.json` holds the defaults,
    `<base>_<lang>.json` (if present) overrides them.
    """

    def __init__(self, base_name, locale, strings):
        self.base_name = base_name
        self.locale = locale
        self._strings = strings

    @classmethod
    def get_bundle(cls, base_name, locale=None, resource_dir=None):
        resource_dir = resource_dir or settings.RESOURCE_DIR
        locale = locale or settings.LOCALE
        default_file = resource_dir / f"{base_name}.json"
        if not default_file.exists():
            raise ResourceError(f"Resource bundle not found: {default_file}")
        strings = _read_strings(default_file)

        language = locale.replace("-", "_").split("_")[0].lower()
        localized_file = resource_dir / f"{base_name}_{language}.json"
        if localized_file.exists():
            strings.update(_read_strings(localized_file))
        else:
            logger.debug(f"No '{language}' bundle for {base_name}, using defaults")
        return cls(base_name, locale, strings)

    def get_string(self, key):
        try:
            return self._strings[key]
        except KeyError:
            raise MissingResourceError(f"Can't find key '{key}' in bundle {self.base_name}") from None

    def keys(self):
        return self._strings.keys()

    def __contains__(self, key):
        return key in self._strings


def _read_strings(path):
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ResourceError(f"Invalid resource bundle {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ResourceError(f"Resource bundle {path} must be a JSON object")
    return {str(k): str(v) for k, v in data.items()}
