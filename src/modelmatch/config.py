import logging
import os
import re
import tomllib

from modelmatch.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

RESOLUTION_ERRORS = ("raise", "fail")


def _default_config():
    """Return the default configuration for modelmatch.

    This is placed in a separate function because we want to be absolutely
    sure that we are using a copy of the defaults when we manipulate config
    directly in tests.
    """
    return {
        "env": None,
        "debug": False,
        "log_level": "INFO",
        # How a method reference that cannot be found while resolving `limit`
        #   or `update_only` is reported:
        #   * "raise": the lookup error propagates out of the matcher
        #   * "fail": the lookup error is recorded as an assertion failure
        #   `reject_if` lookups always become assertion failures.
        "resolution_errors": "raise",
    }


class ConfigAttribute:
    """Makes an attribute forward to the config"""

    def __init__(self, name):
        self.__name__ = name

    def __get__(self, obj, type=None):
        if obj is None:
            return self
        return obj.config[self.__name__]

    def __set__(self, obj, value):
        obj.config[self.__name__] = value


class Config(dict):
    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")
    CONFIG_FILES = [".modelmatch.toml", "modelmatch.toml", "pyproject.toml"]

    @classmethod
    def load_from_dict(cls, config: dict | None = None):
        """Load configuration from a dictionary."""
        config = cls._normalize_config(config or {})
        config = cls._load_env_vars(config)
        cls._validate(config)

        return cls(**config)

    @classmethod
    def load_from_path(cls, path: str):
        def find_config_file(directory: str):
            for config_file in cls.CONFIG_FILES:
                config_file_path = os.path.join(directory, config_file)
                if os.path.exists(config_file_path):
                    return config_file_path
            return None

        # Start checking from the provided path up to 2 parent directories
        current_dir = os.path.abspath(
            path if os.path.isdir(path) else os.path.dirname(path)
        )
        config_file_name = None

        for _ in range(3):
            config_file_name = find_config_file(current_dir)
            if config_file_name:
                break

            current_dir = os.path.dirname(current_dir)

        if not config_file_name:
            raise ConfigurationError(f"No configuration file found in {path}")

        logger.debug(f"Loading configuration from {config_file_name}")
        with open(config_file_name, "rb") as f:
            try:
                config = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigurationError(
                    f"Invalid configuration file {config_file_name}: {exc}"
                ) from exc

        # If pyproject.toml, extract modelmatch configuration
        #   from the 'tool.modelmatch' section
        if config_file_name.endswith("pyproject.toml"):
            config = config.get("tool", {}).get("modelmatch", {})

        return cls.load_from_dict(config)

    @classmethod
    def _normalize_config(cls, config):
        """Normalize configuration values.

        Known keys are merged over the defaults, and the section named by the
        MODELMATCH_ENV environment variable, if present, is merged over that.
        """
        environment = os.environ.get("MODELMATCH_ENV") or None

        keys = _default_config().keys()
        finalized_config = {key: value for key, value in config.items() if key in keys}

        finalized_config = cls._deep_merge(_default_config(), finalized_config)

        if environment and isinstance(config.get(environment), dict):
            environment_config = {
                key: value
                for key, value in config[environment].items()
                if key in keys
            }
            finalized_config = cls._deep_merge(finalized_config, environment_config)
            finalized_config["env"] = environment

        return finalized_config

    @classmethod
    def _deep_merge(cls, dict1: dict, dict2: dict):
        result = dict1.copy()
        for key, value in dict2.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = cls._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    @classmethod
    def _load_env_vars(cls, config):
        if isinstance(config, dict):
            for key, value in config.items():
                if isinstance(value, str):
                    config[key] = cls._replace_env_var(value)
                elif isinstance(value, dict):
                    config[key] = cls._load_env_vars(value)
                elif isinstance(value, list):
                    config[key] = [
                        cls._replace_env_var(item) if isinstance(item, str) else item
                        for item in value
                    ]
        return config

    @classmethod
    def _replace_env_var(cls, value):
        """Replace environment variables in a string.

        Supports ``${ENV_VAR}`` and ``${ENV_VAR|default-value}``, any number of
        times, mixed with static text.
        """
        match = cls.ENV_VAR_PATTERN.search(value)
        while match:
            matched_string = match.group(1)

            if "|" in matched_string:
                env_var, default_value = matched_string.split("|", 1)
                env_value = os.getenv(env_var, default_value)
            else:
                env_value = os.getenv(matched_string)

            if env_value is None:
                raise ConfigurationError(
                    f"Environment variable {matched_string} is not set"
                )

            value = value.replace(f"${{{matched_string}}}", env_value)
            match = cls.ENV_VAR_PATTERN.search(value)

        return value

    @classmethod
    def _validate(cls, config):
        if config["resolution_errors"] not in RESOLUTION_ERRORS:
            raise ConfigurationError(
                f"Invalid value `{config['resolution_errors']}` for `resolution_errors`."
                f" Must be one of {', '.join(RESOLUTION_ERRORS)}"
            )


_active_config = None


def get_config() -> Config:
    """Return the process-wide configuration, loading defaults on first use."""
    global _active_config

    if _active_config is None:
        _active_config = Config.load_from_dict()

    return _active_config


def set_config(config: Config | dict | None) -> None:
    """Replace the process-wide configuration. `None` resets to defaults."""
    global _active_config

    if config is not None and not isinstance(config, Config):
        config = Config.load_from_dict(config)

    _active_config = config
