import configparser
import os
import yaml

from keychain_env.core.logging import LOG_LEVELS

DEFAULT_SETTINGS = {
	'ssh_file_path': None,
	'gpg_file_path': None,
	'gpg': False,
	'log_level': 'WARNING',
}
ENV_OVERRIDES = {
	'KEYCHAIN_SSH_FILE': 'ssh_file_path',
	'KEYCHAIN_GPG_FILE': 'gpg_file_path',
	'KEYCHAIN_GPG': 'gpg',
	'KEYCHAIN_LOG_LEVEL': 'log_level',
}
SECTION = 'keychain'

class ConfigError(ValueError):
	pass

class ConfigParser:
	def __init__(self, config_path):
		self.config_path = str(config_path)
	def parse(self):
		if self.config_path.endswith('.yaml') or self.config_path.endswith('.yml'):
			with open(self.config_path, 'r') as f:
				data = yaml.safe_load(f)
			if data is None:
				return {}
			if not isinstance(data, dict):
				raise ConfigError(f"{self.config_path}: top level must be a mapping")
			return data
		elif self.config_path.endswith('.ini'):
			if not os.path.exists(self.config_path):
				raise FileNotFoundError(f"Config file {self.config_path} does not exist.")
			parser = configparser.ConfigParser()
			parser.read(self.config_path)
			return {section: dict(parser.items(section)) for section in parser.sections()}
		return {}

def to_bool(value, source):
	if isinstance(value, bool):
		return value
	state = configparser.ConfigParser.BOOLEAN_STATES.get(str(value).strip().lower())
	if state is None:
		raise ConfigError(f"{source}: not a boolean: {value!r}")
	return state

def _apply(settings, values, source):
	for key, value in values.items():
		if key not in DEFAULT_SETTINGS:
			raise ConfigError(f"{source}: unknown setting {key!r}")
		if key == 'gpg':
			value = to_bool(value, source)
		elif value is not None and not isinstance(value, str):
			raise ConfigError(f"{source}: {key} must be a string")
		elif key == 'log_level' and (value is None or value.upper() not in LOG_LEVELS):
			raise ConfigError(f"{source}: unknown log level {value!r}")
		settings[key] = value

def load_settings(config_path=None, environ=None):
	"""
	Build the refresh settings from defaults, an optional YAML/INI file
	and KEYCHAIN_* environment variables, later sources winning.
	"""
	environ = os.environ if environ is None else environ
	settings = dict(DEFAULT_SETTINGS)
	if config_path is not None:
		config = ConfigParser(config_path).parse()
		# ini files only count inside [keychain], yaml may also be flat
		fallback = {} if str(config_path).endswith('.ini') else config
		section = config.get(SECTION, fallback)
		if not isinstance(section, dict):
			raise ConfigError(f"{config_path}: '{SECTION}' must be a mapping")
		_apply(settings, section, config_path)
	overrides = {key: environ[var] for var, key in ENV_OVERRIDES.items() if var in environ}
	_apply(settings, overrides, 'environment')
	return settings
