import os
from typing import Dict, MutableMapping, Optional

class EnvironmentSink:
	"""Destination for variables produced by a refresh."""
	def set(self, name: str, value: Optional[str]) -> None:
		raise NotImplementedError

class ProcessEnvironment(EnvironmentSink):
	def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
		self.environ = os.environ if environ is None else environ
	def set(self, name, value):
		# a null value unsets, it never keeps the previous one
		if value is None:
			self.environ.pop(name, None)
		else:
			self.environ[name] = value

class InMemoryEnvironment(EnvironmentSink):
	def __init__(self, initial: Optional[Dict[str, Optional[str]]] = None):
		self.env_vars = dict(initial or {})
	def set(self, name, value):
		self.env_vars[name] = value
	def get(self, name, default=None):
		return self.env_vars.get(name, default)

class EnvironmentManager:
	def __init__(self, env_vars, sink: Optional[EnvironmentSink] = None):
		self.env_vars = env_vars
		self.sink = ProcessEnvironment() if sink is None else sink
	def setup(self):
		for k, v in self.env_vars.items():
			self.sink.set(k, v)
