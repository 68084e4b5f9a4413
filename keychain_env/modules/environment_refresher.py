"""
Environment refresher for keychain-env
Reads the per-host files written by keychain and pushes the agent
variables they export into the process environment
"""
import socket
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from keychain_env.core.logging import LoggingManager
from keychain_env.modules.export_parser import find_assignment
from keychain_env.scripts.environment_management import EnvironmentManager, EnvironmentSink

SSH_AUTH_SOCK = "SSH_AUTH_SOCK"
SSH_AGENT_PID = "SSH_AGENT_PID"
GPG_AGENT_INFO = "GPG_AGENT_INFO"

KEYCHAIN_DIR = ".keychain"
SSH_SUFFIX = "-sh"
GPG_SUFFIX = "-sh-gpg"
FILE_ENCODING = "utf-8"


class FileReadError(OSError):
    """A keychain file could not be read, or its default path could not be built."""
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


def host_key(hostname: Optional[str] = None) -> str:
    """Short host name, cut at the first dot."""
    if hostname is None:
        try:
            hostname = socket.gethostname()
        except OSError as err:
            raise FileReadError(f"Could not determine host name: {err}") from err
    return hostname.split(".", 1)[0]


def home_directory() -> Path:
    try:
        return Path.home()
    except (KeyError, RuntimeError) as err:
        raise FileReadError(f"Could not determine home directory: {err}") from err


def default_file_path(suffix: str = SSH_SUFFIX, hostname: Optional[str] = None, home: Optional[str] = None) -> str:
    """
    Build the default keychain file path.
    Args:
        suffix (str): SSH_SUFFIX or GPG_SUFFIX.
        hostname (str): Host name to use instead of the local one.
        home (str): Home directory to use instead of the current user's.
    Returns:
        str: ``<home>/.keychain/<host>-sh`` or ``<home>/.keychain/<host>-sh-gpg``.
    """
    base = home_directory() if home is None else Path(home)
    return str(base / KEYCHAIN_DIR / f"{host_key(hostname)}{suffix}")


class EnvironmentRefresher:
    """
    Injects the agent variables from keychain files into an environment sink.
    Paths are resolved once here; assign ssh_file_path or gpg_file_path
    before calling refresh() to point at other files.
    """
    def __init__(self, ssh_file_path: Optional[str] = None, gpg_file_path: Optional[str] = None,
                 gpg: bool = False, sink: Optional[EnvironmentSink] = None):
        self.logger = LoggingManager()
        self.ssh_file_path = default_file_path(SSH_SUFFIX) if ssh_file_path is None else ssh_file_path
        if gpg_file_path is None and gpg:
            gpg_file_path = default_file_path(GPG_SUFFIX)
        self.gpg_file_path = gpg_file_path
        self.sink = sink
        self.logger.debug(f"Initialized EnvironmentRefresher with ssh file: {self.ssh_file_path}, "
                          f"gpg file: {self.gpg_file_path}")

    @classmethod
    def from_settings(cls, settings: Dict[str, Any], sink: Optional[EnvironmentSink] = None) -> "EnvironmentRefresher":
        return cls(
            ssh_file_path=settings.get("ssh_file_path"),
            gpg_file_path=settings.get("gpg_file_path"),
            gpg=settings.get("gpg", False),
            sink=sink,
        )

    def variable_names(self) -> Tuple[str, ...]:
        if self.gpg_file_path is None:
            return (SSH_AUTH_SOCK, SSH_AGENT_PID)
        return (SSH_AUTH_SOCK, SSH_AGENT_PID, GPG_AGENT_INFO)

    def read_file(self, path: str) -> str:
        try:
            text = Path(path).read_text(encoding=FILE_ENCODING, errors="surrogateescape")
        except OSError as err:
            raise FileReadError(f"Could not read keychain file {path}: {err.strerror or err}", path) from err
        self.logger.debug(f"Read {len(text)} characters from {path}")
        return text

    def refresh(self) -> Tuple[Optional[str], ...]:
        """
        Read the keychain file(s) and set the agent variables.
        Every file is read before the first write, so a read error leaves
        the environment untouched.
        Returns:
            tuple: (socket, pid) or (socket, pid, gpg agent info); absent values are None.
        """
        ssh_text = self.read_file(self.ssh_file_path)
        gpg_text = None if self.gpg_file_path is None else self.read_file(self.gpg_file_path)

        env_vars = {
            SSH_AUTH_SOCK: find_assignment(ssh_text, SSH_AUTH_SOCK),
            SSH_AGENT_PID: find_assignment(ssh_text, SSH_AGENT_PID, digits_only=True),
        }
        if gpg_text is not None:
            env_vars[GPG_AGENT_INFO] = find_assignment(gpg_text, GPG_AGENT_INFO)
        for name, value in env_vars.items():
            if value is None:
                self.logger.warning(f"{name} not found, unsetting it")

        EnvironmentManager(env_vars, self.sink).setup()
        self.logger.info(f"Refreshed environment: {env_vars}")
        return tuple(env_vars.values())


def refresh_environment(**options) -> Tuple[Optional[str], ...]:
    """One-shot refresh of the process environment, e.g. from a startup hook."""
    return EnvironmentRefresher(**options).refresh()
