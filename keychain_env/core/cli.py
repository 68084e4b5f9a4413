"""
Unified CLI entrypoint for keychain-env
Uses click for modular subcommands
"""
import shlex

import click
import yaml

from keychain_env.core.logging import LOG_LEVELS, LoggingManager
from keychain_env.modules.environment_refresher import EnvironmentRefresher, FileReadError, FILE_ENCODING
from keychain_env.modules.export_parser import parse_assignments
from keychain_env.scripts.config_parsing import ConfigError, load_settings

@click.group()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), default=None,
              help='YAML or INI file with a keychain section')
@click.option('--log-level', type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None,
              help='Log level for messages on stderr')
@click.pass_context
def cli(ctx, config_path, log_level):
    """keychain-env CLI group."""
    try:
        settings = load_settings(config_path)
    except (ConfigError, OSError, yaml.YAMLError) as err:
        raise click.UsageError(str(err)) from err
    if log_level:
        settings['log_level'] = log_level
    LoggingManager(settings['log_level']).setup()
    ctx.obj = settings

def _override(settings, ssh_file, gpg_file, gpg):
    settings = dict(settings)
    if ssh_file:
        settings['ssh_file_path'] = ssh_file
    if gpg_file:
        settings['gpg_file_path'] = gpg_file
    if gpg is not None:
        settings['gpg'] = gpg
        if not gpg:
            settings['gpg_file_path'] = None
    return settings

def _refresher(settings):
    try:
        return EnvironmentRefresher.from_settings(settings)
    except FileReadError as err:
        raise click.ClickException(str(err)) from err

def _read(refresher, path):
    try:
        return refresher.read_file(path)
    except FileReadError as err:
        raise click.ClickException(str(err)) from err

def export_line(name, value):
    if value is None:
        return f"unset {name};"
    return f"{name}={shlex.quote(value)}; export {name};"

def echo_raw(line):
    # values carry the file's undecodable bytes as surrogates, write them back as bytes
    click.echo(line.encode(FILE_ENCODING, 'surrogateescape'))

@cli.command()
@click.option('--ssh-file', default=None, help='Keychain file holding the SSH agent variables')
@click.option('--gpg-file', default=None, help='Keychain file holding GPG_AGENT_INFO')
@click.option('--gpg/--no-gpg', default=None, help='Also read the GPG agent file')
@click.option('--all', 'show_all', is_flag=True, help='List every assignment found as comments')
@click.pass_obj
def refresh(settings, ssh_file, gpg_file, gpg, show_all):
    """Refresh the agent variables and print them as shell code for eval."""
    refresher = _refresher(_override(settings, ssh_file, gpg_file, gpg))
    try:
        values = refresher.refresh()
    except FileReadError as err:
        raise click.ClickException(str(err)) from err
    lines = [export_line(name, value) for name, value in zip(refresher.variable_names(), values)]
    if show_all:
        for path in filter(None, (refresher.ssh_file_path, refresher.gpg_file_path)):
            for key, value in parse_assignments(_read(refresher, path)).items():
                lines.append(f"# {key}={value}")
    for line in lines:
        echo_raw(line)

@cli.command()
@click.option('--gpg/--no-gpg', default=None, help='Also show the GPG agent file')
@click.pass_obj
def paths(settings, gpg):
    """Show the keychain files a refresh would read."""
    refresher = _refresher(_override(settings, None, None, gpg))
    click.echo(f"ssh: {refresher.ssh_file_path}")
    if refresher.gpg_file_path is not None:
        click.echo(f"gpg: {refresher.gpg_file_path}")

if __name__ == '__main__':
    cli()
