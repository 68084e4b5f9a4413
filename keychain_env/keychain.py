#!/usr/bin/env python3
"""
Main entrypoint for keychain-env
Delegates to the unified CLI in core/cli.py
"""
from keychain_env.core.cli import cli

if __name__ == '__main__':
    cli()
