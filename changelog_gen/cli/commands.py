"""CLI Commands"""

import os
import sys

from changelog_gen.config import load_config, get_config_path
from changelog_gen.llm.base import OPENAI_API_KEY_ENV
from changelog_gen.output import bold, dim, info, success, warning


def display_config() -> int:
    """Display current configuration."""
    config = load_config()
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .clogrc found)")

    env_model = os.environ.get('CLOG_MODEL')
    if env_model:
        print(f"  {dim('Environment overrides:')}")
        print(f"    CLOG_MODEL={env_model}")

    key_status = success('set') if os.environ.get(OPENAI_API_KEY_ENV) else warning('missing')
    print(f"  {dim(OPENAI_API_KEY_ENV + ':')} {key_status}")

    print()
    print(f"  {bold('Settings:')}")
    print(f"    model:             {info(config.model)}")
    print(f"    temperature:       {info(str(config.temperature))}")
    print(f"    frequency_penalty: {info(str(config.frequency_penalty))}")
    print(f"    short:             {info(str(config.short).lower())}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  .clogrc (in current directory)")
    print(f"    Global: ~/.clogrc\n")

    return 0


def run_install_completion() -> int:
    """Install shell tab completion."""
    shell = os.environ.get('SHELL', '')

    print(f"\n{bold('Tab Completion Setup')}\n")

    line = 'eval "$(register-python-argcomplete clog)"'
    if 'zsh' in shell or 'bash' in shell:
        rc_name = '.zshrc' if 'zsh' in shell else '.bashrc'
        rc_file = os.path.expanduser(f'~/{rc_name}')
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim(f'source ~/{rc_name}')}")
    elif sys.platform == 'win32':
        print("For PowerShell, run:\n")
        print("  register-python-argcomplete --shell powershell clog | Out-String | Invoke-Expression\n")
        print("To make it permanent, add the same line to your $PROFILE.")
    else:
        print("Run one of these based on your shell:\n")
        print(f"  {dim('# Bash/Zsh')}")
        print(f"  {line}\n")
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish clog | source")

    print(f"\n{dim('After setup, press TAB to autocomplete flags and models.')}")
    return 0
