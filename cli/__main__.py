"""Entry point for spellmaster console client."""

import argparse
import asyncio
import logging
import os
import sys

from cli.console import ConsoleUI
from core.config import DEFAULT_BASE_URL, DEFAULT_MODEL
from core.models import WordStore
from services.file_storage import FileStorage
from services.openrouter_provider import OpenRouterProvider


def resolve_setting(env_name: str, config: dict, config_key: str, default=None):
    """Environment variable first, then config file, then default."""
    return os.environ.get(env_name) or config.get(config_key) or default


def main():
    parser = argparse.ArgumentParser(description='SpellMaster - vocabulary practice with AI')
    parser.add_argument(
        '--config',
        default=None,
        help='Config file (default: ~/.config/spellmaster/config.json)'
    )
    parser.add_argument(
        '--state-dir',
        default=None,
        help='Directory for the saved word list (default: next to the config file)'
    )
    parser.add_argument(
        '--model',
        default=None,
        help=f'Model identifier (default: {DEFAULT_MODEL})'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Show debug logging'
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    storage = FileStorage(config_file=args.config, state_dir=args.state_dir)
    config = storage.load_config()
    provider = OpenRouterProvider(
        api_key=resolve_setting('OPENROUTER_API_KEY', config, 'openrouter_api_key'),
        model_name=args.model or resolve_setting('OPENROUTER_MODEL', config, 'openrouter_model', DEFAULT_MODEL),
        base_url=resolve_setting('OPENROUTER_BASE_URL', config, 'openrouter_base_url', DEFAULT_BASE_URL)
    )
    if not provider.api_key:
        print('Warning: OPENROUTER_API_KEY is not set, AI features will fall back to defaults.')

    store = WordStore.load(storage)
    ui = ConsoleUI(store, provider)

    try:
        asyncio.run(ui.run())
    except KeyboardInterrupt:
        print('\nGoodbye!')
        sys.exit(0)


if __name__ == '__main__':
    main()
