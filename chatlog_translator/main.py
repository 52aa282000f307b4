#!/usr/bin/env python3
"""Chat Log Translator — Entry Point."""

import argparse
import logging
import os
import signal
import sys
import threading
from datetime import datetime, timezone

from chatlog_translator.cache import TranslationCache
from chatlog_translator.config import load_config, load_yaml_config
from chatlog_translator.credentials import CredentialRotator, load_credentials
from chatlog_translator.errors import (
    AllCredentialsExhaustedError,
    ConfigurationError,
    CredentialLoadError,
    TailSourceError,
)
from chatlog_translator.filters import CategoryFilter
from chatlog_translator.logfiles import find_latest_log
from chatlog_translator.papago import PapagoClient
from chatlog_translator.pipeline import TranslationPipeline
from chatlog_translator.tail import LogTail
from chatlog_translator.translator import Translator

LOG_FORMAT = "%(asctime)s [TRANSLATOR] %(levelname)s %(message)s"

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_STARTUP = 2

logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chatlog-translator",
        description="Follow a chat log file and print translated messages.",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--log-directory", dest="log_directory", default=None,
        help="Directory holding the chat logs; the newest .log file is followed",
    )
    parser.add_argument(
        "--log-file", dest="log_file", default=None,
        help="Follow this file instead of the newest one in --log-directory",
    )
    parser.add_argument(
        "--target-codes", dest="target_codes", default=None,
        help="Comma-separated chat codes or channel names (e.g. 003D,SAY)",
    )
    parser.add_argument(
        "--secret-file", dest="secret_file", default=None,
        help="JSON file with clientId/clientSecret pairs (default: secret.json)",
    )
    parser.add_argument(
        "--source-language", dest="source_language", default=None,
        help="Source language code (default: ja)",
    )
    parser.add_argument(
        "--target-language", dest="target_language", default=None,
        help="Target language code (default: ko)",
    )
    parser.add_argument(
        "--translate-actor-name", dest="translate_actor_name",
        action="store_true", default=None,
        help="Translate speaker names as well as messages",
    )
    parser.add_argument(
        "--exhausted-policy", dest="exhausted_policy",
        choices=["halt", "passthrough"], default=None,
        help="What to do once every credential is out of quota (default: halt)",
    )
    parser.add_argument(
        "--log-level", dest="log_level", default=None,
        help="Logging level (default: INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_cli_parser().parse_args(argv)

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stderr)

    try:
        config = load_config(args, load_yaml_config(args.config))
        logging.getLogger().setLevel(config.log_level)
        logger.info(
            "Config: targets=%s, %s->%s, translate_actor_name=%s, exhausted_policy=%s",
            ",".join(config.target_codes), config.source_language, config.target_language,
            config.translate_actor_name, config.exhausted_policy,
        )
        credentials = load_credentials(config.secret_file)
        log_path = config.log_file or find_latest_log(config.log_directory)
        if not os.path.isfile(log_path):
            raise FileNotFoundError(f"Log file not found: {log_path}")
    except (ConfigurationError, CredentialLoadError, FileNotFoundError) as e:
        logger.error("Startup failed: %s", e)
        return EXIT_STARTUP

    stop_event = threading.Event()
    tail = LogTail(log_path, poll_interval=config.poll_interval, stop_event=stop_event)

    def _signal_handler(signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        tail.stop()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    started_at = datetime.now(timezone.utc)
    exit_code = EXIT_OK

    with PapagoClient(
        config.source_language,
        config.target_language,
        endpoint=config.endpoint,
        timeout=config.request_timeout,
    ) as client:
        translator = Translator(client, TranslationCache(), CredentialRotator(credentials))
        pipeline = TranslationPipeline(
            translator,
            CategoryFilter(config.target_codes),
            started_at,
            translate_actor_name=config.translate_actor_name,
            exhausted_policy=config.exhausted_policy,
        )

        logger.info("Following %s. Press Ctrl+C to stop.", log_path)
        try:
            pipeline.run(tail.lines())
        except AllCredentialsExhaustedError as e:
            logger.error("Translation halted: %s", e)
            exit_code = EXIT_FATAL
        except TailSourceError as e:
            logger.error("Log source lost: %s", e)
            exit_code = EXIT_FATAL

        logger.info(
            "Stats: %s, cache entries=%d (hits=%d), requests=%d",
            pipeline.stats.to_dict(), len(translator.cache),
            translator.cache.hits, client.request_count,
        )

    logger.info("Chat Log Translator stopped.")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
