import argparse
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from rich.console import Console

from .cache import commands
from .cache.store import CacheStore
from .config import (
    AppConfig,
    Lang,
    QueryConfig,
    TranslatorName,
    cache_config_from_env,
    clear_empty_env,
    load_env_file,
    parse_bool,
    provider_config_from_env,
)
from .db import ecdict
from .engine.orchestrator import QueryOrchestrator
from .errors import ProviderError
from .translators.registry import build_translator

logger = logging.getLogger(__name__)

COMMANDS = ("cache", "ecdict")
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def get_version() -> str:
    try:
        return version("pyslate")
    except PackageNotFoundError:
        return "0.0.0"


def setup_logging(verbose: bool) -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(logging.DEBUG if verbose else logging.ERROR)


def query_parser(env=os.environ) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pyslate",
        description="Translate words with a selectable provider, caching responses on disk.",
        epilog="Other commands: `pyslate cache {show,list,clean,purge,view}`, `pyslate ecdict import`.",
    )
    parser.add_argument("words", nargs="+", help="Words or phrase to translate")
    parser.add_argument(
        "-p", "--translator",
        choices=[t.value for t in TranslatorName],
        default=env.get("PYSLATE_TRANSLATOR", TranslatorName.GOOGLE.value),
        help="Translation provider [env: PYSLATE_TRANSLATOR]",
    )
    langs = [lang.value for lang in Lang]
    parser.add_argument(
        "-s", "--source", choices=langs,
        default=env.get("PYSLATE_SOURCE_LANG", Lang.AUTO.value),
        help="Source language [env: PYSLATE_SOURCE_LANG]",
    )
    parser.add_argument(
        "-t", "--target", choices=langs,
        default=env.get("PYSLATE_TARGET_LANG", Lang.ZH.value),
        help="Target language [env: PYSLATE_TARGET_LANG]",
    )
    parser.add_argument(
        "-m", "--more", action="store_true", default=parse_bool(env.get("PYSLATE_SHOW_MORE")),
        help="Show optional sections [env: PYSLATE_SHOW_MORE]",
    )
    parser.add_argument(
        "-n", "--no-cache", action="store_true", default=parse_bool(env.get("PYSLATE_NO_CACHE")),
        help="Skip the cache for this query [env: PYSLATE_NO_CACHE]",
    )
    parser.add_argument("--ttl", type=int, default=None, help="Cache TTL in seconds [env: PYSLATE_CACHE_TTL]")
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=parse_bool(env.get("PYSLATE_VERBOSE")),
        help="Print debug details [env: PYSLATE_VERBOSE]",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    return parser


def command_parser(env=os.environ) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pyslate")
    sub = parser.add_subparsers(dest="cmd", required=True)

    cache_p = sub.add_parser("cache", help="Manage cache")
    cache_p.add_argument(
        "-v", "--verbose", action="store_true", default=parse_bool(env.get("PYSLATE_VERBOSE")),
        help="Print debug details [env: PYSLATE_VERBOSE]",
    )
    cache_sub = cache_p.add_subparsers(dest="action", required=True)
    cache_sub.add_parser("show", aliases=["list"], help="List cache files")
    cache_sub.add_parser("clean", help="Remove all cache files")
    cache_sub.add_parser("purge", help="Remove expired or unreadable cache files")
    view_p = cache_sub.add_parser("view", help="Render cached content")
    view_p.add_argument("hash", help="Fingerprint or fingerprint prefix")

    ecdict_p = sub.add_parser("ecdict", help="Manage the local ECDICT database")
    ecdict_p.add_argument("-v", "--verbose", action="store_true", default=False)
    ecdict_sub = ecdict_p.add_subparsers(dest="action", required=True)
    import_p = ecdict_sub.add_parser("import", help="Import stardict.csv into sqlite")
    import_p.add_argument("csv", type=Path, help="Path to stardict.csv")
    import_p.add_argument("--db", type=Path, default=None, help="Database path [env: PYSLATE_ECDICT_DB]")
    import_p.add_argument("--chunksize", type=int, default=1000)
    return parser


def run_command(argv, console: Console, env=os.environ) -> int:
    args = command_parser(env).parse_args(argv)
    setup_logging(args.verbose)
    logger.debug("%s", args)

    if args.cmd == "ecdict":
        db_path = args.db or provider_config_from_env(env).ecdict_db
        try:
            count = ecdict.import_csv(args.csv, db_path, chunksize=args.chunksize)
        except (OSError, ValueError) as e:
            logger.debug("Import %s failed: %s", args.csv, e, exc_info=True)
            console.print(f"error: {e}", style="red", markup=False, highlight=False)
            return 1
        console.print(f"Imported {count} word(s) into {db_path}", markup=False, highlight=False)
        return 0

    cache_cfg = cache_config_from_env(env)
    store = CacheStore(cache_cfg.dir, cache_cfg.ttl_seconds)
    if args.action in ("show", "list"):
        commands.list_cache(store, console)
    elif args.action == "clean":
        commands.clean_cache(store, console)
    elif args.action == "purge":
        commands.purge_cache(store, console)
    elif args.action == "view":
        if not commands.view_cache(store, args.hash, console, provider_config_from_env(env)):
            return 1
    return 0


def run_query(argv, console: Console, err_console: Console, env=os.environ) -> int:
    parser = query_parser(env)
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    logger.debug("%s", args)

    try:
        query_cfg = QueryConfig(
            translator=TranslatorName(args.translator),
            source=Lang(args.source),
            target=Lang(args.target),
            no_cache=args.no_cache,
            more=args.more,
            verbose=args.verbose,
        )
    except ValueError as e:
        parser.error(str(e))
    if args.ttl is not None and args.ttl < 0:
        parser.error("--ttl must not be negative")

    cfg = AppConfig(
        cache=cache_config_from_env(env, ttl=args.ttl),
        providers=provider_config_from_env(env),
        query=query_cfg,
    )
    store = CacheStore(cfg.cache.dir, cfg.cache.ttl_seconds)
    translator = build_translator(cfg.query.translator, cfg.providers, console)
    orchestrator = QueryOrchestrator(translator, store, cfg.query, cfg.cache.key_strategy)

    try:
        orchestrator.run(args.words)
    except ProviderError as e:
        logger.debug("Translate failed: %s", e, exc_info=True)
        err_console.print(f"error: {e}", style="red", markup=False, highlight=False)
        return 1
    return 0


def main(argv=None, console=None, err_console=None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    load_env_file()
    clear_empty_env()
    console = console or Console()
    err_console = err_console or Console(stderr=True)

    if argv and argv[0] in COMMANDS:
        return run_command(argv, console)
    return run_query(argv, console, err_console)


if __name__ == "__main__":
    raise SystemExit(main())
