"""CLI entry point for address forecast lookups."""

import argparse
import logging
import sys

from weatherlookup.config.loader import config_hash, get_config_value, load_config
from weatherlookup.config.schema import AppConfig
from weatherlookup.models.outcome import OutcomeKind
from weatherlookup.reporting.formatters import (
    format_outcome_json,
    format_outcome_text,
    formatted_high_low,
)
from weatherlookup.service.orchestrator import build_orchestrator
from weatherlookup.service.staleness import record_age_minutes
from weatherlookup.storage.database import connect, run_migrations
from weatherlookup.storage.record_store import ForecastRecordStore

DEFAULT_CONFIG = "configs/default.yaml"
SECRET_KEYS = {"upstream.api_key"}

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherlookup",
        description="Address to 5-day forecast lookup with caching",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")
    parser.add_argument("--json", action="store_true", help="Print JSON output")

    sub = parser.add_subparsers(dest="command")

    forecast_p = sub.add_parser("forecast", help="Resolve an address to a forecast")
    forecast_p.add_argument("address", help="Free-text address")

    show_p = sub.add_parser("show", help="Show a stored forecast, refreshing if expired")
    show_p.add_argument("record_id", type=int)

    near_p = sub.add_parser("near", help="Find a fresh forecast near coordinates")
    near_p.add_argument("latitude", type=float)
    near_p.add_argument("longitude", type=float)
    near_p.add_argument("--tolerance", type=float, default=None)

    history_p = sub.add_parser("history", help="List recently stored forecasts")
    history_p.add_argument("--limit", type=int, default=20)

    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Display one config value")
    get_p.add_argument("key", help="Dotted key, e.g. cache.ttl_minutes")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    config = load_config(args.config)
    if args.db:
        config = config.model_copy(
            update={"store": config.store.model_copy(update={"db_path": args.db})}
        )
    _setup_logging(config)
    logger.debug("Loaded config %s", config_hash(config))

    if args.command == "config":
        return _cmd_config(config, args)
    elif args.command == "forecast":
        return _cmd_forecast(config, args)
    elif args.command == "show":
        return _cmd_show(config, args)
    elif args.command == "near":
        return _cmd_near(config, args)
    elif args.command == "history":
        return _cmd_history(config, args)
    else:
        parser.print_help()
        return 1


def _setup_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=config.logging.level.value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if config.logging.file:
        file_handler = logging.FileHandler(config.logging.file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logging.getLogger().addHandler(file_handler)


def _cmd_forecast(config: AppConfig, args) -> int:
    conn = connect(config.store.db_path)
    try:
        run_migrations(conn)
        outcome = build_orchestrator(config, conn).resolve(args.address)
    finally:
        conn.close()
    print(format_outcome_json(outcome) if args.json else format_outcome_text(outcome))
    return 0 if outcome.kind in (OutcomeKind.SERVED, OutcomeKind.NOT_FOUND) else 1


def _cmd_show(config: AppConfig, args) -> int:
    conn = connect(config.store.db_path)
    try:
        run_migrations(conn)
        outcome = build_orchestrator(config, conn).show(args.record_id)
    finally:
        conn.close()
    if outcome.kind == OutcomeKind.NOT_FOUND:
        print(f"Weather forecast {args.record_id} not found.")
        return 1
    print(format_outcome_json(outcome) if args.json else format_outcome_text(outcome))
    return 0


def _cmd_near(config: AppConfig, args) -> int:
    tolerance = args.tolerance
    if tolerance is None:
        tolerance = config.store.coordinate_tolerance
    conn = connect(config.store.db_path)
    try:
        run_migrations(conn)
        record = ForecastRecordStore(conn).find_fresh_near(
            args.latitude, args.longitude, tolerance
        )
    finally:
        conn.close()
    if record is None:
        print("No fresh forecast near those coordinates")
        return 1
    print(f"{record.id}: {record.address} {formatted_high_low(record)}")
    return 0


def _cmd_history(config: AppConfig, args) -> int:
    conn = connect(config.store.db_path)
    try:
        run_migrations(conn)
        records = ForecastRecordStore(conn).recent(args.limit)
    finally:
        conn.close()
    print(f"Stored forecasts: {len(records)}")
    for r in records:
        print(
            f"  {r.id}: {r.address} | {formatted_high_low(r)} | "
            f"{record_age_minutes(r):.0f} min old"
        )
    return 0


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2, exclude={"upstream": {"api_key"}}))
        return 0
    elif args.config_command == "get":
        if args.key in SECRET_KEYS:
            print(f"Error: {args.key} is secret and not displayed")
            return 1
        try:
            print(get_config_value(config, args.key))
            return 0
        except KeyError as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config get key")
        return 1


if __name__ == "__main__":
    sys.exit(main())
