"""CLI entry point for the surf forecast core."""

import argparse
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from surfcast.config.loader import (
    config_hash,
    get_config_value,
    load_config,
    save_config,
    set_config_value,
)
from surfcast.config.schema import SurfcastConfig
from surfcast.history.aggregator import group_by_day, transform
from surfcast.history.rollups import pinned_session_charts, recent_session_charts, record_view
from surfcast.ingest.conditions import ConditionsService
from surfcast.ingest.firestore_client import RemoteError
from surfcast.models.common import utc_now
from surfcast.models.history import (
    AllSessions,
    DatePreset,
    DatePresetFilter,
    DateRangeFilter,
    MinRating,
    PinnedOnly,
    SessionFilter,
    SortType,
)
from surfcast.models.session import SessionHandle
from surfcast.reporting.formatters import (
    format_beach_header,
    format_beach_list,
    format_chart_line,
    format_conditions,
    format_day_buckets,
    format_record_view,
    format_session_line,
    format_sessions_json,
)
from surfcast.services import build_remote, build_services
from surfcast.storage.session_store import StoreError

DEFAULT_CONFIG = "configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="surfcast",
        description="Surf forecast and session log",
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG, help="Config YAML path")
    parser.add_argument("--db", default=None, help="SQLite DB path (overrides config)")

    sub = parser.add_subparsers(dest="command")

    # forecast
    fc_p = sub.add_parser("forecast", help="Show the forecast for a beach")
    fc_p.add_argument("beach_id", type=int)
    fc_p.add_argument("--hours", type=int, default=None, help="Look back this many hours")

    # beaches
    beaches_p = sub.add_parser("beaches", help="List the beach directory")
    beaches_p.add_argument("--region", default=None)

    # conditions
    sub.add_parser("conditions", help="Average latest conditions over known beaches")

    # sessions
    sessions_p = sub.add_parser("sessions", help="Surf session log")
    sessions_sub = sessions_p.add_subparsers(dest="sessions_command")

    list_p = sessions_sub.add_parser("list", help="List sessions")
    list_p.add_argument("--beach", type=int, default=None)
    list_p.add_argument("--pinned", action="store_true")
    list_p.add_argument("--min-rating", type=int, default=None)
    list_p.add_argument("--preset", choices=[p.value for p in DatePreset], default=None)
    list_p.add_argument("--from", dest="date_from", type=date.fromisoformat, default=None)
    list_p.add_argument("--to", dest="date_to", type=date.fromisoformat, default=None)
    list_p.add_argument(
        "--sort", choices=[s.value for s in SortType], default=SortType.LATEST.value
    )
    list_p.add_argument("--json", action="store_true")

    show_p = sessions_sub.add_parser("show", help="Show one session")
    show_p.add_argument("id", type=int)

    record_p = sessions_sub.add_parser("record", help="Record a session")
    record_p.add_argument("beach_id", type=int)
    record_p.add_argument("--start", type=datetime.fromisoformat, required=True)
    record_p.add_argument("--end", type=datetime.fromisoformat, required=True)
    record_p.add_argument("--rating", type=int, choices=range(1, 6), required=True)
    record_p.add_argument("--memo", default=None)

    delete_p = sessions_sub.add_parser("delete", help="Delete a session")
    delete_p.add_argument("id", type=int)

    pin_p = sessions_sub.add_parser("pin", help="Pin or unpin a session")
    pin_p.add_argument("id", type=int)
    pin_p.add_argument("--off", action="store_true", help="Unpin")

    sessions_sub.add_parser("recent", help="Charts of the most recent sessions")
    sessions_sub.add_parser("pinned", help="Charts of pinned sessions")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    show_cfg_p = config_sub.add_parser("show", help="Display current config")
    show_cfg_p.add_argument("key", nargs="?", default=None, help="Dotted key to print")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")
    set_p.add_argument("--save", action="store_true", help="Write the result back to --config")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    try:
        if args.command == "forecast":
            return _cmd_forecast(config, args)
        elif args.command == "beaches":
            return _cmd_beaches(config, args)
        elif args.command == "conditions":
            return _cmd_conditions(config)
        elif args.command == "sessions":
            return _cmd_sessions(config, args)
        elif args.command == "config":
            return _cmd_config(config, args)
        else:
            parser.print_help()
            return 1
    except (RemoteError, StoreError, ValueError) as e:
        print(f"Error: {e}")
        return 1


def _cmd_forecast(config: SurfcastConfig, args) -> int:
    _, fetcher = build_remote(config)
    since = None
    if args.hours is not None:
        since = utc_now() - timedelta(hours=args.hours)
    data = fetcher.fetch(args.beach_id, since=since)
    tz = ZoneInfo(config.history.display_timezone)
    print(format_beach_header(data))
    print(format_day_buckets(group_by_day(data.charts, tz), tz))
    return 0


def _cmd_beaches(config: SurfcastConfig, args) -> int:
    repository, _ = build_remote(config)
    if args.region:
        beaches = repository.fetch_beach_list(args.region)
    else:
        beaches = repository.fetch_all_beaches()
    print(format_beach_list(beaches))
    return 0


def _cmd_conditions(config: SurfcastConfig) -> int:
    _, fetcher = build_remote(config)
    service = ConditionsService(
        fetcher,
        [b.id for b in config.enabled_beaches],
        max_workers=config.forecast.probe_workers,
    )
    print(format_conditions(service.current()))
    return 0


def _session_filter(args) -> SessionFilter:
    if args.pinned:
        return PinnedOnly()
    if args.min_rating is not None:
        return MinRating(args.min_rating)
    if args.preset is not None:
        return DatePresetFilter(DatePreset(args.preset))
    if args.date_from is not None or args.date_to is not None:
        return DateRangeFilter(args.date_from or date.min, args.date_to or date.max)
    return AllSessions()


def _cmd_sessions(config: SurfcastConfig, args) -> int:
    if args.sessions_command is None:
        print("Use: sessions list | show | record | delete | pin | recent | pinned")
        return 1

    services = build_services(config, args.db)
    try:
        store = services.store
        if args.sessions_command == "list":
            sessions = transform(
                store.fetch_all(),
                _session_filter(args),
                SortType(args.sort),
                location_id=args.beach,
            )
            if args.json:
                print(format_sessions_json(sessions))
            else:
                for s in sessions:
                    print(format_session_line(s))
            return 0

        if args.sessions_command == "show":
            session = store.fetch_by_id(SessionHandle(args.id))
            if session is None:
                print(f"Error: no session {args.id}")
                return 1
            print(format_record_view(record_view(session), services.tz))
            return 0

        if args.sessions_command == "record":
            handle = services.recorder.record(
                args.beach_id, args.start, args.end, args.rating, args.memo,
            )
            print(f"Recorded session {handle}")
            return 0

        if args.sessions_command == "delete":
            store.delete(SessionHandle(args.id))
            print(f"Deleted session {args.id}")
            return 0

        if args.sessions_command == "pin":
            session = store.fetch_by_id(SessionHandle(args.id))
            if session is None:
                print(f"Error: no session {args.id}")
                return 1
            store.update(replace(session, is_pinned=not args.off))
            print(f"Session {args.id} {'unpinned' if args.off else 'pinned'}")
            return 0

        if args.sessions_command in ("recent", "pinned"):
            sessions = store.fetch_all()
            if args.sessions_command == "recent":
                charts = recent_session_charts(sessions, config.history.recent_session_limit)
            else:
                charts = pinned_session_charts(sessions)
            for chart in charts:
                print(f"{chart.location_id:>6}  {chart.time.astimezone(services.tz):%Y-%m-%d} "
                      f"{format_chart_line(chart, services.tz)}")
            return 0

        return 1
    finally:
        services.close()


def _cmd_config(config: SurfcastConfig, args) -> int:
    if args.config_command == "show":
        if args.key:
            try:
                print(get_config_value(config, args.key))
            except (KeyError, IndexError) as e:
                print(f"Error: unknown key {e}")
                return 1
            return 0
        print(f"# {args.config} ({config_hash(config)})")
        print(config.model_dump_json(indent=2))
        return 0

    if args.config_command == "set":
        key, sep, value = args.keyvalue.partition("=")
        if not sep or not key.strip():
            print("Error: use key=value format")
            return 1
        key = key.strip()
        try:
            new_config = set_config_value(config, key, value.strip())
        except (KeyError, IndexError) as e:
            print(f"Error: unknown key {e}")
            return 1
        print(f"Set {key} = {get_config_value(new_config, key)}")
        if args.save:
            save_config(new_config, args.config)
            print(f"Saved {args.config} ({config_hash(new_config)})")
        return 0

    print("Use: config show [key] | config set key=value [--save]")
    return 1
