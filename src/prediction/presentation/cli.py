"""
Inbound triggers for the prediction module: daily batch, regeneration,
retrieval and maintenance commands.
"""
import argparse
import json
from datetime import date
from pathlib import Path
from typing import List, Optional

from ..application.builder import PredictionApplicationBuilder
from ..application.query import to_regeneration_result
from ..infrastructure import generate_synthetic_history
from ...common.config import ConfigManager
from ...common.exceptions import ConfigurationError, ForecastError, SiteNotFound, StorageFailure
from ...common.logging import setup_logger

logger = setup_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOT_FOUND = 2

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Daily congestion forecasting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src.main daily                          # Run the daily batch
  python -m src.main regenerate esp-001             # Regenerate one site
  python -m src.main show esp-001 --date 2026-01-13 # Print a stored forecast
  python -m src.main daily batch.max_workers=4      # Config override
        """
    )
    parser.add_argument('--profile', default='default', help="Configuration profile under conf/prediction")
    parser.add_argument('--config-dir', default='conf', help="Configuration directory")

    commands = parser.add_subparsers(dest='command', required=True)
    commands.add_parser('init-db', help="Create database tables")
    commands.add_parser('daily', help="Run the daily batch for every site")

    regenerate = commands.add_parser('regenerate', help="Regenerate the forecast for one site")
    regenerate.add_argument('site_id')

    show = commands.add_parser('show', help="Print the authoritative forecast for a site")
    show.add_argument('site_id')
    show.add_argument('--date', type=date.fromisoformat, default=None)

    overview = commands.add_parser('overview', help="Print forecast coverage for all sites")
    overview.add_argument('--date', type=date.fromisoformat, default=None)

    seed = commands.add_parser('seed-history', help="Write synthetic half-hour history for a site")
    seed.add_argument('site_id')
    seed.add_argument('--seed', type=int, default=None)
    return parser

def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))

def run_command(args: argparse.Namespace, builder: PredictionApplicationBuilder) -> int:
    if args.command == 'init-db':
        builder.build_database(create_tables=True)
        logger.info("Database tables created")
        return EXIT_OK

    if args.command == 'daily':
        try:
            report = builder.build_batch_runner().run()
        except StorageFailure as e:
            logger.error(f"Daily batch aborted, sites could not be listed: {e}")
            return EXIT_FAILURE
        _print_json({
            "processed": report.processed,
            "succeeded": report.succeeded,
            "failed": report.failed,
            "failures": {r.site_id: r.error for r in report.results if not r.succeeded},
        })
        return EXIT_OK

    if args.command == 'regenerate':
        try:
            result = builder.build_orchestrator().regenerate(args.site_id)
        except SiteNotFound:
            _print_json({"error": "Site not found", "site_id": args.site_id})
            return EXIT_NOT_FOUND
        except ForecastError as e:
            logger.error(f"Regeneration failed for {args.site_id}: {e}")
            _print_json({"error": "Failed to regenerate predictions", "site_id": args.site_id})
            return EXIT_FAILURE
        _print_json(to_regeneration_result(result).model_dump(mode='json'))
        return EXIT_OK

    if args.command == 'show':
        lookup = builder.build_query_service().get_forecast(args.site_id, args.date)
        _print_json(lookup.model_dump(mode='json', exclude_none=True))
        return EXIT_OK if lookup.status == 'found' else EXIT_NOT_FOUND

    if args.command == 'overview':
        _print_json(builder.build_query_service().overview(args.date).model_dump(mode='json'))
        return EXIT_OK

    if args.command == 'seed-history':
        builder.build_selector()
        components = builder.get_components()
        if components['sites'].get_site(args.site_id) is None:
            _print_json({"error": "Site not found", "site_id": args.site_id})
            return EXIT_NOT_FOUND
        plan = components['selector'].plan(args.site_id, builder.clock.now().date())
        days = [entry.day for group in (plan.same_day_prior_years, plan.recent_days, plan.periodic) for entry in group]
        records = generate_synthetic_history(args.site_id, days, seed=args.seed)
        components['averages'].append(records)
        logger.info(f"Generated {len(records)} synthetic records over {len(set(days))} days for {args.site_id}")
        return EXIT_OK

    raise ValueError(f"Unknown command: {args.command}")

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args, overrides = parser.parse_known_args(argv)

    try:
        cfg = ConfigManager(Path(args.config_dir)).load_prediction_config(args.profile, overrides)
        builder = PredictionApplicationBuilder(cfg)
        return run_command(args, builder)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_FAILURE
