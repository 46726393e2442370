#!/usr/bin/env python3
"""
Main CLI for the price span analytics workbench.
Usage: python cli.py {analyze,ask,chat,sample} ...
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from analysis.guardrails import DataQualityError
from analysis.metrics_aggregator import summarize_result
from ingestion.providers.csv_adapter import IngestionError, load_price_csv
from ingestion.providers.sample_generator import SampleGeneratorError, generate_price_series, series_to_csv
from pipeline.config import AnalysisConfig, ConfigError, load_config
from pipeline.session import AnalysisSession
from reports.formatters import format_days, format_percentage, format_price
from sentiment.synthetic_sentiment import make_rng

EXIT_COMMANDS = {'quit', 'exit', 'bye'}


def _parse_windows(value: str) -> Tuple[int, ...]:
    try:
        return tuple(int(part) for part in value.split(',') if part.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"windows must be comma-separated integers, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Span, moving average and sentiment analytics for daily price CSVs',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py --seed 7 sample --days 60 --output prices.csv
  python cli.py analyze prices.csv
  python cli.py ask prices.csv "should I buy or sell"
  python cli.py chat prices.csv
        """
    )
    parser.add_argument('--config',
                        help='Path to YAML config (default: $ANALYSIS_CONFIG_PATH)')
    parser.add_argument('--seed',
                        type=int,
                        help='Seed for synthetic sentiment and sample data')
    parser.add_argument('--windows',
                        type=_parse_windows,
                        help='Comma-separated moving average windows (default: 5,10,20)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    analyze = subparsers.add_parser('analyze', help='Run the pipeline and print a summary')
    analyze.add_argument('csv', help='Price CSV (Date,Open,High,Low,Close,Volume)')
    analyze.add_argument('--format',
                         choices=['summary', 'json'],
                         default='summary',
                         help='Output format (default: summary)')

    ask = subparsers.add_parser('ask', help='Answer one question about a price CSV')
    ask.add_argument('csv', help='Price CSV')
    ask.add_argument('question', nargs='+', help='Question text')

    chat = subparsers.add_parser('chat', help='Interactive question loop')
    chat.add_argument('csv', help='Price CSV')

    sample = subparsers.add_parser('sample', help='Generate a sample price CSV')
    sample.add_argument('--days', type=int, default=30, help='Number of days (default: 30)')
    sample.add_argument('--initial-price', type=float, default=100.0,
                        help='Starting price (default: 100)')
    sample.add_argument('--output', help='Write CSV here instead of stdout')

    return parser


def _resolve_config(args: argparse.Namespace) -> AnalysisConfig:
    config = load_config(args.config)
    overrides: Dict[str, Any] = {}
    if args.windows:
        overrides['window_sizes'] = args.windows
    if args.seed is not None:
        overrides['sentiment_seed'] = args.seed
    if not overrides:
        return config
    values = {
        'window_sizes': config.window_sizes,
        'default_volume': config.default_volume,
        'sentiment_seed': config.sentiment_seed,
        'history_limit': config.history_limit,
    }
    values.update(overrides)
    return AnalysisConfig(**values)


def _load_session(csv_path: str, config: AnalysisConfig) -> AnalysisSession:
    series = load_price_csv(csv_path, default_volume=config.default_volume)
    session = AnalysisSession(config)
    session.load(series)
    return session


def _print_summary(summary: Dict[str, Any]) -> None:
    period = summary['data_period']
    price = summary['price']
    span = summary['span']
    sentiment = summary['sentiment']
    correlation = summary['correlation']

    print(f"📅 Period: {period['start_date']} to {period['end_date']} ({period['trading_days']} bars)")
    print(f"💵 Latest close: {format_price(price['latest_close'])} "
          f"({format_percentage(price['day_change_pct'], signed=True)})")
    print(f"📏 Span: latest {format_days(span['latest'])}, "
          f"average {format_days(round(span['average'], 1))}, max {format_days(span['max'])}")

    for window, value in sorted(summary['moving_averages'].items()):
        print(f"📈 {window}-day MA: {format_price(value)}")
    if price['position']:
        print(f"📍 Position: {price['position'].capitalize()} 10-day MA")
    print(f"⚡ Momentum: {span['momentum_vs_average'].capitalize()} average span")

    if sentiment['latest_score'] is not None:
        print(f"💬 Latest sentiment: {format_percentage(sentiment['latest_score'] * 100, decimal_places=0)}")
    print(f"🔗 Sentiment/span correlation: {format_percentage(correlation['value'] * 100, decimal_places=0)} "
          f"({correlation['strength']})")

    if summary['insights']:
        print()
        print("Insights:")
        for insight in summary['insights']:
            print(f"  • {insight['title']}: {insight['message']}")


def run_analyze(args: argparse.Namespace, config: AnalysisConfig) -> int:
    session = _load_session(args.csv, config)
    summary = summarize_result(session.result)

    if args.format == 'json':
        print(json.dumps(summary, indent=2, default=str))
    else:
        _print_summary(summary)
    return 0


def run_ask(args: argparse.Namespace, config: AnalysisConfig) -> int:
    session = _load_session(args.csv, config)
    print(session.ask(' '.join(args.question)))
    return 0


def run_chat(args: argparse.Namespace, config: AnalysisConfig) -> int:
    session = _load_session(args.csv, config)
    print(f"Loaded {len(session.result.series)} bars. Ask a question, or type 'quit' to leave.")

    while True:
        try:
            text = input('> ')
        except EOFError:
            break
        if text.strip().lower() in EXIT_COMMANDS:
            break
        print(session.ask(text))
    return 0


def run_sample(args: argparse.Namespace, config: AnalysisConfig) -> int:
    series = generate_price_series(
        days=args.days,
        initial_price=args.initial_price,
        rng=make_rng(config.sentiment_seed)
    )
    csv_text = series_to_csv(series)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(csv_text, encoding='utf-8')
        print(f"Wrote {len(series)} bars to {output_path}")
    else:
        print(csv_text, end='')
    return 0


COMMANDS = {
    'analyze': run_analyze,
    'ask': run_ask,
    'chat': run_chat,
    'sample': run_sample,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'WARNING').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _resolve_config(args)
        return COMMANDS[args.command](args, config)
    except (ConfigError, IngestionError, DataQualityError, SampleGeneratorError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
