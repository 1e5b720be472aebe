"""
Content-Security-Policy manager CLI
"""
import sys
import argparse
import json
from pathlib import Path

from csp_manager.catalog import PolicyError
from csp_manager.compaction import remove_redundant_sources
from csp_manager.config.loader import get_settings
from csp_manager.logging_config import setup_logging
from csp_manager.policy import ContentSecurityPolicy


def _render(policy, fmt):
    if fmt == 'json':
        return json.dumps(policy.to_json(), indent=2)
    if fmt == 'table':
        return json.dumps(policy.to_table(), indent=2)
    return str(policy)


def _read_reports(path):
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        return [data]
    return data


def build_parser():
    parser = argparse.ArgumentParser(
        prog='csp_manager',
        description="Content-Security-Policy manager - compact and normalize CSP headers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compact one directive's sources
  python -m csp_manager compact "'self' *.example.com www.example.com"

  # Normalize a full header
  python -m csp_manager normalize "script-src 'self' https://a.com a.com; upgrade-insecure-requests"

  # Allow what violation reports say was blocked, on top of a preset
  python -m csp_manager adjust reports.json --preset strict

  # Print a preset
  python -m csp_manager preset balanced --format json
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Compact command
    compact_parser = subparsers.add_parser('compact', help='Remove redundant sources from a source list')
    compact_parser.add_argument('sources', nargs='+', help='Source expressions (quoted as in a header)')

    # Normalize command
    normalize_parser = subparsers.add_parser('normalize', help='Load a header and print its canonical form')
    normalize_parser.add_argument('header', help='Content-Security-Policy header value')
    normalize_parser.add_argument('--format', choices=['text', 'json', 'table'],
                                  default='text', help='Output format')
    normalize_parser.add_argument('--strict', action='store_true',
                                  help='Reject rule names outside the directive catalog')

    # Adjust command
    adjust_parser = subparsers.add_parser('adjust', help='Apply CSP violation reports to a policy')
    adjust_parser.add_argument('reports', help='JSON file with one report or a list of reports')
    adjust_parser.add_argument('--header', default='', help='Header to start from')
    adjust_parser.add_argument('--preset', help='Preset to start from (applied before --header)')
    adjust_parser.add_argument('--format', choices=['text', 'json', 'table'],
                               default='text', help='Output format')

    # Preset command
    preset_parser = subparsers.add_parser('preset', help='Print a named preset policy')
    preset_parser.add_argument('name', nargs='?', help='Preset name (default from settings)')
    preset_parser.add_argument('--format', choices=['text', 'json', 'table'],
                               default='text', help='Output format')

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json)

    try:
        if args.command == 'compact':
            print(remove_redundant_sources(' '.join(args.sources)))

        elif args.command == 'normalize':
            policy = ContentSecurityPolicy(strict=True if args.strict else None)
            policy.load(args.header)
            print(_render(policy, args.format))

        elif args.command == 'adjust':
            if args.preset:
                policy = ContentSecurityPolicy.from_preset(args.preset)
            else:
                policy = ContentSecurityPolicy()
            policy.load(args.header)
            policy.adjust(*_read_reports(Path(args.reports)))
            print(_render(policy, args.format))

        elif args.command == 'preset':
            policy = ContentSecurityPolicy.from_preset(args.name)
            print(_render(policy, args.format))

    except (PolicyError, OSError, json.JSONDecodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
