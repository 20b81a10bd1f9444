"""CLI entrypoint for provlint."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .auditor import audit
from .config import ConfigError, load_config
from .logging import configure_logging, get_logger
from .syntax.parser import FatalParseError

_LOGGER = get_logger("cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="provlint",
        description=(
            "Check a provider's resource and datasource schemas against its "
            "documentation and API design rules."
        ),
    )
    parser.add_argument(
        "--provider-name",
        required=True,
        help="Prefix name of the provider, e.g. 'acme' for acme_widget.",
    )
    parser.add_argument(
        "--provider-path",
        required=True,
        help="Path to the provider package containing the registration file.",
    )
    parser.add_argument(
        "--docs-path",
        default=None,
        help="Documentation root (defaults to <provider-path>/../website).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .provlint.yml file (defaults to <provider-path>/.provlint.yml).",
    )
    parser.add_argument(
        "--strict-catalog",
        action="store_true",
        default=None,
        help="Treat duplicate resource or datasource names as fatal errors.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        "--debug",
        dest="verbose",
        action="store_true",
        default=False,
        help="Enable debug output.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for provlint."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file).expanduser() if args.log_file else None,
    )

    try:
        config = load_config(
            args.provider_name,
            Path(args.provider_path),
            config_path=Path(args.config) if args.config else None,
            verbose=bool(args.verbose),
        )
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    if args.docs_path:
        config.docs_path = Path(args.docs_path).expanduser().resolve()
    if args.strict_catalog is not None:
        config.strict_catalog = True

    try:
        summary = audit(config)
    except FatalParseError as exc:
        parser.exit(1, f"Failed to parse the provider: {exc}\n")
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except ValueError as exc:
        parser.exit(1, f"provlint failed: {exc}\n")

    _LOGGER.info(
        "Checked %d files: %d violations",
        summary.files_checked,
        len(summary.violations),
    )
    for rule, count in sorted(summary.by_rule().items()):
        _LOGGER.debug("%s: %d", rule, count)


if __name__ == "__main__":
    main(sys.argv[1:])
