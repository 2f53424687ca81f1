"""
Build CLI for ListingHub.

Usage:
    # Build with settings from the environment / .env
    python -m listing_hub.cli

    # Explicit inputs
    python -m listing_hub.cli --archive data/data.zip --output public

    # Alternate env file and site metadata
    python -m listing_hub.cli --env-file .env.staging --site-config config/site.yml
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from listing_hub.config import Settings, SiteConfigError
from listing_hub.domain.pipelines import DirectoryBuildError
from listing_hub.io.readers import ArchiveReadError
from listing_hub.site.builder import build_site
from listing_hub.utils.logging import get_logger, set_log_level

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="listing-hub",
        description="Generate the static directory site from a CSV archive",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--archive",
        help="Zip archive with beauty_salon.csv, city.csv, state.csv, category.csv "
        "(overrides LH_ARCHIVE_PATH)",
    )
    parser.add_argument(
        "--output",
        help="Output directory for the generated site (overrides LH_OUTPUT_DIR)",
    )
    parser.add_argument(
        "--site-config",
        help="Site metadata YAML (overrides LH_SITE_CONFIG)",
    )
    parser.add_argument(
        "--env-file",
        help="Load environment variables from this file before reading settings",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show diagnostic information (DEBUG-level logs)",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        default=False,
        help="Minimal output (errors and final summary only)",
    )
    parser.add_argument(
        "--raise-on-error",
        action="store_true",
        help="Raise exceptions instead of returning a non-zero exit code",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run a full site build.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for a failed build)
    """
    args = build_parser().parse_args(argv)

    if args.env_file:
        env_path = Path(args.env_file)
        if not env_path.is_file():
            print(f"❌ Env file not found: {env_path}", file=sys.stderr)
            return 1
        load_dotenv(env_path, override=True)

    try:
        settings = Settings()
    except ValidationError as e:
        logger.error("cli.settings.invalid", error=str(e))
        print(f"❌ Invalid settings: {e}", file=sys.stderr)
        return 1

    overrides = {
        "archive_path": args.archive,
        "output_dir": args.output,
        "site_config": args.site_config,
    }
    settings = settings.model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )

    if args.verbose:
        set_log_level("DEBUG")
    elif args.quiet:
        set_log_level("ERROR")
    else:
        set_log_level(settings.LOG_LEVEL)

    try:
        site = settings.load_site()
        result = build_site(
            settings.archive_path, settings.output_dir, site, settings=settings
        )
    except (ArchiveReadError, SiteConfigError, DirectoryBuildError) as e:
        logger.error(
            "cli.build.failed", error=str(e), error_type=type(e).__name__
        )
        print(f"❌ Build failed: {e}", file=sys.stderr)
        if args.raise_on_error:
            raise
        return 1
    except KeyboardInterrupt:
        print("\n⚠️  Build interrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        logger.exception("cli.build.unexpected_error", error=str(e))
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        if args.raise_on_error:
            raise
        return 1

    print(f"✅ {result.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
