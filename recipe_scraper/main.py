"""
Command line entry point for the recipe acquisition pipeline.
"""

import argparse
import signal
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .config import JobOptions, ScraperConfig
from .exceptions import JobNotFoundError, SiteNotFoundError
from .job_runner import JobRunner
from .storage_factory import create_job_runner, create_storage


# Global runner for signal handling
_runner: Optional[JobRunner] = None


def load_environment():
    """Load .env from the working directory if present."""
    env_path = Path.cwd() / '.env'
    if not env_path.exists():
        print(f"⚠️  Warning: .env file not found at {env_path}")
        print("Using environment variables from system")
    else:
        load_dotenv(env_path)
        print("✓ Loaded environment from .env")


def signal_handler(signum, frame):
    """Handle SIGINT/SIGTERM for graceful shutdown."""
    print("\n\n" + "=" * 60)
    print("STOP SIGNAL RECEIVED - SHUTTING DOWN GRACEFULLY")
    print("=" * 60)
    if _runner:
        _runner.stop()
        print("Waiting for current recipe to finish...")
    else:
        print("Exiting immediately...")
        sys.exit(0)


def run_scraping_job(args) -> int:
    """Run a scraping job with JobRunner."""
    global _runner

    options = JobOptions(
        site_name=args.site,
        category=args.category,
        max_pages_per_category=args.max_pages,
        delay_between_urls=args.url_delay,
        delay_between_categories=args.category_delay,
        delay_between_pages=args.page_delay
    )

    config = ScraperConfig()
    config.retry.max_retries = args.retries

    _runner = create_job_runner(config=config)

    signal.signal(signal.SIGINT, signal_handler)
    # SIGTERM is not reliably available on Windows
    if hasattr(signal, 'SIGTERM') and sys.platform != 'win32':
        signal.signal(signal.SIGTERM, signal_handler)

    try:
        result = _runner.run_job(options)
    except SiteNotFoundError as e:
        print(f"✗ {e}")
        return 2

    print("\n" + "=" * 60)
    print("SCRAPING JOB COMPLETE")
    print("=" * 60)
    print(f"Job ID:      {result.job_id}")
    print(f"Status:      {result.status}")
    print(f"Duration:    {result.duration_seconds / 60:.1f} minutes")
    print(f"Discovered:  {result.urls_discovered}")
    print(f"Processed:   {result.urls_processed}")
    print(f"Succeeded:   {result.urls_succeeded}")
    print(f"Skipped:     {result.urls_skipped}")
    print(f"Failed:      {result.urls_failed}")

    if result.errors:
        print(f"\nErrors ({len(result.errors)}):")
        for error in result.errors[:10]:
            print(f"  - {error[:100]}")
        if len(result.errors) > 10:
            print(f"  ... and {len(result.errors) - 10} more")

    return 0 if result.status == 'completed' else 1


def show_status(args) -> int:
    storage = create_storage()
    try:
        job = storage.get_job(args.status)
        if not job:
            print(f"✗ Job not found: {args.status}")
            return 1
        for key, value in job.items():
            print(f"{key:<18} {value}")
        return 0
    finally:
        storage.close()


def list_recent_jobs(args) -> int:
    storage = create_storage()
    try:
        jobs = storage.list_jobs(status=args.list_status, limit=args.limit)
        if not jobs:
            print("No scraping jobs found")
            return 0
        for job in jobs:
            print(
                f"{job['id']}  {job['status']:<10} {job['created_at']}  "
                f"processed={job['urls_processed']} ok={job['urls_succeeded']} "
                f"skipped={job['urls_skipped']} failed={job['urls_failed']}"
            )
        return 0
    finally:
        storage.close()


def cancel(args) -> int:
    storage = create_storage()
    try:
        if storage.cancel_job(args.cancel):
            print(f"✓ Cancelled job {args.cancel}")
        else:
            print(f"Job {args.cancel} already finished")
        return 0
    except JobNotFoundError as e:
        print(f"✗ {e}")
        return 1
    finally:
        storage.close()


def seed(args) -> int:
    from .seed_sources import SOURCE_SITES, seed_source_sites

    storage = create_storage()
    try:
        seeded = seed_source_sites(storage)
        return 0 if seeded == len(SOURCE_SITES) else 1
    finally:
        storage.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Recipe acquisition pipeline',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Seed the configured source sites (safe to re-run)
  recipe-scraper --seed

  # Scrape all sites, all categories
  recipe-scraper

  # Scrape only chicken recipes from all sites
  recipe-scraper --category chicken

  # Scrape vegetarian recipes from BBC Good Food with 3 pages
  recipe-scraper --site bbcgoodfood --category vegetarian --max-pages 3

  # Inspect jobs
  recipe-scraper --list
  recipe-scraper --status <job-id>
  recipe-scraper --cancel <job-id>
"""
    )

    # Job filters
    parser.add_argument('--site', type=str, help="Only scrape one site, by name (e.g. 'bbcgoodfood')")
    parser.add_argument('--category', type=str, help="Only scrape one category (e.g. 'chicken')")
    parser.add_argument(
        '--max-pages',
        type=int,
        default=2,
        help='Max search result pages per category (default: 2)'
    )

    # Rate limiting
    parser.add_argument(
        '--url-delay',
        type=float,
        default=2.5,
        help='Delay after each recipe import in seconds (default: 2.5)'
    )
    parser.add_argument(
        '--category-delay',
        type=float,
        default=3.0,
        help='Delay after each category in seconds (default: 3.0)'
    )
    parser.add_argument(
        '--page-delay',
        type=float,
        default=1.5,
        help='Delay between search result pages in seconds (default: 1.5)'
    )
    parser.add_argument(
        '--retries',
        type=int,
        default=3,
        help='Fetch attempts per search result page (default: 3)'
    )

    # Job management
    parser.add_argument('--status', type=str, metavar='JOB_ID', help='Show one job')
    parser.add_argument('--list', action='store_true', help='List recent jobs')
    parser.add_argument(
        '--list-status',
        type=str,
        choices=['pending', 'running', 'completed', 'failed'],
        help='Only list jobs with this status'
    )
    parser.add_argument('--limit', type=int, default=20, help='Jobs to list (default: 20)')
    parser.add_argument('--cancel', type=str, metavar='JOB_ID', help='Cancel a job')
    parser.add_argument('--seed', action='store_true', help='Seed the configured source sites')

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    load_environment()

    # Route to appropriate handler
    if args.seed:
        return seed(args)
    if args.status:
        return show_status(args)
    if args.list:
        return list_recent_jobs(args)
    if args.cancel:
        return cancel(args)
    return run_scraping_job(args)


if __name__ == '__main__':
    sys.exit(main())
