"""
Simple runner - just run: python run_scraper.py

Usage:
    python run_scraper.py --seed                  # Seed source sites first
    python run_scraper.py                         # All sites, all categories
    python run_scraper.py --category chicken      # One category across sites
    python run_scraper.py --site bbcgoodfood      # One site
    python run_scraper.py --list                  # Recent jobs
"""
import sys

from recipe_scraper.main import main


if __name__ == '__main__':
    print("Press Ctrl+C to stop after the current recipe\n")
    sys.exit(main())
