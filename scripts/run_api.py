#!/usr/bin/env python
"""
Back-Office API Server Entrypoint
=================================
Starts the Logistics Back-Office API using Uvicorn.

Usage:
    python scripts/run_api.py
    python scripts/run_api.py --port 8080
    python scripts/run_api.py --host 127.0.0.1 --port 5001 --reload

Environment Variables:
    DB_CONFIG_PATH: Path to database config (default: config/db_config.yml)
    DATABASE_URL:   SQLAlchemy URL, overrides the config file
    LOG_FILE:       Optional rotating log file
"""

import os
import sys
import argparse
from pathlib import Path

import uvicorn


def print_banner():
    """Print the application banner."""
    print()
    print("=" * 70)
    print("  Logistics Back-Office API")
    print("=" * 70)
    print()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Logistics Back-Office API Server',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                           # Start on 0.0.0.0:5001
  %(prog)s --port 8080               # Start on port 8080
  %(prog)s --host 127.0.0.1          # Localhost only
  %(prog)s --reload                  # Auto-reload on code changes
  %(prog)s --workers 4               # Use 4 worker processes

API Documentation:
  Swagger UI: http://localhost:5001/docs
  ReDoc:      http://localhost:5001/redoc

Key Endpoints:
  GET /api/status                      - Server status
  GET /api/express                     - Express volume records
  GET /api/exception/stats/summary     - Month-over-month exception report
  GET /api/exception/stats/analysis    - SKU / courier / daily breakdown
  GET /api/container/stats/weekly      - Containers by work week
  GET /api/inventory                   - Inventory discrepancies
        """
    )

    parser.add_argument(
        '--host',
        default='0.0.0.0',
        help='Host to bind to (default: 0.0.0.0)'
    )

    parser.add_argument(
        '--port',
        type=int,
        default=int(os.environ.get('PORT', 5001)),
        help='Port to bind to (default: $PORT or 5001)'
    )

    parser.add_argument(
        '--reload',
        action='store_true',
        help='Enable auto-reload for development'
    )

    parser.add_argument(
        '--workers',
        type=int,
        default=1,
        help='Number of worker processes (default: 1, use >1 for production)'
    )

    parser.add_argument(
        '--config',
        default=os.environ.get('DB_CONFIG_PATH', 'config/db_config.yml'),
        help='Path to database config file (default: config/db_config.yml)'
    )

    parser.add_argument(
        '--log-level',
        default='info',
        choices=['debug', 'info', 'warning', 'error'],
        help='Logging level (default: info)'
    )

    args = parser.parse_args()

    os.environ['DB_CONFIG_PATH'] = args.config
    os.environ['LOG_LEVEL'] = args.log_level.upper()

    if not os.environ.get('DATABASE_URL') and not Path(args.config).exists():
        print(f"ERROR: Database config not found: {args.config}")
        print("       Set DATABASE_URL or copy config/db_config.example.yml")
        sys.exit(1)

    print_banner()
    print(f"  Host:       {args.host}")
    print(f"  Port:       {args.port}")
    print(f"  Reload:     {args.reload}")
    print(f"  Workers:    {args.workers}")
    print(f"  DB Config:  {os.environ.get('DATABASE_URL') and 'DATABASE_URL' or args.config}")
    print(f"  Log Level:  {args.log_level}")
    print()
    print(f"  API Docs:   http://{args.host if args.host != '0.0.0.0' else 'localhost'}:{args.port}/docs")
    print()
    print("=" * 70)
    print()

    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=args.workers if not args.reload else 1,  # Workers doesn't work with reload
        log_level=args.log_level
    )


if __name__ == '__main__':
    main()
