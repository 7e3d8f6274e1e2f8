# Filename: scripts/render_timeline.py
import argparse
import logging
import os
import sys
from datetime import datetime

# --- Configuration ---
# Set up basic logging to see output in the console
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

# Make the project's 'app' package importable when run from a checkout.
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.config import settings  # noqa: E402
from app.services.clock_service import utc_now  # noqa: E402
from app.services.event_service import load_status_history_csv  # noqa: E402
from app.services.report_service import periods_to_csv, summarize  # noqa: E402
from app.services.status_service import ResolverPolicy  # noqa: E402
from app.services.timeline_service import build_timeline, format_uptime  # noqa: E402
from app.services.window_service import get_timezone  # noqa: E402

# --- File Paths ---
# Default input location, relative to the project root.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
STATUS_CSV_PATH = os.path.join(BASE_DIR, 'data', 'input', 'status_history.csv')


def render_timeline(csv_path, uptime_seconds, server_start_time=None, now=None, out=None):
    """
    Reads a status,timestamp CSV, reconstructs the timeline and writes the
    status periods as CSV (to `out`, or stdout).
    """
    events, _ = load_status_history_csv(csv_path, policy=settings.INVALID_EVENT_POLICY)

    snapshot = build_timeline(
        uptime_seconds,
        events,
        now=now or utc_now(),
        server_start_time=server_start_time,
        tz=get_timezone(settings.TIMEZONE),
        policy=ResolverPolicy.from_settings(settings),
    )

    summary = summarize(snapshot)
    logging.info(
        f"Window starts {snapshot.window.window_start.date()} ({snapshot.total_days} days), "
        f"today is day {snapshot.today_index}, uptime {format_uptime(uptime_seconds)}."
    )
    logging.info(
        f"{len(snapshot.periods)} periods: {summary['up_days']} up days, "
        f"{summary['down_days']} down days ({summary['uptime_percentage']}% up)."
    )

    csv_data = periods_to_csv(snapshot)
    if out:
        with open(out, 'w', newline='') as f:
            f.write(csv_data)
        logging.info(f"Wrote periods to {out}")
    else:
        sys.stdout.write(csv_data)
    return snapshot


def main(argv=None):
    parser = argparse.ArgumentParser(description="Reconstruct a three-month uptime timeline from a status log.")
    parser.add_argument("csv_path", nargs="?", default=STATUS_CSV_PATH, help="status,timestamp CSV file")
    parser.add_argument("--uptime", type=int, default=0, help="reported uptime in seconds")
    parser.add_argument("--start", type=datetime.fromisoformat, default=None, help="server start time (ISO 8601)")
    parser.add_argument("--now", type=datetime.fromisoformat, default=None, help="override the current instant")
    parser.add_argument("--out", default=None, help="write the periods CSV here instead of stdout")
    args = parser.parse_args(argv)

    try:
        render_timeline(args.csv_path, args.uptime, args.start, args.now, args.out)
    except FileNotFoundError as e:
        logging.error(f"Error: The file was not found - {e}. Please check the file path.")
        return 1
    except ValueError as e:
        logging.error(f"Invalid status history: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
