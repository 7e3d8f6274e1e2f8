"""
Status history service
Parses the externally supplied heartbeat log into StatusEvent records
"""

import logging
from typing import Any, Iterable, List, Mapping, Tuple

import pandas as pd

from ..models import DayStatus, StatusEvent

logger = logging.getLogger(__name__)

DISCARD = "discard"
STRICT = "strict"
EVENT_STATUSES = {DayStatus.UP.value: DayStatus.UP, DayStatus.DOWN.value: DayStatus.DOWN}


class InvalidStatusEventError(ValueError):
    """Raised in strict mode when a status record cannot be parsed."""


def parse_status_history(
    raw_events: Iterable[Mapping[str, Any]],
    policy: str = DISCARD,
) -> Tuple[List[StatusEvent], int]:
    """
    Parse raw {status, timestamp} records

    Timestamps are parsed as ISO 8601 and normalised to UTC; naive values are
    taken as UTC. Records with an unparsable timestamp or an unknown status are
    dropped (policy "discard") or rejected (policy "strict").

    Returns: (events in input order, number of discarded records)
    """
    if policy not in (DISCARD, STRICT):
        raise ValueError(f"Unknown invalid-event policy: {policy}")

    records = list(raw_events)
    if not records:
        return [], 0

    df = pd.DataFrame.from_records(
        [{"status": r.get("status"), "timestamp": r.get("timestamp")} for r in records]
    )
    df["status"] = df["status"].astype(str).str.strip().str.lower()
    df["timestamp"] = pd.to_datetime(
        df["timestamp"].astype(str), utc=True, errors="coerce", format="ISO8601"
    )

    valid = df["timestamp"].notna() & df["status"].isin(list(EVENT_STATUSES))
    discarded = int((~valid).sum())

    if discarded:
        first_bad = records[int(valid[~valid].index[0])]
        if policy == STRICT:
            raise InvalidStatusEventError(f"Invalid status event: {dict(first_bad)}")
        logger.warning(f"Discarded {discarded} invalid status events (first: {dict(first_bad)})")

    events = [
        StatusEvent(status=EVENT_STATUSES[row.status], timestamp=row.timestamp.to_pydatetime())
        for row in df[valid].itertuples(index=False)
    ]
    return events, discarded


def load_status_history_csv(path: str, policy: str = DISCARD) -> Tuple[List[StatusEvent], int]:
    """
    Read a status,timestamp CSV file and parse it
    """
    logger.info(f"Reading status history from {path}...")
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing = {"status", "timestamp"} - set(df.columns)
    if missing:
        raise InvalidStatusEventError(f"Status history CSV is missing columns: {sorted(missing)}")

    events, discarded = parse_status_history(df.to_dict(orient="records"), policy=policy)
    logger.info(f"Loaded {len(events)} status events ({discarded} discarded).")
    return events, discarded
