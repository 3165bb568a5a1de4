"""
Titta recording -> flat tables.

TittaExport is the session object of one export: it owns the recording,
the rename map and one TableAccumulator holding the five output tables.

Tables:
- sessionInfo: tracker settings, system info, display/track box geometry
- timeSeries: one row per gaze sample
- messages: experiment messages (timestamp, text)
- TobiiLog, notifications: log records reshaped column-wise

Engineering approach:
- Every field goes through the same path: extract -> resolve name -> append
- A missing field or a malformed column is skipped with a warning and
  recorded in skipped_columns; the export always runs to completion
- Subclasses add fields through the add_user_defined_* hooks
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Union

import numpy as np

from event_alignment.bracket import (
    BracketColumnNames,
    Event,
    as_events,
    attach_event_brackets,
    bracket_events
)
from table_assembly.accumulator import ShapeError, Table, TableAccumulator
from table_assembly.field_names import (
    InvalidRenameMapError,
    RenameMap,
    resolve_field_name
)
from utils.recording_io import as_records, get_field, has_field

from .fields import (
    EXPORT_DATE,
    MESSAGE_FIELDS,
    MESSAGES_PATH,
    SESSION_INFO_FIELDS,
    SYSTEM_TIMESTAMP_PATH,
    TIME_SERIES_FIELDS,
    FieldSpec,
    find_field
)
from .log_tables import record_columns

logger = logging.getLogger(__name__)


SESSION_INFO = "sessionInfo"
TIME_SERIES = "timeSeries"
MESSAGES = "messages"
TOBII_LOG = "TobiiLog"
NOTIFICATIONS = "notifications"

TABLE_IDS = (SESSION_INFO, TIME_SERIES, MESSAGES, TOBII_LOG, NOTIFICATIONS)


@dataclass
class SkippedColumn:
    """A column that was not exported and why."""
    table_id: str
    column_name: str
    reason: str


class TittaExport:
    """
    Convert one Titta recording into delimited-ready tables.

    Usage:
        export = TittaExport(load_recording('session.mat'), rename_map={'eyetracker': 'tracker'})
        export.main()
        write_tables(export.tables, 'out/')

    Attributes:
        recording: Loaded recording (nested dicts)
        rename_map: Validated default-name -> export-name map, or None
        split_messages: Add message bracket columns to timeSeries in main()
        accumulator: Owner of the output tables
        skipped_columns: Columns dropped during the export
    """

    def __init__(
        self,
        recording: Dict[str, Any],
        rename_map: Any = None,
        split_messages: bool = False
    ):
        self.recording = recording
        self.rename_map: Optional[RenameMap] = None
        self.split_messages = split_messages
        self.accumulator = TableAccumulator(TABLE_IDS)
        self.skipped_columns: List[SkippedColumn] = []

        if rename_map is not None:
            self.add_rename_map(rename_map)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    @property
    def tables(self) -> Dict[str, Table]:
        return dict(self.accumulator.tables)

    @property
    def session_info(self) -> Table:
        return self.accumulator[SESSION_INFO]

    @property
    def time_series(self) -> Table:
        return self.accumulator[TIME_SERIES]

    @property
    def messages(self) -> Table:
        return self.accumulator[MESSAGES]

    @property
    def tobii_log(self) -> Table:
        return self.accumulator[TOBII_LOG]

    @property
    def notifications(self) -> Table:
        return self.accumulator[NOTIFICATIONS]

    def add_rename_map(self, raw_rename_map: Any) -> bool:
        """
        Validate and install a rename map.

        An invalid map is rejected and the current one (or none) is kept.

        Returns:
            True if the map was installed
        """
        try:
            rename_map = RenameMap.from_raw(raw_rename_map)
        except InvalidRenameMapError as e:
            if self.rename_map is None:
                logger.warning(f"Provided header name map is invalid. Using default. ({e})")
            else:
                logger.warning(
                    f"Provided header name map is invalid. "
                    f"Existing header names will NOT be modified. ({e})"
                )
            return False

        if self.rename_map:
            logger.warning("Overwriting existing header name map with provided one.")
        self.rename_map = rename_map
        return True

    # ------------------------------------------------------------------
    # Main
    # ------------------------------------------------------------------

    def main(self) -> "TittaExport":
        """Run the full export."""
        logger.info("Exporting session info...")
        self.create_session_info()

        logger.info("Exporting time series...")
        self.create_time_series()

        logger.info("Exporting messages and logs...")
        self.create_log()

        if self.split_messages:
            self.split_time_series_with_messages()

        self.user_defined_main()

        for table_id, table in self.accumulator.tables.items():
            logger.info(f"{table_id}: {table.row_count} rows x {len(table.columns)} columns")
        if self.skipped_columns:
            logger.warning(f"Skipped {len(self.skipped_columns)} columns during export")

        return self

    def create_session_info(self) -> None:
        self.add_export_date()
        for spec in SESSION_INFO_FIELDS:
            self.add_session_info_field(spec)
        self.add_user_defined_session_info()

    def create_time_series(self) -> None:
        for spec in TIME_SERIES_FIELDS:
            self.add_time_series_field(spec)
        self.add_user_defined_time_series()

    def create_log(self) -> None:
        for spec in MESSAGE_FIELDS:
            self.add_message_field(spec)
        self.add_records(TOBII_LOG, "TobiiLog")
        self.add_records(NOTIFICATIONS, "data.notifications")

    # Hooks for subclasses --------------------------------------------

    def add_user_defined_session_info(self) -> None:
        """Called at the end of create_session_info()."""

    def add_user_defined_time_series(self) -> None:
        """Called at the end of create_time_series()."""

    def user_defined_main(self) -> None:
        """Called at the end of main()."""

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def add_export_date(self, field_name: Any = None) -> bool:
        """Add today's date (YYYY-MM-DD) to sessionInfo."""
        name = self.resolve_name(EXPORT_DATE, field_name)
        return self.add_to_table(SESSION_INFO, name, date.today().isoformat())

    def add_session_info_field(
        self,
        field: Union[FieldSpec, str],
        field_name: Any = None
    ) -> bool:
        """
        Add one sessionInfo field.

        Args:
            field: FieldSpec or its default name (e.g. 'eyetracker')
            field_name: Optional column name overriding rename map and default
        """
        if isinstance(field, str):
            field = find_field(SESSION_INFO_FIELDS, field)
        return self.add_field(SESSION_INFO, field, field_name)

    def add_time_series_field(
        self,
        field: Union[FieldSpec, str],
        field_name: Any = None
    ) -> bool:
        """Add one timeSeries field (see add_session_info_field)."""
        if isinstance(field, str):
            field = find_field(TIME_SERIES_FIELDS, field)
        return self.add_field(TIME_SERIES, field, field_name)

    def add_message_field(
        self,
        field: Union[FieldSpec, str],
        field_name: Any = None
    ) -> bool:
        """Add one messages field (see add_session_info_field)."""
        if isinstance(field, str):
            field = find_field(MESSAGE_FIELDS, field)
        return self.add_field(MESSAGES, field, field_name)

    def add_field(self, table_id: str, field: FieldSpec, field_name: Any = None) -> bool:
        """
        Extract a field from the recording and append it to a table.

        Returns:
            True if the column was added
        """
        name = self.resolve_name(field.default_name, field_name)
        try:
            values = field.extract(self.recording)
        except (KeyError, IndexError) as e:
            self.skip_column(table_id, name, f"field not available ({e})")
            return False
        return self.add_to_table(table_id, name, values)

    def add_records(self, table_id: str, path: str) -> int:
        """
        Reshape a struct array (e.g. TobiiLog) into a table.

        Returns:
            Number of columns added
        """
        if not has_field(self.recording, path):
            logger.info(f"No {path} in recording; {table_id} left empty")
            return 0

        records = as_records(get_field(self.recording, path))
        added = 0
        for column_name, values in record_columns(records):
            if self.add_to_table(table_id, column_name, values):
                added += 1
        return added

    def resolve_name(self, default_name: str, field_name: Any = None) -> str:
        """Column name for a field: override > rename map > default."""
        return resolve_field_name(default_name, self.rename_map, field_name)

    def add_to_session_info(self, field_name: str, values: Any) -> bool:
        return self.add_to_table(SESSION_INFO, field_name, values)

    def add_to_time_series(self, field_name: str, values: Any) -> bool:
        return self.add_to_table(TIME_SERIES, field_name, values)

    def add_to_messages(self, field_name: str, values: Any) -> bool:
        return self.add_to_table(MESSAGES, field_name, values)

    def add_to_table(self, table_id: str, field_name: str, values: Any) -> bool:
        """
        Append a column, skipping it (with a warning) if it is malformed.

        field_name is used as is; pass it through resolve_name() first.

        Returns:
            True if the column was added
        """
        try:
            self.accumulator.append(table_id, field_name, values)
        except ShapeError as e:
            self.skip_column(table_id, field_name, e.reason)
            return False
        return True

    def skip_column(self, table_id: str, column_name: str, reason: str) -> None:
        """Record a column that will not be exported."""
        logger.warning(f"{table_id}: {reason}. Skipping: {column_name}")
        self.skipped_columns.append(SkippedColumn(table_id, column_name, reason))

    # ------------------------------------------------------------------
    # Message brackets
    # ------------------------------------------------------------------

    def split_time_series_with_messages(
        self,
        prior_message: Any = None,
        post_message: Any = None,
        prior_time: Any = None,
        post_time: Any = None
    ) -> bool:
        """
        Add prior/post message columns to timeSeries.

        Each gaze sample (system timestamp) gets the last message at or
        before it and the first message after it, with their timestamps.

        Args:
            prior_message: Optional column name for the prior message
            post_message: Optional column name for the post message
            prior_time: Optional column name for the prior message timestamp
            post_time: Optional column name for the post message timestamp

        Returns:
            True if all four columns were added
        """
        defaults = BracketColumnNames()
        names = BracketColumnNames(
            prior_time=self.resolve_name(defaults.prior_time, prior_time),
            prior_message=self.resolve_name(defaults.prior_message, prior_message),
            post_time=self.resolve_name(defaults.post_time, post_time),
            post_message=self.resolve_name(defaults.post_message, post_message),
        )

        try:
            sample_times = get_field(self.recording, SYSTEM_TIMESTAMP_PATH)
            events = self.message_events()
        except (KeyError, IndexError) as e:
            logger.warning(f"Cannot split time series with messages: {e}")
            return False

        brackets = bracket_events(events, _as_list(sample_times))

        try:
            attach_event_brackets(self.accumulator, TIME_SERIES, brackets, names)
        except ShapeError as e:
            self.skip_column(TIME_SERIES, e.column_name, e.reason)
            return False

        logger.info(f"Split {len(brackets)} samples with {len(events)} messages")
        return True

    def message_events(self) -> List[Event]:
        """
        Messages as (timestamp, text) events, in recording order.

        Raises:
            KeyError: The recording has no messages field
        """
        if np.size(get_field(self.recording, MESSAGES_PATH)) == 0:
            return []

        timestamps = find_field(MESSAGE_FIELDS, "system timestamp").extract(self.recording)
        texts = find_field(MESSAGE_FIELDS, "message").extract(self.recording)
        return as_events(zip(list(timestamps), [str(text) for text in texts]))


def _as_list(values: Any) -> list:
    # A single sample is loaded as a scalar
    if hasattr(values, 'tolist'):
        values = values.tolist()
    if isinstance(values, (list, tuple)):
        return list(values)
    return [values]
