"""
Example customization of TittaExport.

Assumes the experiment stored the Psychtoolbox window rect
[X0 Y0 X1 Y1] in the recording as expt.winRect, and adds:

- sessionInfo 'window size': the window rect
- timeSeries 'left/right gaze in pixel x/y': display-area gaze scaled
  to the window size
- timeSeries prior/post message columns (message brackets)
"""

from typing import Any

import numpy as np

from utils.recording_io import get_field

from .exporter import SESSION_INFO, TIME_SERIES, TittaExport


WINDOW_RECT_PATH = "expt.winRect"


class PixelGazeExport(TittaExport):
    """TittaExport with window size, pixel gaze and message brackets."""

    def add_user_defined_session_info(self) -> None:
        self.add_window_size()

    def add_user_defined_time_series(self) -> None:
        self.add_gaze_in_pixel("left", 0)
        self.add_gaze_in_pixel("left", 1)
        self.add_gaze_in_pixel("right", 0)
        self.add_gaze_in_pixel("right", 1)

    def user_defined_main(self) -> None:
        self.split_time_series_with_messages()

    def add_window_size(self, field_name: Any = None) -> bool:
        name = self.resolve_name("window size", field_name)
        try:
            window_rect = get_field(self.recording, WINDOW_RECT_PATH)
        except KeyError as e:
            self.skip_column(SESSION_INFO, name, f"field not available ({e})")
            return False
        return self.add_to_session_info(name, np.asarray(window_rect).ravel())

    def add_gaze_in_pixel(self, eye: str, axis: int, field_name: Any = None) -> bool:
        """
        Add one gaze coordinate in window pixels.

        gazePoint.onDisplayArea is normalized to [0, 1]; x is scaled by the
        window rect's X1 and y by its Y1.

        Args:
            eye: 'left' or 'right'
            axis: 0 for x, 1 for y
            field_name: Optional column name override
        """
        default_name = f"{eye} gaze in pixel {'xy'[axis]}"
        name = self.resolve_name(default_name, field_name)
        try:
            window_rect = np.asarray(get_field(self.recording, WINDOW_RECT_PATH)).ravel()
            on_display = np.asarray(
                get_field(self.recording, f"data.gaze.{eye}.gazePoint.onDisplayArea"),
                dtype=float
            )
        except KeyError as e:
            self.skip_column(TIME_SERIES, name, f"field not available ({e})")
            return False

        if on_display.ndim == 1:
            on_display = on_display.reshape(-1, 1)

        return self.add_to_time_series(name, on_display[axis, :] * window_rect[2 + axis])
