"""
================================================================================
Main Window - Application Core
================================================================================

This module contains the main application window that ties together all
components: the serial link, live sensor display, flicker detection,
the recipe builder and the debug log.

Design Philosophy:
    "That's been one of my mantras - focus and simplicity." - Steve Jobs

The window is organized into clear sections:
    - Left side: Sensor cards, live plot, debug log
    - Right side: Controls (connection, detection, recipe builder)

Threading:
    Everything except the serial reader runs on the GUI thread. Recipes run
    on the GUI thread too; their waits spin a local event loop, so samples
    keep arriving and being evaluated while a recipe is paused.
"""

import logging
from collections import deque
from typing import Dict, Optional

import numpy as np
import pyqtgraph as pg
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QComboBox,
    QStatusBar, QScrollArea, QListWidget, QDoubleSpinBox, QGridLayout,
)
from PyQt6.QtCore import QEventLoop, QTimer, Qt
from PyQt6.QtGui import QFont

from .config import MonitorConfig
from .core import (
    Action, ActionType, CsvEventLog, FlickerDetector, FlickerSession,
    Recipe, RecipeExecutor, Sample, SerialLink, list_ports,
)
from .logging_setup import QtLogHandler
from .styles.theme import COLORS, FONT_FAMILY, FONT_NAME, SENSOR_COLORS, get_label_style
from .utils.constants import PLOT_HISTORY_SIZE, SENSOR_IDS
from .widgets import AnimatedButton, DebugLogView, FriendlyCard, PulsingDot, SensorCard

LOGGER = logging.getLogger(__name__)

# Recipe builder buttons: (label, action type)
RECIPE_BUTTONS = [
    ("Start Flicker Detection", ActionType.START_FLICKER),
    ("End Flicker Detection", ActionType.END_FLICKER),
    ("Connect USB Device", ActionType.CONNECT_DEVICE),
    ("Disconnect USB Device", ActionType.DISCONNECT_DEVICE),
    ("Sleep System", ActionType.SLEEP),
    ("Wake System", ActionType.WAKE),
]


def qt_sleep(seconds: float) -> None:
    """
    Wait ``seconds`` without blocking the Qt event loop.

    Used as the recipe executor's sleep so serial samples are still
    delivered and processed during delays and settle pauses.
    """
    if seconds <= 0:
        return
    loop = QEventLoop()
    QTimer.singleShot(int(seconds * 1000), loop.quit)
    loop.exec()


class MonitorWindow(QMainWindow):
    """
    Main application window for the dual sensor flicker monitor.

    The window provides:
        - Serial port selection and connection
        - Live readings, status and flicker counts for both sensors
        - Live plot of both channels
        - Start/stop of flicker detection sessions (CSV logging)
        - Recipe builder and runner
        - Debug log panel

    Example:
        >>> app = QApplication(sys.argv)
        >>> window = MonitorWindow(MonitorConfig())
        >>> window.show()
        >>> sys.exit(app.exec())
    """

    def __init__(self, config: Optional[MonitorConfig] = None,
                 log_handler: Optional[QtLogHandler] = None):
        """
        Initialize the main window.

        Args:
            config: Monitor settings (defaults if omitted)
            log_handler: Handler whose messages feed the debug panel
        """
        super().__init__()
        self.config = config or MonitorConfig()
        self.log_handler = log_handler
        self.setWindowTitle("Dual Sensor Flicker Monitor")
        self.setMinimumSize(1200, 800)

        self._init_core()
        self._init_display_state()

        self._build_ui()
        self._connect_signals()
        self._refresh_detection_ui()

    # =========================================================================
    # Initialization
    # =========================================================================

    def _init_core(self) -> None:
        """Create the link, detector, session and recipe executor."""
        self.link = SerialLink(
            baudrate=self.config.baudrate,
            poll_interval=self.config.poll_interval_s,
            write_timeout=self.config.write_timeout_s,
        )
        self.event_log = CsvEventLog()
        self.detector = FlickerDetector(
            sink=self.event_log, threshold=self.config.flicker_threshold_pct
        )
        self.session = FlickerSession(
            self.link, self.detector, self.event_log, self.config.log_dir
        )
        self.session.on_state_changed = self._on_session_changed

        self.recipe = Recipe()
        self.recipe_executor = RecipeExecutor(
            self.link, self.session,
            sleep=qt_sleep,
            settle_interval=self.config.settle_interval_s,
            on_step=self._on_recipe_step,
        )

    def _init_display_state(self) -> None:
        """Initialize plot history buffers."""
        self.sample_count = 0
        self.history: Dict[str, deque] = {
            sensor_id: deque(maxlen=PLOT_HISTORY_SIZE) for sensor_id in SENSOR_IDS
        }

    # =========================================================================
    # UI Building
    # =========================================================================

    def _build_ui(self) -> None:
        """Build the complete user interface."""
        self._apply_global_styles()

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QHBoxLayout(central)
        main_layout.setSpacing(20)
        main_layout.setContentsMargins(20, 20, 20, 20)

        # Left side: Display panel
        main_layout.addLayout(self._build_display_panel(), stretch=3)

        # Right side: Controls panel
        main_layout.addWidget(self._build_controls_panel())

        self._build_status_bar()

    def _apply_global_styles(self) -> None:
        """Apply application-wide styles."""
        self.setStyleSheet(f"""
            QMainWindow {{
                background-color: {COLORS['bg_main']};
            }}
            QLabel {{
                font-family: {FONT_FAMILY};
            }}
            QComboBox, QDoubleSpinBox, QListWidget {{
                font-family: {FONT_FAMILY};
                background-color: {COLORS['bg_card']};
                border: 2px solid {COLORS['border']};
                border-radius: 8px;
                padding: 6px 10px;
                font-size: 12px;
                color: {COLORS['text_dark']};
            }}
            QComboBox:hover, QDoubleSpinBox:hover {{
                border-color: {COLORS['primary']};
            }}
            QStatusBar {{
                background-color: {COLORS['bg_card']};
                color: {COLORS['text_light']};
                font-family: {FONT_FAMILY};
                font-size: 11px;
                padding: 6px;
            }}
        """)

    def _build_display_panel(self) -> QVBoxLayout:
        """Build the left display panel with sensor cards, plot and log."""
        layout = QVBoxLayout()
        layout.setSpacing(16)

        header = QLabel("Dual Sensor Flicker Monitor")
        header.setFont(QFont(FONT_NAME, 20, QFont.Weight.Bold))
        header.setStyleSheet(f"color: {COLORS['text_dark']};")
        layout.addWidget(header)

        # One card per sensor
        cards = QHBoxLayout()
        cards.setSpacing(16)
        self.sensor_cards: Dict[str, SensorCard] = {}
        for number, sensor_id in enumerate(SENSOR_IDS, start=1):
            color = pg.mkColor(SENSOR_COLORS[sensor_id]).name()
            card = SensorCard(f"Sensor {number}", color)
            self.sensor_cards[sensor_id] = card
            cards.addWidget(card)
        layout.addLayout(cards)

        layout.addWidget(self._build_plot_card(), stretch=2)
        layout.addWidget(self._build_debug_card(), stretch=1)
        return layout

    def _build_plot_card(self) -> FriendlyCard:
        """Build the live plot of both sensors."""
        card = FriendlyCard("Live Readings")

        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground(COLORS['bg_card'])
        self.plot_widget.setLabel('left', 'Value')
        self.plot_widget.setLabel('bottom', 'Sample')
        self.plot_widget.showGrid(x=True, y=True, alpha=0.2)
        self.plot_widget.addLegend()

        self.curves = {}
        for number, sensor_id in enumerate(SENSOR_IDS, start=1):
            self.curves[sensor_id] = self.plot_widget.plot(
                pen=pg.mkPen(color=SENSOR_COLORS[sensor_id], width=2),
                name=f"Sensor {number}",
            )

        card.add_widget(self.plot_widget)
        return card

    def _build_debug_card(self) -> FriendlyCard:
        """Build the debug log panel."""
        card = FriendlyCard("Debug Log")
        self.debug_view = DebugLogView(max_entries=self.config.debug_history)
        card.add_widget(self.debug_view)
        return card

    def _build_controls_panel(self) -> QScrollArea:
        """Build the right controls panel."""
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        scroll.setStyleSheet("QScrollArea { border: none; background-color: transparent; }")

        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setSpacing(16)
        layout.setContentsMargins(0, 0, 0, 0)

        layout.addWidget(self._build_connection_card())
        layout.addWidget(self._build_detection_card())
        layout.addWidget(self._build_recipe_card())
        layout.addStretch()

        scroll.setWidget(widget)
        scroll.setFixedWidth(360)
        return scroll

    def _build_connection_card(self) -> FriendlyCard:
        """Build the connection controls card."""
        card = FriendlyCard("Connection")

        port_layout = QHBoxLayout()
        port_label = QLabel("Port:")
        port_label.setFont(QFont(FONT_NAME, 11))
        port_label.setStyleSheet(get_label_style('text_dark'))
        port_layout.addWidget(port_label)

        self.port_combo = QComboBox()
        self._refresh_ports()
        port_layout.addWidget(self.port_combo, stretch=1)
        card.add_layout(port_layout)

        btn_layout = QHBoxLayout()
        btn_layout.setSpacing(12)

        self.connect_btn = AnimatedButton("Connect", "success")
        self.connect_btn.clicked.connect(self._toggle_connection)
        btn_layout.addWidget(self.connect_btn)

        self.refresh_btn = AnimatedButton("Refresh", "secondary")
        self.refresh_btn.clicked.connect(self._refresh_ports)
        btn_layout.addWidget(self.refresh_btn)
        card.add_layout(btn_layout)

        self.connection_status = QLabel("Disconnected")
        self.connection_status.setFont(QFont(FONT_NAME, 10))
        self.connection_status.setStyleSheet(get_label_style('text_light'))
        self.connection_status.setWordWrap(True)
        card.add_widget(self.connection_status)

        return card

    def _build_detection_card(self) -> FriendlyCard:
        """Build the flicker detection controls card."""
        card = FriendlyCard("Flicker Detection")

        status_layout = QHBoxLayout()
        self.detection_dot = PulsingDot(COLORS['success'])
        status_layout.addWidget(self.detection_dot)

        self.detection_status = QLabel("Idle")
        self.detection_status.setFont(QFont(FONT_NAME, 11))
        self.detection_status.setStyleSheet(get_label_style('text_light'))
        status_layout.addWidget(self.detection_status)
        status_layout.addStretch()
        card.add_layout(status_layout)

        self.detection_btn = AnimatedButton("Start Flicker Detection", "success")
        self.detection_btn.clicked.connect(self._toggle_flicker_detection)
        card.add_widget(self.detection_btn)

        self.log_path_label = QLabel("")
        self.log_path_label.setFont(QFont(FONT_NAME, 9))
        self.log_path_label.setStyleSheet(get_label_style('text_light'))
        self.log_path_label.setWordWrap(True)
        card.add_widget(self.log_path_label)

        return card

    def _build_recipe_card(self) -> FriendlyCard:
        """Build the recipe builder card."""
        card = FriendlyCard("Recipe Builder")

        grid = QGridLayout()
        grid.setSpacing(8)
        self.recipe_buttons = []
        for i, (label, action_type) in enumerate(RECIPE_BUTTONS):
            btn = AnimatedButton(label, "secondary")
            btn.clicked.connect(
                lambda _checked=False, t=action_type: self._add_recipe_step(Action(t))
            )
            grid.addWidget(btn, i // 2, i % 2)
            self.recipe_buttons.append(btn)
        card.add_layout(grid)

        delay_layout = QHBoxLayout()
        self.delay_spin = QDoubleSpinBox()
        self.delay_spin.setRange(0.1, 3600.0)
        self.delay_spin.setDecimals(1)
        self.delay_spin.setSuffix(" s")
        self.delay_spin.setValue(self.config.default_delay_s)
        delay_layout.addWidget(self.delay_spin)

        self.add_delay_btn = AnimatedButton("Add Delay", "secondary")
        self.add_delay_btn.clicked.connect(
            lambda: self._add_recipe_step(Action.delay(self.delay_spin.value()))
        )
        delay_layout.addWidget(self.add_delay_btn)
        card.add_layout(delay_layout)
        self.recipe_buttons.append(self.add_delay_btn)

        self.recipe_list = QListWidget()
        self.recipe_list.setMinimumHeight(160)
        card.add_widget(self.recipe_list)

        edit_layout = QHBoxLayout()
        self.remove_step_btn = AnimatedButton("Remove", "secondary")
        self.remove_step_btn.clicked.connect(self._remove_recipe_step)
        edit_layout.addWidget(self.remove_step_btn)

        self.clear_recipe_btn = AnimatedButton("Clear", "secondary")
        self.clear_recipe_btn.clicked.connect(self._clear_recipe)
        edit_layout.addWidget(self.clear_recipe_btn)
        card.add_layout(edit_layout)
        self.recipe_buttons.extend([self.remove_step_btn, self.clear_recipe_btn])

        run_layout = QHBoxLayout()
        self.recipe_dot = PulsingDot(COLORS['primary'])
        run_layout.addWidget(self.recipe_dot)
        self.run_recipe_btn = AnimatedButton("Run Recipe", "primary")
        self.run_recipe_btn.clicked.connect(self._run_recipe)
        self.run_recipe_btn.setEnabled(False)
        run_layout.addWidget(self.run_recipe_btn, stretch=1)
        card.add_layout(run_layout)

        return card

    def _build_status_bar(self) -> None:
        """Build the status bar."""
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Disconnected")

    def _connect_signals(self) -> None:
        """Wire the serial link and the log handler to the window."""
        self.link.sample_received.connect(self._on_sample_received)
        self.link.error_occurred.connect(self._on_link_error)
        if self.log_handler is not None:
            self.log_handler.emitter.message.connect(self.debug_view.append_message)

    def _set_status(self, text: str) -> None:
        self.status_bar.showMessage(text)

    # =========================================================================
    # Connection Handlers
    # =========================================================================

    def _refresh_ports(self) -> None:
        """Refresh the list of available serial ports."""
        self.port_combo.clear()
        ports = list_ports()
        for port in ports:
            self.port_combo.addItem(port, port)
        if not ports:
            self.port_combo.addItem("No ports found", None)

    def _toggle_connection(self) -> None:
        """Toggle serial connection on/off."""
        if self.link.is_connected:
            self._disconnect()
        else:
            self._connect()

    def _connect(self) -> None:
        """Open the selected port."""
        port = self.port_combo.currentData()
        if not port:
            self._set_status("Please select a port first")
            return

        result = self.link.connect_port(port)
        if not result:
            self._set_status(f"Error: {result.error}")
            self.connection_status.setText(f"Error: {result.error}")
            return

        self.connect_btn.setText("Disconnect")
        self.connect_btn.set_color_scheme("danger")
        self.port_combo.setEnabled(False)
        self.connection_status.setText(f"Connected to {port}")
        self._set_status("Connected")
        self._refresh_detection_ui()

    def _disconnect(self) -> None:
        """Close the port and reset detection state."""
        result = self.link.disconnect_port()
        self.session.handle_disconnect()
        self._show_disconnected()
        if not result:
            self._set_status(f"Error: {result.error}")

    def _on_link_error(self, error: str) -> None:
        """The reader thread lost the port."""
        self.link.disconnect_port()
        self.session.handle_disconnect()
        self._show_disconnected()
        self._set_status(f"Error: {error}")

    def _show_disconnected(self) -> None:
        self.connect_btn.setText("Connect")
        self.connect_btn.set_color_scheme("success")
        self.port_combo.setEnabled(True)
        self.connection_status.setText("Disconnected")
        self._set_status("Disconnected")
        self._refresh_detection_ui()

    # =========================================================================
    # Data Processing
    # =========================================================================

    def _on_sample_received(self, sensor1: float, sensor2: float) -> None:
        """Display a new reading and feed it to the detector."""
        sample = Sample.now(sensor1, sensor2)
        self.sample_count += 1

        self.detector.on_sample(sample)

        for sensor_id in SENSOR_IDS:
            value = sample.value(sensor_id)
            self.history[sensor_id].append(value)
            self.sensor_cards[sensor_id].set_value(value)
        self._update_plot()
        self._refresh_sensor_status()

    def _update_plot(self) -> None:
        """Redraw both traces from the history buffers."""
        for sensor_id, curve in self.curves.items():
            y_data = np.fromiter(self.history[sensor_id], dtype=float)
            x_data = np.arange(self.sample_count - len(y_data), self.sample_count)
            curve.setData(x_data, y_data)

    def _refresh_sensor_status(self) -> None:
        """Update status text and counts on both sensor cards."""
        for sensor_id, card in self.sensor_cards.items():
            if not self.detector.is_active:
                card.set_status("Idle")
            elif self.detector.has_open_run(sensor_id):
                card.set_status("Flicker Detected", flicker=True)
            else:
                card.set_status("Monitoring")
            card.set_count(self.detector.flicker_count(sensor_id))

    # =========================================================================
    # Flicker Detection
    # =========================================================================

    def _toggle_flicker_detection(self) -> None:
        """Start or stop a detection session."""
        if self.session.is_active:
            result = self.session.stop_session()
            if result:
                self._set_status("Flicker Detection Stopped")
        else:
            result = self.session.start_session()
            if result:
                self._set_status("Flicker Detection Running")

        if not result:
            self._set_status(f"Error: {result.error}")

    def _on_session_changed(self, active: bool) -> None:
        """Session started or stopped (by the button or by a recipe)."""
        if active and self.event_log.sensor_log_path is not None:
            self.log_path_label.setText(f"Logging to {self.event_log.sensor_log_path}")
        self._refresh_detection_ui()

    def _refresh_detection_ui(self) -> None:
        """Sync the detection card with the session state."""
        active = self.session.is_active
        if active:
            self.detection_btn.setText("Stop Flicker Detection")
            self.detection_btn.set_color_scheme("danger")
            self.detection_status.setText("Flicker Detection Running")
            self.detection_dot.start()
        else:
            self.detection_btn.setText("Start Flicker Detection")
            self.detection_btn.set_color_scheme("success")
            self.detection_status.setText("Idle" if not self.link.is_connected else "Stopped")
            self.detection_dot.stop()

        # Stopping is always allowed; starting needs a connection
        self.detection_btn.setEnabled(active or self.link.is_connected)
        self._refresh_sensor_status()

    # =========================================================================
    # Recipe Builder
    # =========================================================================

    def _add_recipe_step(self, action: Action) -> None:
        self.recipe.add(action)
        self.recipe_list.addItem(action.label)
        self._refresh_recipe_ui()

    def _remove_recipe_step(self) -> None:
        row = self.recipe_list.currentRow()
        if row < 0:
            return
        self.recipe.remove(row)
        self.recipe_list.takeItem(row)
        self._refresh_recipe_ui()

    def _clear_recipe(self) -> None:
        self.recipe.clear()
        self.recipe_list.clear()
        self._refresh_recipe_ui()

    def _refresh_recipe_ui(self) -> None:
        running = self.recipe_executor.is_running
        self.run_recipe_btn.setEnabled(not running and len(self.recipe) > 0)
        self.run_recipe_btn.setText("Running Recipe..." if running else "Run Recipe")
        for btn in self.recipe_buttons:
            btn.setEnabled(not running)
        # The port must stay open while a recipe drives it
        self.connect_btn.setEnabled(not running)
        self.refresh_btn.setEnabled(not running)

    def _run_recipe(self) -> None:
        """Replay the recipe; returns when it completes or aborts."""
        if self.recipe_executor.is_running or len(self.recipe) == 0:
            return

        self.recipe_dot.start()
        self._refresh_recipe_ui()
        self._set_status("Running Recipe...")
        try:
            result = self.recipe_executor.run(self.recipe)
        finally:
            self.recipe_dot.stop()
            self.recipe_list.clearSelection()
            self._refresh_recipe_ui()

        self._set_status(result.status)

    def _on_recipe_step(self, index: int, action: Action) -> None:
        """Highlight the step about to run."""
        self.recipe_list.setCurrentRow(index)
        self._set_status(f"Recipe step {index + 1}/{len(self.recipe)}: {action.label}")

    # =========================================================================
    # Cleanup
    # =========================================================================

    def closeEvent(self, event) -> None:
        """Handle window close event."""
        LOGGER.info("Closing monitor")
        if self.session.is_active:
            self.session.stop_session()
        self.link.stop()
        if self.log_handler is not None:
            logging.getLogger().removeHandler(self.log_handler)
        event.accept()
