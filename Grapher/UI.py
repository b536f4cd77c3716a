# UI.py
"""PySide6 user interface for the Function Grapher.

Structure
---------
- Grapher UI: main window with the canvas, the formula form and the function list
- Settings UI: modal dialog for user preferences

Responsibilities (Grapher)
--------------------------
- Build window, canvas, form and list
- Compile and register formulas through the PlotSession
- Show invalid formulas as error dialogs
- Repaint the whole graph after every add / remove
- Clipboard integration for the current intersection points

Responsibilities (Settings)
---------------------------
- Load Current Settings and Settings Descriptions via Config_Manager
- Validate user input before saving
- Save and apply theme / grid changes immediately
"""

import logging
import sys

import pyperclip
from PySide6 import QtWidgets, QtGui
from PySide6.QtCore import Qt, QPointF, Signal

from . import error as E
from . import config_manager as config_manager
from . import Renderer as Renderer
from .PlotSession import PlotSession

logger = logging.getLogger(__name__)

FONT_FAMILY = "Arial"
FONT_PIXEL_SIZE = 14
CANVAS_BACKGROUND = "#FFFFFF"


def color_name(color):
    """Return the '#RRGGBB' name of a QColor or pass through a string."""
    if isinstance(color, QtGui.QColor):
        return color.name()
    return str(color)


class PainterSurface(Renderer.Surface):
    """Renderer.Surface backed by a QPainter that is already active."""

    def __init__(self, painter):
        self.painter = painter
        font = QtGui.QFont(FONT_FAMILY)
        font.setPixelSize(FONT_PIXEL_SIZE)
        self.painter.setFont(font)
        self.metrics = QtGui.QFontMetricsF(font)

    def _pen(self, color, width):
        pen = QtGui.QPen(QtGui.QColor(color))
        pen.setWidthF(width)
        return pen

    def clear(self, width, height):
        self.painter.fillRect(0, 0, width, height, QtGui.QColor(CANVAS_BACKGROUND))

    def draw_line(self, start, end, color, width=1):
        self.painter.setPen(self._pen(color, width))
        self.painter.drawLine(QPointF(start.x, start.y), QPointF(end.x, end.y))

    def draw_polyline(self, points, color, width=1):
        # A lone sample has nothing to connect to
        if len(points) < 2:
            return
        self.painter.setPen(self._pen(color, width))
        self.painter.setBrush(Qt.BrushStyle.NoBrush)
        self.painter.drawPolyline(QtGui.QPolygonF([QPointF(point.x, point.y) for point in points]))

    def fill_circle(self, center, radius, color):
        self.painter.setPen(Qt.PenStyle.NoPen)
        self.painter.setBrush(QtGui.QBrush(QtGui.QColor(color)))
        self.painter.drawEllipse(QPointF(center.x, center.y), radius, radius)

    def draw_text(self, text, position, color, align="left", baseline="bottom"):
        text_width = self.metrics.horizontalAdvance(text)
        x = position.x
        y = position.y

        if align == "right":
            x -= text_width
        elif align == "center":
            x -= text_width / 2

        # QPainter draws text on the alphabetic baseline
        if baseline == "top":
            y += self.metrics.ascent()
        elif baseline == "bottom":
            y -= self.metrics.descent()
        elif baseline == "middle":
            y += (self.metrics.ascent() - self.metrics.descent()) / 2

        self.painter.setPen(self._pen(color, 1))
        self.painter.drawText(QPointF(x, y), text)


class GraphCanvas(QtWidgets.QWidget):
    """Fixed-size widget that renders the session on every paint."""

    def __init__(self, session, settings, parent=None):
        super().__init__(parent)
        self.session = session
        self.intersections = []
        self.apply_settings(settings)

    def apply_settings(self, settings):
        self.settings = settings
        self.setFixedSize(settings["canvas_width"], settings["canvas_height"])
        self.update()

    def paintEvent(self, event):
        painter = QtGui.QPainter(self)
        try:
            painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing)
            self.intersections = Renderer.render(self.session, PainterSurface(painter), self.settings)
        finally:
            painter.end()


class SettingsDialog(QtWidgets.QDialog):
    """""

    This class is responsible for managing the settings window, saving the new settings and opening and error
    message if something went wrong.

    Only settings that have a description in ui_strings.json are shown. They fall into two categories:
    1. Checkboxes   (Managed with True or False)
    2. Input Fields (Managed as an Integer)

    """""

    settings_saved = Signal()  # Signal to tell the main window to update

    def __init__(self, parent=None):
        super().__init__(parent)
        self.widgets = {}

        # --- 1. Window Setup ---
        self.setWindowTitle("Grapher Settings")
        self.setMinimumSize(320, 200)

        main_layout = QtWidgets.QVBoxLayout(self)

        # --- 2. Load Settings ---
        self.setting_value_list = config_manager.load_setting_value("all")
        self.setting_description_list = config_manager.load_setting_description("all")

        # --- 3. Build Widgets ---
        for key_value, description in self.setting_description_list.items():
            if key_value not in self.setting_value_list:
                logger.warning("Description without setting: %s", key_value)
                continue
            value = self.setting_value_list[key_value]

            # --- 3a. Checkbox Builder (for Boolean settings) ---
            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(description)
                checkbox.setChecked(value)
                main_layout.addWidget(checkbox)
                self.widgets[key_value] = checkbox

            # --- 3b. Input Field Builder (for Integer settings) ---
            elif isinstance(value, int):
                row_h_layout = QtWidgets.QHBoxLayout()
                main_layout.addLayout(row_h_layout)
                label = QtWidgets.QLabel(description + ":")
                input_field = QtWidgets.QLineEdit()
                input_field.setPlaceholderText(str(value))  # Show current value as placeholder

                row_h_layout.addWidget(label)
                row_h_layout.addWidget(input_field)
                row_h_layout.setStretch(1, 1)
                self.widgets[key_value] = input_field

        # --- 4. OK / Cancel Buttons ---
        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel)
        main_layout.addWidget(button_box)
        main_layout.addStretch(1)

        button_box.accepted.connect(self.save_settings)
        button_box.rejected.connect(self.reject)

        self.update_darkmode()

    def save_settings(self):
        new_settings = dict(self.setting_value_list)

        # --- 1. Collect widget values ---
        for key_value, widget in self.widgets.items():
            if isinstance(widget, QtWidgets.QCheckBox):
                new_settings[key_value] = widget.isChecked()
                continue

            new_value_str = widget.text().strip()
            # If user left it blank, keep the old value
            if new_value_str == "":
                continue
            try:
                new_settings[key_value] = int(new_value_str)
            except ValueError:
                QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                               f"Error in input for '{key_value}':\n\n"
                                               f"'{new_value_str}' is not a whole number.\n\nPlease correct your input.")
                return  # Stop saving!

        # --- 2. Validation ---
        try:
            config_manager.validate_settings(new_settings)
        except E.ConfigurationError as e:
            QtWidgets.QMessageBox.critical(self, "Invalid Input:",
                                           f"Error {e.code}: {e.message}\n\nPlease correct your input.")
            return

        # --- 3. Write to File ---
        saved_settings = config_manager.save_setting(new_settings)
        if saved_settings != {}:
            self.setting_value_list = saved_settings
            self.settings_saved.emit()
            self.accept()
        else:
            QtWidgets.QMessageBox.critical(self, "Error", E.ERROR_MESSAGES["5001"])

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QDialog {background-color: #121212;}
                        QLabel {color: white;}
                        QCheckBox {color: white;}
                        QLineEdit {background-color: #444444;color: white;border: 1px solid #666666;}
                        QDialogButtonBox QPushButton {background-color: #666666;color: white;}""")
        else:
            self.setStyleSheet("")


class FunctionListItem(QtWidgets.QWidget):
    """One row of the function list: the formula in its color and a Remove button."""

    remove_requested = Signal(int)

    def __init__(self, formula, parent=None):
        super().__init__(parent)
        self.formula_id = formula.id

        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(4, 2, 4, 2)

        label = QtWidgets.QLabel(formula.text)
        label.setTextFormat(Qt.TextFormat.PlainText)
        label.setStyleSheet(f"color: {formula.color}; font-weight: bold;")
        layout.addWidget(label, 1)

        remove_button = QtWidgets.QPushButton("Remove")
        remove_button.clicked.connect(lambda checked=False: self.remove_requested.emit(self.formula_id))
        layout.addWidget(remove_button)


class GrapherWindow(QtWidgets.QWidget):

    def __init__(self, settings=None):
        super().__init__()

        # --- 1. Load Settings ---
        self.setting_value_list = settings or config_manager.load_setting_value("all")

        # --- 2. Session ---
        self.session = PlotSession(plot_step=self.setting_value_list["plot_step"],
                                   scan_options=Renderer.scan_options_from_settings(self.setting_value_list))
        self.current_color = QtGui.QColor(self.setting_value_list["default_color"])
        self.list_items = {}  # formula id -> QListWidgetItem

        # --- 3. Window Setup ---
        self.setWindowTitle("Function Grapher")
        main_h_layout = QtWidgets.QHBoxLayout(self)

        self.canvas = GraphCanvas(self.session, self.setting_value_list)
        main_h_layout.addWidget(self.canvas)

        side_v_layout = QtWidgets.QVBoxLayout()
        main_h_layout.addLayout(side_v_layout)

        # --- 4. Formula Form ---
        form_h_layout = QtWidgets.QHBoxLayout()
        side_v_layout.addLayout(form_h_layout)

        self.formula_input = QtWidgets.QLineEdit()
        self.formula_input.setPlaceholderText("y=2x+1")
        self.formula_input.returnPressed.connect(self.add_formula)
        form_h_layout.addWidget(self.formula_input, 1)

        self.color_button = QtWidgets.QPushButton()
        self.color_button.setFixedWidth(32)
        self.color_button.clicked.connect(self.pick_color)
        form_h_layout.addWidget(self.color_button)
        self.update_color_button()

        add_button = QtWidgets.QPushButton("Add")
        add_button.clicked.connect(self.add_formula)
        form_h_layout.addWidget(add_button)

        # --- 5. Function List ---
        self.function_list = QtWidgets.QListWidget()
        side_v_layout.addWidget(self.function_list, 1)

        # --- 6. Tool Buttons ---
        tools_h_layout = QtWidgets.QHBoxLayout()
        side_v_layout.addLayout(tools_h_layout)

        copy_button = QtWidgets.QPushButton("Copy intersections")
        copy_button.clicked.connect(self.copy_intersections)
        tools_h_layout.addWidget(copy_button)

        settings_button = QtWidgets.QPushButton("Settings")
        settings_button.clicked.connect(self.open_settings)
        tools_h_layout.addWidget(settings_button)

        self.update_darkmode()

    # --- Formula handling ---
    def add_formula(self):
        text = self.formula_input.text()
        if text.strip() == "":
            self.show_error(E.GrapherError(E.ERROR_MESSAGES["4000"], code="4000", formula=text))
            return

        try:
            formula = self.session.add(text, color_name(self.current_color))
        except E.InvalidFormulaError as e:
            # Nothing was registered; leave the input for correction
            self.show_error(e)
            return

        row_widget = FunctionListItem(formula)
        row_widget.remove_requested.connect(self.remove_formula)
        item = QtWidgets.QListWidgetItem(self.function_list)
        item.setSizeHint(row_widget.sizeHint())
        self.function_list.setItemWidget(item, row_widget)
        self.list_items[formula.id] = item

        self.formula_input.clear()
        self.canvas.update()

    def remove_formula(self, formula_id):
        self.session.remove(formula_id)
        item = self.list_items.pop(formula_id, None)
        if item is not None:
            self.function_list.takeItem(self.function_list.row(item))
        self.canvas.update()

    def pick_color(self):
        color = QtWidgets.QColorDialog.getColor(self.current_color, self, "Curve color")
        if color.isValid():
            self.current_color = color
            self.update_color_button()

    def update_color_button(self):
        self.color_button.setStyleSheet(f"background-color: {color_name(self.current_color)};")

    # --- Clipboard ---
    def copy_intersections(self):
        text = "\n".join(Renderer.format_point(point) for point in self.canvas.intersections)
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            logger.warning("Clipboard copy failed: %s", e)
            self.show_error(E.GrapherError(E.ERROR_MESSAGES["4001"], code="4001"))

    # --- Settings ---
    def open_settings(self):
        settings_dialog = SettingsDialog(self)
        settings_dialog.settings_saved.connect(self.reload_settings)
        settings_dialog.exec()  # "exec" makes the dialog modal (blocks main window)

    def reload_settings(self):
        self.setting_value_list = config_manager.validate_settings(config_manager.load_setting_value("all"))
        self.session.plot_step = self.setting_value_list["plot_step"]
        self.session.scan_options = Renderer.scan_options_from_settings(self.setting_value_list)
        self.canvas.apply_settings(self.setting_value_list)
        self.update_darkmode()

    def update_darkmode(self):
        if self.setting_value_list["darkmode"] == True:
            self.setStyleSheet("""
                        QWidget {background-color: #121212; color: white;}
                        QLineEdit {background-color: #444444; border: 1px solid #666666;}
                        QPushButton {background-color: #2e2e2e; border: 1px solid #444444; padding: 4px 10px;}""")
        else:
            self.setStyleSheet("")
        # Keep the swatch visible in both themes
        self.update_color_button()

    def get_message_box_stylesheet(self):
        if self.setting_value_list["darkmode"] == True:
            return """
                QMessageBox {
                    background-color: #121212;
                    color: white;
                }
                QLabel {
                    color: white;
                }
                QPushButton {
                    background-color: #2e2e2e;
                    color: white;
                    border: 1px solid #444444;
                    padding: 5px 15px;
                }
            """
        else:
            return ""

    def show_error(self, error_obj):
        error_box = QtWidgets.QMessageBox(self)
        error_box.setIcon(QtWidgets.QMessageBox.Icon.Critical)
        error_box.setWindowTitle(E.error_area(error_obj.code))
        error_box.setText(f"Error {error_obj.code}: {error_obj.message}")
        if error_obj.formula:
            error_box.setInformativeText(f"Formula: {error_obj.formula}")
        error_box.setStandardButtons(QtWidgets.QMessageBox.StandardButton.Ok)
        error_box.setStyleSheet(self.get_message_box_stylesheet())
        error_box.exec()


def main(settings=None):
    # --- Main Application Entry Point ---
    app = QtWidgets.QApplication(sys.argv)
    window = GrapherWindow(settings)
    window.show()
    sys.exit(app.exec())
