# config_manager.py
import json
import logging
import math
import sys
from pathlib import Path

from . import error as E

logger = logging.getLogger(__name__)

# Resolve project root depending on run mode (Script or .exe)
if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent.parent

config_json = PROJECT_ROOT / "config.json"
ui_strings = PROJECT_ROOT / "ui_strings.json"


DEFAULT_SETTINGS = {
    "canvas_width": 800,
    "canvas_height": 800,
    "grid_size": 50,
    "show_axis_tick_numbers": False,
    "plot_step": 0.1,
    "intersection_start": -10,
    "intersection_end": 10,
    "intersection_step": 0.01,
    "bisection_iterations": 10,
    "point_radius": 5,
    "default_color": "#FF0000",
    "intersection_color": "#008000",
    "darkmode": False,
    "debug": False,
}

POSITIVE_SETTINGS = ["canvas_width", "canvas_height", "grid_size", "plot_step",
                     "intersection_step", "point_radius"]

# Smallest step, in units of float spacing at the end of the walked range
MIN_STEP_ULPS = 1000


def _read_json(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    except FileNotFoundError:
        logger.debug("%s not found, using defaults", path.name)
        return {}
    except json.JSONDecodeError as e:
        raise E.ConfigurationError(f"{path.name} is not valid JSON: {e}", code="5000")


def load_setting_value(key_value):
    """Return one setting, or every setting for key_value == "all".

    Values missing from config.json fall back to DEFAULT_SETTINGS.
    """
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(_read_json(config_json))

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value):
    descriptions = _read_json(ui_strings)

    if key_value == "all":
        return descriptions

    else:
        return descriptions.get(key_value, key_value)


def is_real(value):
    """True for finite ints and floats; bools do not count."""
    return not isinstance(value, bool) and isinstance(value, (int, float)) and math.isfinite(value)


def step_advances(step, bound):
    """True if step is far above the float spacing at 'bound'."""
    return step >= MIN_STEP_ULPS * math.ulp(float(bound))


def validate_settings(settings_dict):
    """Raise ConfigurationError for values the grapher cannot work with."""
    for key_value in POSITIVE_SETTINGS:
        value = settings_dict.get(key_value)
        if not is_real(value) or value <= 0:
            raise E.ConfigurationError(f"'{key_value}' must be a positive number, got {value!r}", code="5000")

    iterations = settings_dict.get("bisection_iterations")
    if isinstance(iterations, bool) or not isinstance(iterations, int) or iterations < 0:
        raise E.ConfigurationError(f"'bisection_iterations' must be a non-negative integer, got {iterations!r}",
                                   code="5000")

    start = settings_dict.get("intersection_start")
    end = settings_dict.get("intersection_end")
    if not is_real(start) or not is_real(end) or start > end:
        raise E.ConfigurationError(f"Invalid intersection range: {start!r} .. {end!r}", code="5000")

    # x += step has to move x at every point of the walked range
    if not step_advances(settings_dict["intersection_step"], max(abs(start), abs(end))):
        raise E.ConfigurationError(f"'intersection_step' is too small for the range {start} .. {end}", code="5000")
    if not step_advances(settings_dict["plot_step"], settings_dict["canvas_width"] / settings_dict["grid_size"]):
        raise E.ConfigurationError("'plot_step' is too small for the visible range", code="5000")

    return settings_dict


def save_setting(settings_dict):
    try:
        with open(config_json, 'w', encoding='utf-8') as f:
            json.dump(settings_dict, f, indent=4)
            return settings_dict

    except OSError as e:
        logger.error("Settings could not be saved: %s", e)
        return {}
