# Main.py
""""" Entry point for the Function Grapher.

   Responsibilities:
   - Detect run mode (script vs PyInstaller.exe)
   - Verify required files exist in development mode
   - Load and validate configuration, set up logging and start the Qt GUI

"""""
import logging
import sys
from pathlib import Path

from Grapher import config_manager as config_manager, error as E


# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent

logger = logging.getLogger("Grapher")


def check_files_exist():

    """
      Fail fast in development if required files are missing / moved / renamed.

      In production (.exe) the files are embedded by the bundler and this check is skipped.
    """

    package_dir = PROJECT_ROOT / "Grapher"

    REQUIRED = [
        package_dir / "UI.py",
        package_dir / "FormulaEngine.py",
        package_dir / "CoordinateMapper.py",
        package_dir / "CurveEngine.py",
        package_dir / "IntersectionEngine.py",
        package_dir / "PlotSession.py",
        package_dir / "Renderer.py",
        package_dir / "config_manager.py",
        PROJECT_ROOT / "config.json",
        PROJECT_ROOT / "ui_strings.json",
    ]

    missing_files = [file_path.name for file_path in REQUIRED if not file_path.exists()]

    if missing_files:
        print("Error: The following files are missing or in the wrong location:")
        for file_name in missing_files:
            print(f"- {file_name}")
        sys.exit(1)


def setup_logging(debug=False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


def main():

    """
    Load configuration and start the GUI.
    - Keep this thin: no business logic here.
    """

    try:
        all_settings = config_manager.validate_settings(config_manager.load_setting_value("all"))
    except E.ConfigurationError as e:
        print(f"Error {e.code}: {e.message}")
        sys.exit(1)

    setup_logging(all_settings["debug"])
    logger.info("Config loaded: %s", all_settings)

    # Imported late so a broken config is reported before Qt starts
    from Grapher import UI as UI

    # Delegate control to the UI layer; the UI owns the event loop.
    UI.main(all_settings)


if __name__ == "__main__":
    # Two explicit modes aid debugging & packaging clarity.
    is_running_as_exe = getattr(sys, 'frozen', False)

    if not is_running_as_exe:
        print("Developer Mode: Checking file paths...")
        check_files_exist()
    else:
        print("Production mode (.exe) is starting...")
    main()
