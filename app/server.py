import os
import subprocess
import sys

from flightmap.config import DATAPOINTS_FILE, load_settings


def run_streamlit(extra_args=None):
    """
    Launches the route explorer (ui.py) with Streamlit.
    Warns when the pipeline outputs the dashboard reads are not there yet.
    """
    app_dir = os.path.dirname(os.path.abspath(__file__))
    ui_path = os.path.join(app_dir, "ui.py")

    if not os.path.exists(ui_path):
        print(f"Error: ui.py not found at {ui_path}")
        sys.exit(1)

    settings = load_settings()
    if not os.path.exists(settings.output_file(DATAPOINTS_FILE)):
        print(f"Warning: no pipeline outputs in {settings.output_dir}. Run `flightmap <route data>` first.")

    print(f"Launching Streamlit app from: {ui_path}")

    command = [sys.executable, "-m", "streamlit", "run", ui_path] + list(extra_args or [])
    try:
        subprocess.run(command, check=True)
    except FileNotFoundError:
        print("Error: 'streamlit' command not found.")
        print("Please make sure Streamlit is installed correctly ('pip install streamlit').")
        sys.exit(1)
    except subprocess.CalledProcessError as e:
        print(f"An error occurred while running the Streamlit app: {e}")
        sys.exit(e.returncode)


def main():
    run_streamlit(sys.argv[1:])


if __name__ == "__main__":
    main()
