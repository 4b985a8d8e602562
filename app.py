import subprocess
import sys
import time
import webbrowser
import os
import signal
import atexit

from dotenv import load_dotenv

_processes = []


def cleanup():
    for proc in _processes:
        if proc.poll() is None:
            try:
                proc.terminate()
                proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                proc.kill()


def signal_handler(signum, frame):
    print("\n\nShutting down...")
    cleanup()
    sys.exit(0)


def main():
    load_dotenv()
    port = os.environ.get("AYANFE_UI_PORT", "8501")
    api_url = os.environ.get("AYANFE_API_URL", "http://localhost:5000")

    print("\nStarting AYANFE client...\n")

    atexit.register(cleanup)
    signal.signal(signal.SIGINT, signal_handler)
    if sys.platform != "win32":
        signal.signal(signal.SIGTERM, signal_handler)

    root = os.path.dirname(os.path.abspath(__file__))

    frontend = subprocess.Popen(
        [sys.executable, "-m", "streamlit", "run", os.path.join("ayanfe", "app.py"),
         "--server.headless", "true", "--server.port", port],
        cwd=root,
    )
    _processes.append(frontend)

    print(f"Backend:  {api_url}")
    print(f"Frontend: http://localhost:{port}")
    print("\nPress Ctrl+C to stop\n")

    time.sleep(2)
    try:
        webbrowser.open(f"http://localhost:{port}")
    except webbrowser.Error:
        pass

    try:
        while frontend.poll() is None:
            time.sleep(1)
        print("Frontend stopped unexpectedly")
    except KeyboardInterrupt:
        pass
    finally:
        cleanup()


if __name__ == "__main__":
    main()
