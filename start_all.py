import os
import subprocess
import sys
import time


def main():
    """
    Startup script for Chirp.
    Running this script will launch:
    1. API Server (Port 8000)
    2. Feed UI (Port 8501)
    """

    # Using sys.executable to ensure we use the same python environment
    api_cmd = [sys.executable, "-m", "uvicorn", "api.main:app", "--reload", "--port", "8000"]
    ui_cmd = [sys.executable, "-m", "streamlit", "run", "UI/feed.py", "--server.port", "8501"]

    processes = []

    print("=" * 50)
    print("        CHIRP")
    print("=" * 50)

    try:
        print("[1/2] Launching API Server on port 8000...")
        p_api = subprocess.Popen(api_cmd, cwd=os.getcwd())
        processes.append(p_api)
        time.sleep(2)  # Give API a moment to start

        print("[2/2] Launching Feed UI on port 8501...")
        p_ui = subprocess.Popen(ui_cmd, cwd=os.getcwd())
        processes.append(p_ui)

        print("\nAll services are running!")
        print("API:      http://localhost:8000")
        print("Feed UI:  http://localhost:8501")
        print("\nPress Ctrl+C to stop all services.")

        while True:
            time.sleep(1)
            # Check if any process has died
            for i, p in enumerate(processes):
                if p.poll() is not None:
                    print(f"\nProcess {i} exited with code {p.returncode}. Shutting down all services...")
                    return

    except KeyboardInterrupt:
        print("\n\nStopping all services...")
    finally:
        for p in processes:
            if p.poll() is None:
                p.terminate()
                try:
                    p.wait(timeout=2)
                except subprocess.TimeoutExpired:
                    p.kill()
        print("Services stopped successfully.")


if __name__ == "__main__":
    main()
