# /run.py

import os
import subprocess
import sys

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def run_fastapi():
  host = os.getenv("HOST", "0.0.0.0")
  port = os.getenv("PORT", "8000")
  command = [sys.executable, "-m", "uvicorn", "gallery.main:app", "--host", host, "--port", port]
  if os.getenv("APP_ENV", "development") == "development":
    command.append("--reload")
  subprocess.run(command, cwd=BASE_DIR)


if __name__ == "__main__":
  run_fastapi()
