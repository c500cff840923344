#!/usr/bin/env python3
"""
Server startup script
Runs the service from a source checkout without installing it
"""

import os
import sys
from pathlib import Path


def main():
    current_dir = Path(__file__).resolve().parent
    src_dir = current_dir / "src"

    env = os.environ.copy()
    existing = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = f"{src_dir}{os.pathsep}{existing}" if existing else str(src_dir)

    os.chdir(current_dir)

    print("🚀 Starting EA Signal Poller (signal_polling.main)...")
    print(f"📁 Working directory: {Path.cwd()}")
    print(f"🐍 PYTHONPATH: {env['PYTHONPATH']}")

    os.execle(
        sys.executable,
        sys.executable,
        "-m",
        "signal_polling.main",
        env
    )


if __name__ == "__main__":
    main()
