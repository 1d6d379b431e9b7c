"""
main.py
========
Central entry point for wav-files-vad-api.

Run with:
    python main.py INPUT_DIR OUTPUT_DIR --addr-api http://host:port/vad
"""

import sys

from dotenv import load_dotenv

load_dotenv()  # Load .env before any module reads env vars

from wavvad.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
