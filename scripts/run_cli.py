#!/usr/bin/env python3
"""
Development runner for the moquery shell.

Runs the CLI straight from the source tree, loading variables from the
project's .env file first.
"""

import sys
from pathlib import Path

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

# Load environment variables
from dotenv import load_dotenv

env_file = project_root / ".env"
if env_file.exists():
    load_dotenv(env_file)
    print(f"✓ Loaded environment variables from {env_file}", file=sys.stderr)
else:
    print(f"⚠ No .env file found at {env_file}", file=sys.stderr)
    print("  Set MO_DATABASE__DATABASE_URL before running", file=sys.stderr)

if __name__ == "__main__":
    from moquery.main import main

    sys.exit(main(sys.argv[1:]))
