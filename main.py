#!/usr/bin/env python3
"""
RDS Engine Version Exporter

Periodically classifies every RDS cluster and instance as running an
available or deprecated engine version and serves the result on /metrics.

This script supports running directly from a source checkout. It adds the
local `src/` directory to sys.path before importing. For production use,
prefer installing the project and using the provided console script.

Examples:
  EXPORTER_AWS_API_INTERVAL_SECONDS=300 EXPORTER_SERVER_PORT=9100 python3 main.py
  python3 main.py --interval 300 --port 9100 --region eu-west-1
  python3 main.py --interval 300 --port 9100 --once --classification-policy fail_fast
"""

import os
import sys

# Add src/ to path to import modules directly
REPO_ROOT = os.path.dirname(os.path.abspath(__file__))
SRC_PATH = os.path.join(REPO_ROOT, "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from cli import main

if __name__ == "__main__":
    sys.exit(main())
