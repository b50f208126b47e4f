#!/usr/bin/env python3
"""
Fund Transfer Simulator Entry Point

Starts the FastAPI server (port 8090 unless configured otherwise) backed by
a fresh in-memory ledger.
"""

import sys

from fund_transfer.api import run_server
from fund_transfer.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("Starting Fund Transfer Simulator...")
    print(f"Transfer limits: P{int(config.min_amount)} - P{int(config.max_amount)}")
    print(f"Confirmations recorded for {config.user_email}")
    print(f"API available at: http://localhost:{config.api_port}")
    print(f"Documentation at: http://localhost:{config.api_port}/docs")
    print()

    try:
        run_server(debug=False)
    except KeyboardInterrupt:
        print("\nShutting down Fund Transfer Simulator...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
