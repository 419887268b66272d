#!/usr/bin/env python3
"""
RTCP Receiver Runner.

Convenience script to run the receiver without installing the package.

Usage:
    python run_receiver.py [--port 5005]

Or run as module:
    python -m rtcp_feedback listen
"""

import sys
import os

# Add python directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'python'))

if __name__ == "__main__":
    from rtcp_feedback.__main__ import main
    sys.exit(main(["listen", *sys.argv[1:]]))
