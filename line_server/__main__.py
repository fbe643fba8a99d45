#!/usr/bin/env python3
# line_server/__main__.py
import sys

from line_server.server_launcher import main

if __name__ == "__main__":
    sys.exit(main())
