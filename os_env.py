from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

APP_NAME = 'HostInventory'
APP_VERSION = '1.0.0'

SERVER_HOST = os.getenv('SERVER_HOST', '127.0.0.1')
SERVER_PORT = int(os.getenv('SERVER_PORT', 8000))
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# 0 disables the per-probe timeout
PROBE_TIMEOUT = float(os.getenv('PROBE_TIMEOUT', 0)) or None
CHECKSITE_TIMEOUT = float(os.getenv('CHECKSITE_TIMEOUT', 5))
