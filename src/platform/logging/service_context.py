"""
Service context extraction for logging.

Identifies which client process wrote a log line so that logs from
several terminals/kiosks sharing one log sink can be told apart.
"""

import os
from functools import lru_cache
import socket


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'showbook')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Host name is stable per kiosk; PID separates processes on the same host
    try:
        host = socket.gethostname().split('.')[0][:12] or 'localhost'
    except OSError:
        host = 'localhost'

    return f'{service_name}@{deploy_env}:{host}:{os.getpid()}'
