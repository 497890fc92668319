"""
Service context extraction for log lines.

Identifies which process wrote a line: the admission API and any number of gate
devices write to the same collector during an event.
"""

import os
import socket
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'gate-admission')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Gate devices set GATE_DEVICE_ID so their lines can be told apart at the venue
    device_id = os.getenv('GATE_DEVICE_ID')
    instance = device_id or f'{socket.gethostname()[:12]}-{os.getpid()}'

    return f'{service_name}@{deploy_env}:{instance}'
