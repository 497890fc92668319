#!/usr/bin/env python3
"""
Gate Scan Script
Interactive gate device against a running admission API

Usage:
    python -m script.gate_scan [verifier_id]

- Scan (or type) a ticket identifier and press Enter
- Type `logout` to end the staff session, `quit` to exit
- The staff PIN is requested only when no valid session is cached
"""

from getpass import getpass
import os
import socket
import sys

import anyio
from anyio import to_thread
from pydantic import SecretStr

from src.platform.config.core_setting import settings
from src.service.gate_client.app.duplicate_scan_guard import DuplicateScanGuard
from src.service.gate_client.app.outcome_presenter import present_outcome
from src.service.gate_client.app.staff_session_cache import StaffSessionCache
from src.service.gate_client.app.verification_orchestrator import (
    VerificationOrchestrator,
    VerificationSnapshot,
)
from src.service.gate_client.domain.outcome_display import AudioCue
from src.service.gate_client.domain.verification_state import VerificationState
from src.service.gate_client.driven_adapter.gate_api_client import GateApiClient

ANSI_COLORS = {'green': '\033[92m', 'orange': '\033[33m', 'red': '\033[91m'}
ANSI_RESET = '\033[0m'
BELLS = {AudioCue.ADMIT: 1, AudioCue.ALREADY_USED: 2, AudioCue.ERROR: 3}


def _render(snapshot: VerificationSnapshot) -> None:
    display = present_outcome(snapshot)
    if display is None:
        if snapshot.message:
            print(f'   ⚠️  {snapshot.message}')
        return

    color = ANSI_COLORS.get(display.color, '')
    print(f'{color}   {display.title.upper()}{ANSI_RESET}  {display.message}')
    print('\a' * BELLS[display.audio_cue], end='', flush=True)


async def _prompt(text: str) -> str:
    return await to_thread.run_sync(input, text)


async def _prompt_pin() -> SecretStr:
    return SecretStr(await to_thread.run_sync(getpass, '🔐 Staff PIN: '))


async def main() -> None:
    verifier_id = (
        sys.argv[1]
        if len(sys.argv) > 1
        else os.getenv('GATE_DEVICE_ID', f'gate-{socket.gethostname()}')
    )
    print(f'🎫 Gate {verifier_id} -> {settings.GATE_API_BASE_URL}')
    print('=' * 50)

    async with GateApiClient() as gate_api:
        orchestrator = VerificationOrchestrator(
            gate_api=gate_api,
            session_cache=StaffSessionCache(),
            duplicate_scan_guard=DuplicateScanGuard(),
            verifier_id=verifier_id,
        )

        while True:
            try:
                raw = (await _prompt('📷 Scan ticket: ')).strip()
            except EOFError:
                break

            if raw == 'quit':
                break
            if raw == 'logout':
                orchestrator.logout()
                print('🔒 Staff session ended')
                continue

            snapshot = await orchestrator.scan(raw)
            while snapshot.state == VerificationState.AWAITING_STAFF_AUTH:
                if snapshot.message:
                    _render(snapshot)
                snapshot = await orchestrator.submit_pin(await _prompt_pin())

            _render(snapshot)

    print('👋 Gate closed')


if __name__ == '__main__':
    anyio.run(main)
