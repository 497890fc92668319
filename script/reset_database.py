#!/usr/bin/env python3
"""
Database Reset Script
Reset the admission database structure

Features:
1. PostgreSQL: drop & recreate the database, then run Alembic migrations
2. SQLite (DATABASE_URL_OVERRIDE): drop and recreate every table from the models

Notes:
- This script only resets database structure, does not seed demo data
- To seed demo data, run `python -m script.seed_data`
"""

import asyncio
import os
import subprocess
import time

from sqlalchemy import create_engine, text

from src.platform.config.core_setting import settings
from src.platform.constant.path import BASE_DIR
from src.platform.database.db_setting import (
    Database,
    create_db_and_tables,
    drop_db_and_tables,
)

DB_WAIT_SECONDS = 1


def _get_sync_url(async_url: str) -> str:
    """Convert async database URL to sync URL"""
    if async_url.startswith('postgresql+asyncpg://'):
        return async_url.replace('postgresql+asyncpg://', 'postgresql://')
    return async_url


def _parse_db_connection(database_url: str) -> tuple[str, str]:
    """Parse database URL and return (server_url, db_name)"""
    sync_url = _get_sync_url(database_url)
    db_name = sync_url.split('/')[-1]
    server_url = sync_url.rsplit('/', 1)[0]
    return server_url, db_name


def _drop_and_create_db(server_url: str, db_name: str) -> None:
    admin_engine = create_engine(f'{server_url}/postgres', isolation_level='AUTOCOMMIT')

    try:
        with admin_engine.connect() as conn:
            conn.execute(
                text(
                    'SELECT pg_terminate_backend(pid) FROM pg_stat_activity '
                    'WHERE datname = :db_name AND pid <> pg_backend_pid()'
                ),
                {'db_name': db_name},
            )

            conn.execute(text(f'DROP DATABASE IF EXISTS "{db_name}"'))
            print(f"   ✅ Database '{db_name}' dropped")

            time.sleep(DB_WAIT_SECONDS)

            conn.execute(text(f'CREATE DATABASE "{db_name}"'))
            print(f"   ✅ Database '{db_name}' created")
    finally:
        admin_engine.dispose()


def _run_alembic_migrations() -> None:
    print("   🔄 Running 'alembic upgrade head'...")

    result = subprocess.run(
        ['alembic', 'upgrade', 'head'],
        cwd=BASE_DIR,
        capture_output=True,
        text=True,
        env=os.environ.copy(),
    )

    if result.returncode != 0:
        print(f'   ❌ Migration failed (return code: {result.returncode})')
        if result.stdout:
            print(f'   📋 STDOUT: {result.stdout}')
        if result.stderr:
            print(f'   📋 STDERR: {result.stderr}')
        raise RuntimeError(f'Alembic migration failed with return code {result.returncode}')

    print('   ✅ Database migrations completed')


async def reset_postgres(database_url: str) -> None:
    server_url, db_name = _parse_db_connection(database_url)
    print(f'Server URL: {server_url}')
    print(f'Database name: {db_name}')

    print('🗑️ Dropping database...')
    _drop_and_create_db(server_url, db_name)

    print('🏗️ Running database migrations...')
    _run_alembic_migrations()


async def reset_sqlite(database_url: str) -> None:
    database = Database(url=database_url)
    try:
        print('🗑️ Dropping tables...')
        await drop_db_and_tables(database.engine)
        print('🏗️ Creating tables...')
        await create_db_and_tables(database.engine)
    finally:
        await database.dispose()


async def main() -> None:
    print('🔄 Starting database reset...')
    print('=' * 50)

    database_url = settings.DATABASE_URL_ASYNC
    try:
        if database_url.startswith('sqlite'):
            await reset_sqlite(database_url)
        else:
            await reset_postgres(database_url)

        print('=' * 50)
        print('✅ Database reset completed!')
        print('💡 To seed demo data, run: python -m script.seed_data')

    except Exception as e:
        print(f'❌ Reset failed: {e}')
        raise SystemExit(1)


if __name__ == '__main__':
    asyncio.run(main())
