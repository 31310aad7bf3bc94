#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from bilemo.core.config import IS_DEV  # noqa: E402
from bilemo.core.database import SessionLocal, engine  # noqa: E402
from bilemo.services.admin_bootstrap import (  # noqa: E402
    DEFAULT_ADMIN_NAME,
    ensure_customers_table,
    upsert_admin_customer,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cria (ou promove) um customer com ROLE_ADMIN.")
    parser.add_argument("email", help="Email do admin")
    parser.add_argument("password", help="Senha do admin")
    parser.add_argument("--name", default=DEFAULT_ADMIN_NAME, help="Nome do admin")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        ensure_customers_table(engine)
    except RuntimeError as exc:
        print(str(exc))
        return 1

    db = SessionLocal()
    try:
        admin, created = upsert_admin_customer(
            db,
            email=args.email,
            password=args.password,
            name=args.name,
        )
    except ValueError as exc:
        print(str(exc))
        return 1
    finally:
        db.close()

    action = "created" if created else "updated"
    print(f"Admin {action}: id={admin.id} email={admin.email}")
    if IS_DEV:
        print(f"Resumo DEV -> Email: {admin.email} | Senha: {args.password}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
