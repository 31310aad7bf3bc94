#!/usr/bin/env python3
from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from bilemo.core.config import IS_PROD  # noqa: E402
from bilemo.core.database import SessionLocal, engine  # noqa: E402
from bilemo.services.admin_bootstrap import ensure_customers_table  # noqa: E402
from bilemo.services.fixtures import FIXTURE_ADMIN_EMAIL, FIXTURE_PASSWORD, load_fixtures  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Carrega dados de demonstração no banco.")
    parser.add_argument("--seed", type=int, help="Seed do gerador aleatório")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Permite executar com ENV=production",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    if IS_PROD and not args.force:
        print("Fixtures desabilitadas em produção. Use --force.")
        return 1

    try:
        ensure_customers_table(engine)
    except RuntimeError as exc:
        print(str(exc))
        return 1

    db = SessionLocal()
    try:
        summary = load_fixtures(db, rng=random.Random(args.seed))
        print(
            f"Fixtures carregadas: users={len(summary.users)} "
            f"customers={len(summary.customers) + 1} phones={len(summary.phones)}"
        )
    finally:
        db.close()

    print(f"Admin -> Email: {FIXTURE_ADMIN_EMAIL} | Senha: {FIXTURE_PASSWORD}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
