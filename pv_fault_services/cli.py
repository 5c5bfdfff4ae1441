"""CLI entry point: bootstrap del store y predicción desde un archivo JSON."""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Optional, Sequence

from .common.config import get_settings
from .common.db import dispose_engine, get_engine
from .pipeline.recorder import PredictionRecorder
from .pipeline.validation import PredictionValidationError
from .repository.schema_setup import bootstrap
from .repository.store import SqlPredictionStore

logger = logging.getLogger(__name__)


def _cmd_init_db(args: argparse.Namespace) -> int:
    status_id = bootstrap(get_engine())
    logger.info("Store listo (system_status id=%s)", status_id)
    return 0


def _cmd_predict(args: argparse.Namespace) -> int:
    body = json.loads(Path(args.request).read_text(encoding="utf-8"))

    rng_factory = None
    if args.seed is not None:
        rng_factory = lambda: random.Random(args.seed)  # noqa: E731

    recorder = PredictionRecorder(
        SqlPredictionStore(get_engine()),
        settings=get_settings(),
        rng_factory=rng_factory,
    )
    try:
        outcome = recorder.record_payload(body)
    except PredictionValidationError as e:
        logger.error("Request inválido: %s", e)
        return 2

    print(json.dumps(outcome.to_response(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="PV fault classification service tools")
    sub = p.add_subparsers(dest="command", required=True)

    init_db = sub.add_parser("init-db", help="create tables and seed the system_status row")
    init_db.set_defaults(func=_cmd_init_db)

    predict = sub.add_parser("predict", help="run the prediction pipeline on a JSON request body")
    predict.add_argument("request", help="path to a JSON file shaped like the /api/predict body")
    predict.add_argument("--seed", type=int, default=None, help="seed for the minority-class spread")
    predict.set_defaults(func=_cmd_predict)

    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    args = build_parser().parse_args(argv)
    try:
        return int(args.func(args))
    finally:
        dispose_engine()


if __name__ == "__main__":
    sys.exit(main())
