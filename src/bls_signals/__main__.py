'''Unified CLI entry point for the ``bls-signals`` command.

Supports three subcommands:

- ``bls-signals process`` -- ingest every unprocessed year, then recompute
  signals for all states.
- ``bls-signals signals`` -- recompute signals from already-ingested data.
- ``bls-signals scores``  -- write the latest physical and e-commerce
  scores to ``bls-physical-scores.json`` / ``bls-ecommerce-scores.json``
  in the data directory.

Running without arguments executes ``process`` then ``scores``. Paths and
batch sizes come from ``BLS_*`` environment variables (see
:meth:`~bls_signals.config.PipelineSettings.from_env`); when
``BLS_SOURCE_URL`` is set the yearly files are streamed over HTTP instead of
read from ``BLS_SOURCE_DIR``.
'''

import asyncio
import json
import logging
import math
import sys
from datetime import datetime, timezone
from pathlib import Path

from bls_signals.config import PipelineSettings
from bls_signals.download import HttpYearSource, LocalYearSource
from bls_signals.errors import BlsSignalsError
from bls_signals.service import BlsSignalService
from bls_signals.stores import ParquetProcessedYearLedger, ParquetSignalStore, ParquetStateYearStore

log = logging.getLogger('bls_signals')


def build_service(settings: PipelineSettings) -> BlsSignalService:
    '''Wire the configured source with the Parquet stores under ``data_dir``.'''
    if settings.source_url:
        source = HttpYearSource(settings.source_url)
    else:
        source = LocalYearSource(settings.source_dir)
    return BlsSignalService(
        source,
        ParquetProcessedYearLedger(settings.processed_years_path),
        ParquetStateYearStore(settings.state_data_path),
        ParquetSignalStore(settings.signals_path),
        settings,
    )


async def _close(service: BlsSignalService) -> None:
    if isinstance(service.source, HttpYearSource):
        await service.source.aclose()


async def cmd_process(settings: PipelineSettings) -> None:
    '''Ingest all years and recompute signals.'''
    service = build_service(settings)
    try:
        records = await service.process_bls_data()
    finally:
        await _close(service)
    print(f'Calculated signals for {len(records)} states')


async def cmd_signals(settings: PipelineSettings) -> None:
    '''Recompute signals without touching the source files.'''
    service = build_service(settings)
    records = await service.calculator.calculate_all_signals()
    print(f'Calculated signals for {len(records)} states')


def write_scores(path: Path, scores: dict[str, float], calculated_at: str) -> None:
    '''Write *scores* as JSON; NaN scores (zero cross-state spread) become ``null``.'''
    exported = {state: None if math.isnan(score) else score for state, score in scores.items()}
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(
        {'scores': exported, 'calculatedAt': calculated_at}, indent=2, allow_nan=False
    ))
    print(f'Wrote {path} ({len(scores)} states)')


async def cmd_scores(settings: PipelineSettings) -> None:
    '''Export the latest physical and e-commerce scores as JSON.'''
    service = build_service(settings)
    calculated_at = datetime.now(timezone.utc).isoformat()
    physical = await service.get_all_physical_scores()
    ecommerce = await service.get_all_ecommerce_scores()
    write_scores(settings.data_dir / 'bls-physical-scores.json', physical, calculated_at)
    write_scores(settings.data_dir / 'bls-ecommerce-scores.json', ecommerce, calculated_at)


COMMANDS = {
    'process': cmd_process,
    'signals': cmd_signals,
    'scores': cmd_scores,
}


def main() -> None:
    '''Dispatch to a subcommand, or run ``process`` and ``scores`` if none is given.'''
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    args = sys.argv[1:]
    settings = PipelineSettings.from_env()

    if not args:
        commands = [cmd_process, cmd_scores]
    elif args[0] in COMMANDS:
        commands = [COMMANDS[args[0]]]
    else:
        print(f'Unknown subcommand: {args[0]}')
        print('Usage: bls-signals [process|signals|scores]')
        sys.exit(1)

    try:
        for command in commands:
            asyncio.run(command(settings))
    except BlsSignalsError:
        log.exception('BLS signal task failed')
        sys.exit(1)


if __name__ == '__main__':
    main()
