'''Row- and record-level validation for QCEW state data.'''

from __future__ import annotations

import logging
import math

from ..models import RawRow, StateRecordValidation, StateYearRecord
from . import STATE_FIPS_CODES, STATE_LEVEL_SUFFIX

log = logging.getLogger(__name__)

_INVALID = StateRecordValidation(is_valid=False)


def parse_location_quotient(value: str) -> float | None:
    '''Parse an LQ field; return None for blanks, text, NaN or infinities.'''
    try:
        lq = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(lq):
        return None
    return lq


def validate_state_record(row: RawRow) -> StateRecordValidation:
    '''Decide whether a row is a state-level record with a usable LQ.

    Args:
        row: One parsed CSV row.

    Returns:
        ``is_valid=False`` for sub-state or unknown geographies and for
        unparsable or non-positive LQ values; otherwise the state
        abbreviation and the parsed LQ.
    '''
    if not row.area_fips.endswith(STATE_LEVEL_SUFFIX):
        return _INVALID

    state_abbr = STATE_FIPS_CODES.get(row.area_fips)
    if state_abbr is None:
        return _INVALID

    retail_lq = parse_location_quotient(row.lq_annual_avg_emplvl)
    if retail_lq is None or retail_lq <= 0:
        return _INVALID

    return StateRecordValidation(is_valid=True, state_abbr=state_abbr, retail_lq=retail_lq)


def validate_state_year_record(record: StateYearRecord) -> bool:
    '''Return True if *record* is worth persisting.

    A record needs a state, a positive integer year, and at least one code
    in either category map.
    '''
    if not record.state or not isinstance(record.state, str):
        log.warning('Invalid state in record for year %s', record.year)
        return False

    if not isinstance(record.year, int) or record.year <= 0:
        log.warning('Invalid year %r in record for %s', record.year, record.state)
        return False

    if not record.brick_and_mortar_codes and not record.ecommerce_codes:
        log.info('No retail code data for %s in %d', record.state, record.year)
        return False

    return True
