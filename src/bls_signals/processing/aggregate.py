'''Accumulate LQ sums per state and industry code across a year's batches.'''

from __future__ import annotations

from dataclasses import dataclass, field

from ..models import CategoryTag, RawRow, StateAggregate, StateYearRecord


@dataclass
class YearAccumulator:
    '''Per-year ``state -> StateAggregate`` map.

    Owned by a single :class:`~bls_signals.processing.year.YearProcessor`
    run and discarded once the year's records are materialized.
    '''

    states: dict[str, StateAggregate] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.states)

    def materialize(self, year: int, timestamp: int) -> list[StateYearRecord]:
        '''Build one :class:`StateYearRecord` per touched state, in state order.'''
        return [
            StateYearRecord(
                state=state,
                year=year,
                timestamp=timestamp,
                brick_and_mortar_codes=dict(aggregate.brick_and_mortar_codes),
                ecommerce_codes=dict(aggregate.ecommerce_codes),
            )
            for state, aggregate in sorted(self.states.items())
        ]


def aggregate_record(
    accumulator: YearAccumulator,
    state_abbr: str,
    row: RawRow,
    retail_lq: float,
    tag: CategoryTag,
) -> int:
    '''Add *retail_lq* to the category map(s) *tag* selects.

    Args:
        accumulator: The year's accumulator, mutated in place.
        state_abbr: State the row belongs to.
        row: The source row (supplies the industry code).
        retail_lq: Validated, positive LQ.
        tag: Classification of the row's industry code.

    Returns:
        Number of categories the row contributed to (0, 1 or 2).
    '''
    aggregate = accumulator.states.setdefault(state_abbr, StateAggregate())
    code = row.industry_code
    contributed = 0

    if tag.is_brick_and_mortar:
        codes = aggregate.brick_and_mortar_codes
        codes[code] = codes.get(code, 0.0) + retail_lq
        contributed += 1

    if tag.is_ecommerce:
        codes = aggregate.ecommerce_codes
        codes[code] = codes.get(code, 0.0) + retail_lq
        contributed += 1

    return contributed
