'''Tag NAICS industry codes as brick-and-mortar retail and/or e-commerce.'''

from __future__ import annotations

from ..models import CategoryTag
from . import BRICK_AND_MORTAR_RETAIL_NAICS, E_COMMERCE_NAICS


def classify_industry(industry_code: str) -> CategoryTag:
    '''Classify *industry_code* by prefix against both NAICS lists.

    The two flags are independent: a code may match neither, either or both.
    '''
    return CategoryTag(
        is_brick_and_mortar=industry_code.startswith(BRICK_AND_MORTAR_RETAIL_NAICS),
        is_ecommerce=industry_code.startswith(E_COMMERCE_NAICS),
    )
