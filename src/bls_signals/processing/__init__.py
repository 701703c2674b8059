'''Per-year ingestion: validate, classify and aggregate QCEW rows by state.

- :mod:`~bls_signals.processing.validate` -- keep state-level rows with a
  positive employment location quotient.
- :mod:`~bls_signals.processing.classify` -- tag industry codes as
  brick-and-mortar retail and/or e-commerce.
- :mod:`~bls_signals.processing.aggregate` -- sum LQ per state and code.
- :mod:`~bls_signals.processing.year` -- run the above for one year's file
  and persist the result.

Attributes:
    STATE_LEVEL_SUFFIX: ``area_fips`` suffix of state-wide aggregates.
    STATE_FIPS_CODES: State-level area FIPS code to state abbreviation for
        the 50 states and DC.
    BRICK_AND_MORTAR_RETAIL_NAICS: NAICS prefixes of store-based retail.
    E_COMMERCE_NAICS: NAICS prefixes of online retail and its fulfilment.
'''

STATE_LEVEL_SUFFIX = '000'

STATE_FIPS_CODES = {
    '01000': 'AL', '02000': 'AK', '04000': 'AZ', '05000': 'AR', '06000': 'CA',
    '08000': 'CO', '09000': 'CT', '10000': 'DE', '11000': 'DC', '12000': 'FL',
    '13000': 'GA', '15000': 'HI', '16000': 'ID', '17000': 'IL', '18000': 'IN',
    '19000': 'IA', '20000': 'KS', '21000': 'KY', '22000': 'LA', '23000': 'ME',
    '24000': 'MD', '25000': 'MA', '26000': 'MI', '27000': 'MN', '28000': 'MS',
    '29000': 'MO', '30000': 'MT', '31000': 'NE', '32000': 'NV', '33000': 'NH',
    '34000': 'NJ', '35000': 'NM', '36000': 'NY', '37000': 'NC', '38000': 'ND',
    '39000': 'OH', '40000': 'OK', '41000': 'OR', '42000': 'PA', '44000': 'RI',
    '45000': 'SC', '46000': 'SD', '47000': 'TN', '48000': 'TX', '49000': 'UT',
    '50000': 'VT', '51000': 'VA', '53000': 'WA', '54000': 'WV', '55000': 'WI',
    '56000': 'WY',
}

BRICK_AND_MORTAR_RETAIL_NAICS = (
    '441',  # Motor vehicle and parts dealers
    '442',  # Furniture and home furnishings stores
    '443',  # Electronics and appliance stores
    '444',  # Building material and garden supply stores
    '445',  # Food and beverage stores
    '446',  # Health and personal care stores
    '447',  # Gasoline stations
    '448',  # Clothing and clothing accessories stores
    '451',  # Sporting goods, hobby, musical instrument, and book stores
    '452',  # General merchandise stores
    '453',  # Miscellaneous store retailers
)

E_COMMERCE_NAICS = (
    '4541',  # Electronic shopping and mail-order houses
    '4921',  # Couriers and express delivery services
    '4922',  # Local messengers and local delivery
    '4931',  # Warehousing and storage
)
