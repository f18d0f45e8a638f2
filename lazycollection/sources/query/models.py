from typing import Dict

from pydantic import BaseModel

# PostgreSQL type OIDs, as reported by the type code of a DB-API cursor description.
POSTGRES_TYPE_NAMES: Dict[int, str] = {
    16: 'bool',
    20: 'int8',
    21: 'int2',
    23: 'int4',
    25: 'text',
    114: 'json',
    700: 'float4',
    701: 'float8',
    1042: 'bpchar',
    1043: 'varchar',
    1082: 'date',
    1114: 'timestamp',
    1184: 'timestamptz',
    1700: 'numeric',
    2950: 'uuid',
    3802: 'jsonb',
}


class ColumnInfo(BaseModel):
    """ Column metadata """
    name: str
    type_name: str
