"""
Database Helper Utilities

Provides:
- Database dialect detection (PostgreSQL vs SQLite)
- Conversion of pydantic payloads into column values for JSON-backed models
"""

import logging
from typing import Any, Dict, Iterable
from pydantic import BaseModel
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def is_postgres(db: Session) -> bool:
    """Check if the database is PostgreSQL"""
    return db.bind.dialect.name == 'postgresql'


def to_column_values(
    payload: BaseModel,
    json_fields: Iterable[str],
    exclude_unset: bool = False
) -> Dict[str, Any]:
    """
    Dump a schema into values assignable to a model.

    Scalar columns keep their Python types (date, bool, ...). Nested blocks
    stored in JSON columns are dumped in JSON mode so Decimals become strings
    and date keys become ISO strings.
    """
    json_fields = set(json_fields)
    values = payload.model_dump(exclude_unset=exclude_unset, exclude=json_fields)
    json_values = payload.model_dump(
        mode="json",
        exclude_unset=exclude_unset,
        include=json_fields
    )
    values.update(json_values)
    return values
