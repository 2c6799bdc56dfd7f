from datetime import date

from fastapi import Query


def resolve_as_of(as_of: date | None = Query(default=None)) -> date:
    return as_of or date.today()
