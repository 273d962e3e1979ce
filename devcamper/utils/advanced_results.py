"""
Query shaping for list endpoints.

AdvancedResults(Model) is a FastAPI dependency that reads the request's
query string and returns a ready-to-send payload:

    {"success": True, "count": n, "pagination": {...}, "data": [...]}

Supported parameters:
    select=name,city                 only these fields (id is always included)
    sort=-average_cost,name          order by scalar fields, "-" for descending
    page=2&limit=10                  pagination (limit capped at MAX_LIMIT)
    housing=true                     equality filter on any scalar field
    average_cost[lte]=10000          comparison filters: gt, gte, lt, lte
    created_at[gte]=2026-01-01       timestamps in ISO 8601, naive ones as UTC
    state[in]=MA,CA                  membership filter
    careers=Business                 list fields: rows whose list holds the value
    careers[in]=Business,Other       list fields: rows holding any of the values

Field types come from the model annotations; unknown fields are ignored.
"""

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Type, Union, get_args, get_origin

from fastapi import Depends, Request
from sqlalchemy import String, cast, or_
from sqlmodel import Session, SQLModel, func, select

from devcamper.database import get_session
from devcamper.errors import ErrorResponse

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 25
MAX_LIMIT = 100
DEFAULT_SORT = "-created_at"
RESERVED_PARAMS = {"select", "sort", "page", "limit"}
OPERATORS = {"gt", "gte", "lt", "lte", "in"}
# bool ahead of int: bool is an int subclass
SCALAR_TYPES = (bool, int, float, str, datetime)

_FILTER_KEY_RE = re.compile(r"^(?P<field>\w+)(\[(?P<op>\w+)\])?$")


def _positive_int(raw: Optional[str], default: int, name: str) -> int:
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ErrorResponse(f"Invalid {name} '{raw}'", 400)
    if value < 1:
        raise ErrorResponse(f"{name} must be >= 1", 400)
    return value


class AdvancedResults:
    def __init__(self, model: Type[SQLModel], default_sort: str = DEFAULT_SORT):
        self.model = model
        self.default_sort = default_sort
        self.columns = model.__table__.c

    def __call__(self, request: Request, session: Session = Depends(get_session)) -> Dict[str, Any]:
        params = request.query_params

        conditions = self._filters(params)
        total = session.exec(select(func.count()).select_from(self.model).where(*conditions)).one()

        page = _positive_int(params.get("page"), 1, "page")
        limit = min(_positive_int(params.get("limit"), DEFAULT_LIMIT, "limit"), MAX_LIMIT)
        start = (page - 1) * limit
        end = page * limit

        statement = select(self.model).where(*conditions)
        statement = statement.order_by(*self._ordering(params.get("sort") or self.default_sort))
        rows = session.exec(statement.offset(start).limit(limit)).all()

        fields = self._selected_fields(params.get("select"))
        data = [self._serialize(row, fields) for row in rows]

        pagination: Dict[str, Dict[str, int]] = {}
        if end < total:
            pagination["next"] = {"page": page + 1, "limit": limit}
        if start > 0:
            pagination["prev"] = {"page": page - 1, "limit": limit}

        return {"success": True, "count": len(data), "pagination": pagination, "data": data}

    def _field_type(self, field: str) -> Optional[type]:
        """Scalar python type of a model field, ``list`` for list fields, None if unsupported."""
        if field not in self.columns or field not in self.model.model_fields:
            return None
        annotation = self.model.model_fields[field].annotation
        if get_origin(annotation) is Union:
            args = [a for a in get_args(annotation) if a is not type(None)]
            if len(args) != 1:
                return None
            annotation = args[0]
        if get_origin(annotation) in (list, List):
            return list
        if isinstance(annotation, type) and issubclass(annotation, SCALAR_TYPES):
            for scalar in SCALAR_TYPES:
                if issubclass(annotation, scalar):
                    return scalar
        return None

    def _coerce(self, field: str, raw: str, python_type: type) -> Any:
        if python_type is bool:
            lowered = raw.lower()
            if lowered in ("true", "1", "yes"):
                return True
            if lowered in ("false", "0", "no"):
                return False
            raise ErrorResponse(f"Invalid value '{raw}' for {field}", 400)
        if python_type is datetime:
            try:
                value = datetime.fromisoformat(raw)
            except ValueError:
                raise ErrorResponse(f"Invalid value '{raw}' for {field}", 400)
            # naive timestamps are read as UTC
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        try:
            return python_type(raw)
        except ValueError:
            raise ErrorResponse(f"Invalid value '{raw}' for {field}", 400)

    def _contains(self, column, value: str):
        """Match rows whose JSON list column holds ``value``."""
        return cast(column, String).contains(json.dumps(value), autoescape=True)

    def _filters(self, params) -> List[Any]:
        conditions = []
        for key, raw in params.multi_items():
            if key in RESERVED_PARAMS:
                continue
            match = _FILTER_KEY_RE.match(key)
            if not match:
                continue
            field, op = match.group("field"), match.group("op")
            python_type = self._field_type(field)
            if python_type is None or (op is not None and op not in OPERATORS):
                logger.debug(f"Ignoring unsupported filter '{key}'")
                continue

            column = self.columns[field]
            if python_type is list:
                # list fields: value membership only
                if op is None:
                    conditions.append(self._contains(column, raw))
                elif op == "in":
                    values = [v.strip() for v in raw.split(",") if v.strip()]
                    conditions.append(or_(*[self._contains(column, v) for v in values]))
                else:
                    logger.debug(f"Ignoring unsupported filter '{key}'")
                continue

            if op == "in":
                values = [self._coerce(field, v.strip(), python_type) for v in raw.split(",") if v.strip()]
                conditions.append(column.in_(values))
                continue

            value = self._coerce(field, raw, python_type)
            if op is None:
                conditions.append(column == value)
            elif op == "gt":
                conditions.append(column > value)
            elif op == "gte":
                conditions.append(column >= value)
            elif op == "lt":
                conditions.append(column < value)
            elif op == "lte":
                conditions.append(column <= value)
        return conditions

    def _ordering(self, sort: str) -> List[Any]:
        ordering = []
        for part in (p.strip() for p in sort.split(",")):
            descending = part.startswith("-")
            field = part.lstrip("-")
            if self._field_type(field) in (None, list):
                continue
            column = self.columns[field]
            ordering.append(column.desc() if descending else column.asc())
        # Stable pages when sort keys tie
        ordering.append(self.columns["id"].asc())
        return ordering

    def _selected_fields(self, select_param: Optional[str]) -> Optional[Tuple[str, ...]]:
        if not select_param:
            return None
        fields = [f.strip() for f in select_param.split(",") if f.strip() in self.columns]
        if "id" not in fields:
            fields.insert(0, "id")
        return tuple(fields)

    def _serialize(self, row: SQLModel, fields: Optional[Tuple[str, ...]]) -> Dict[str, Any]:
        data = row.model_dump(mode="json")
        if fields is None:
            return data
        return {f: data[f] for f in fields}
