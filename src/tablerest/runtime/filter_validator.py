"""
Query-string filter parsing for filtered list retrieval.

Turns the optional ``where`` and ``params`` query values into a condition
tree and a parameter map, reporting malformed input as ValidationError.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from tablerest.errors import ConditionError, ValidationError
from tablerest.specs.filter import FilterCondition, parse_condition

WHERE_KEY = "where"
PARAMS_KEY = "params"

CONDITION_ERROR_CODE = ConditionError.default_code


def _load_json(raw: str, key: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(
            f'"{key}" does not contain valid JSON: {e}', "VAL_JSON", key
        ) from e
    except RecursionError as e:
        raise ValidationError(
            f'"{key}" does not contain valid JSON: nested too deeply.', "VAL_JSON", key
        ) from e


def parse_filter(
    query: Mapping[str, Any],
) -> tuple[FilterCondition | None, dict[str, Any] | None]:
    """
    Parse the filter query values.

    An absent or empty ``where`` means no filter. An absent or empty
    ``params`` means no parameters.

    Args:
        query: Request query mapping

    Returns:
        (condition or None, parameter map or None)

    Raises:
        ValidationError: VAL_JSON for undecodable input (including JSON
            nested beyond the recursion limit) or a non-object parameter map;
            CONDITION_ERROR for a malformed or too deeply nested condition tree
    """
    condition: FilterCondition | None = None
    params: dict[str, Any] | None = None

    raw_where = query.get(WHERE_KEY)
    if raw_where:
        where = _load_json(raw_where, WHERE_KEY)
        try:
            condition = parse_condition(where)
        except ConditionError as e:
            raise as_where_error(e) from e
        except RecursionError as e:
            raise ValidationError(
                "The condition is nested too deeply.", CONDITION_ERROR_CODE, WHERE_KEY
            ) from e

    raw_params = query.get(PARAMS_KEY)
    if raw_params:
        params = _load_json(raw_params, PARAMS_KEY)
        if not isinstance(params, dict):
            raise ValidationError('"params" must be a JSON object.', "VAL_JSON", PARAMS_KEY)

    return condition, params


def is_condition_error(err: BaseException) -> bool:
    """True for errors a DAO signals about the condition it was given."""
    return getattr(err, "code", None) == CONDITION_ERROR_CODE


def as_where_error(err: BaseException) -> ValidationError:
    """Re-tag a condition error as a ValidationError on the where field."""
    message = getattr(err, "message", None) or str(err)
    return ValidationError(message, getattr(err, "code", CONDITION_ERROR_CODE), WHERE_KEY)
