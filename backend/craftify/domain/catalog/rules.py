"""Business rules for the catalog — field presence, trimming and length constraints."""
from __future__ import annotations
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from craftify.domain.catalog.models import ItemStatus, ItemUom
from craftify.domain.common.result import Result

CATEGORY_NAME_MAX = 100
ITEM_NAME_MAX = 200
UOM_MAX = 16
DESCRIPTION_MAX = 4000
UOM_NOTES_MAX = 200


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _required(errors: Dict[str, str], field: str, value: Any, max_len: int) -> Optional[str]:
    text = _clean(value)
    if text is None:
        errors[field] = "is required and cannot be blank"
        return None
    if len(text) > max_len:
        errors[field] = f"must be at most {max_len} characters"
        return None
    return text


def _optional(errors: Dict[str, str], field: str, value: Any, max_len: int) -> Optional[str]:
    text = _clean(value)
    if text is not None and len(text) > max_len:
        errors[field] = f"must be at most {max_len} characters"
        return None
    return text


def validate_category_content(data: dict) -> Result[dict]:
    """Validates and trims a category payload. Returns the cleaned fields."""
    errors: Dict[str, str] = {}
    name = _required(errors, "name", data.get("name"), CATEGORY_NAME_MAX)
    if errors:
        return Result.invalid(errors)
    return Result.ok({"name": name})


def _validate_uoms(errors: Dict[str, str], raw: Any) -> List[ItemUom]:
    uoms: List[ItemUom] = []
    for index, entry in enumerate(raw or []):
        prefix = f"uoms[{index}]"
        if isinstance(entry, ItemUom):
            entry = {"uom": entry.uom, "coef": entry.coef, "notes": entry.notes}
        uom = _required(errors, f"{prefix}.uom", entry.get("uom"), UOM_MAX)
        notes = _optional(errors, f"{prefix}.notes", entry.get("notes"), UOM_NOTES_MAX)
        coef_raw = entry.get("coef")
        coef: Optional[Decimal] = None
        if coef_raw is None or str(coef_raw).strip() == "":
            errors[f"{prefix}.coef"] = "is required"
        else:
            try:
                coef = Decimal(str(coef_raw).strip())
            except InvalidOperation:
                errors[f"{prefix}.coef"] = "must be a number"
            else:
                if not coef.is_finite() or coef <= 0:
                    errors[f"{prefix}.coef"] = "must be greater than 0"
                    coef = None
        if uom is not None and coef is not None:
            uoms.append(ItemUom(uom=uom, coef=coef, notes=notes))
    return uoms


def validate_item_content(data: dict) -> Result[dict]:
    """
    Validates and trims an item payload (create or full update).
    `code` is optional here; the store decides whether to generate one.
    """
    errors: Dict[str, str] = {}

    code = _optional(errors, "code", data.get("code"), ITEM_NAME_MAX)
    name = _required(errors, "name", data.get("name"), ITEM_NAME_MAX)
    category_name = _required(errors, "category_name", data.get("category_name"), CATEGORY_NAME_MAX)
    uom_base = _required(errors, "uom_base", data.get("uom_base"), UOM_MAX)
    description = _optional(errors, "description", data.get("description"), DESCRIPTION_MAX)

    raw_status = data.get("status")
    status: Optional[ItemStatus] = None
    if isinstance(raw_status, ItemStatus):
        status = raw_status
    elif _clean(raw_status) is None:
        errors["status"] = "is required"
    else:
        status = ItemStatus.parse(str(raw_status))
        if status is None:
            allowed = ", ".join(s.value for s in ItemStatus)
            errors["status"] = f"must be one of {allowed}"

    uoms = _validate_uoms(errors, data.get("uoms"))

    if errors:
        return Result.invalid(errors)
    return Result.ok({
        "code": code,
        "name": name,
        "status": status,
        "category_name": category_name,
        "uom_base": uom_base,
        "description": description,
        "uoms": tuple(uoms),
    })
