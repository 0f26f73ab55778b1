"""
Property accessors for region (kecamatan) and road features.

Each accessor reads one logical field from a GeoJSON property bag and falls
back to a fixed default when the property is absent, null or unusable:

    region name      WADMKK, then WADMPR   -> ""
    road region      WADMKK                -> ""
    sub-region name  NAMOBJ                -> ""
    population       Penduduk              -> 0
    remark           REMARK                -> ""
    road name        NAMOBJ                -> ""
    shape length     SHAPE_Leng            -> 0
"""
import math
from typing import Any, Dict, Optional, Union

Number = Union[int, float]


def _props(properties: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return properties if isinstance(properties, dict) else {}


def _text(value: Any) -> str:
    if value is None or value == "":
        return ""
    return str(value)


def _number(value: Any) -> Number:
    """Coerce a property value to a number, 0 when it can't be used."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if not isinstance(value, (int, float)) or math.isnan(value) or math.isinf(value):
        return 0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def properties_of(feature: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Property bag of a feature, empty dict when missing."""
    if not isinstance(feature, dict):
        return {}
    return _props(feature.get('properties'))


def region_name(properties: Optional[Dict[str, Any]]) -> str:
    props = _props(properties)
    return _text(props.get('WADMKK')) or _text(props.get('WADMPR'))


def road_region_name(properties: Optional[Dict[str, Any]]) -> str:
    return _text(_props(properties).get('WADMKK'))


def sub_region_name(properties: Optional[Dict[str, Any]]) -> str:
    return _text(_props(properties).get('NAMOBJ'))


def population(properties: Optional[Dict[str, Any]]) -> Number:
    return _number(_props(properties).get('Penduduk'))


def remark(properties: Optional[Dict[str, Any]]) -> str:
    return _text(_props(properties).get('REMARK'))


def road_name(properties: Optional[Dict[str, Any]]) -> str:
    return _text(_props(properties).get('NAMOBJ'))


def shape_length(properties: Optional[Dict[str, Any]]) -> Number:
    return _number(_props(properties).get('SHAPE_Leng'))
