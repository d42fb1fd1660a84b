"""Render normalized results in the output shape the caller asked for."""

from typing import Any

import pandas as pd

from .models import STANDARD_FIELDS, CanonicalRecord, GeocodeFailure, OutputShape


class OutputShaper:
    """
    Renders results as one of three output shapes:
    - OutputShape.ADDRESS: the formatted address string
    - OutputShape.MORE: a one-row DataFrame of address components
    - OutputShape.ALL: the raw backend payload

    Missing results become None for ADDRESS and ALL, and a one-row frame of
    STANDARD_FIELDS filled with pd.NA for MORE, so batch callers always get
    the same columns back for failed lookups.
    """

    def shape(self, result: CanonicalRecord | GeocodeFailure | Any, output: str | OutputShape) -> Any:
        output = OutputShape(output)

        if output is OutputShape.ALL:
            return result
        if isinstance(result, GeocodeFailure):
            return self.missing(output)
        if not isinstance(result, CanonicalRecord):
            raise TypeError(f"Cannot shape {type(result).__name__} as '{output}'")

        if output is OutputShape.ADDRESS:
            return result.formatted_address
        return self.components_frame(result)

    def missing(self, output: str | OutputShape) -> Any:
        """Missing-value result for a lookup that produced nothing."""
        if OutputShape(output) is OutputShape.MORE:
            return pd.DataFrame([[pd.NA] * len(STANDARD_FIELDS)], columns=list(STANDARD_FIELDS))
        return None

    @staticmethod
    def components_frame(record: CanonicalRecord) -> pd.DataFrame:
        # Google can repeat a label, so build from lists rather than a dict
        return pd.DataFrame([record.values()], columns=record.labels())
