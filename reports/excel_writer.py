"""
Export dei report su file Excel (in memoria, per il download).

Un foglio per DataFrame, intestazione in grassetto, colonne allargate
sul contenuto.
"""

import io
from typing import Dict, Optional

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from reports.pivot import nights_breakdown_to_df, summaries_to_df, tax_lines_to_df
from reports.tourist_tax import TouristTaxResult

# Excel non accetta nomi foglio oltre 31 caratteri
MAX_SHEET_NAME = 31


def _format_sheet(ws):
    """Header in grassetto e larghezza colonne sul valore più lungo."""
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for col_idx, column in enumerate(ws.iter_cols(values_only=True), start=1):
        longest = max((len(str(v)) for v in column if v is not None), default=0)
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max(longest + 2, 10), 50)


def frames_to_excel_bytes(sheets: Dict[str, pd.DataFrame]) -> bytes:
    """Scrive i DataFrame (nome foglio → dati) in un XLSX e ne restituisce i bytes."""
    if not sheets:
        raise ValueError("Nessun foglio da esportare")

    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, df in sheets.items():
            sheet_name = name[:MAX_SHEET_NAME]
            df.to_excel(writer, index=False, sheet_name=sheet_name)
            _format_sheet(writer.sheets[sheet_name])
    return buf.getvalue()


def report_to_excel_bytes(summaries, portfolio, tax_result: Optional[TouristTaxResult] = None) -> bytes:
    """Report standard: riepilogo proprietà e, se presente, tassa di soggiorno del mese."""
    sheets = {"Proprietà": summaries_to_df(summaries, portfolio)}
    if tax_result is not None:
        sheets["Tassa soggiorno"] = tax_lines_to_df(tax_result)
        sheets["Per notti"] = nights_breakdown_to_df(tax_result.breakdown_by_nights)
    return frames_to_excel_bytes(sheets)
