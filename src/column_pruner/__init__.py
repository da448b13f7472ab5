"""column-pruner — Delete configured columns from workbook sheets, keeping their formatting."""

__version__ = "0.2.0"

_INVOICE_COLUMNS = "G,K,O,P,Q,R,U,Y,AC,AD,AG,AH,AI,AJ,AK,AL,AM,AN,AR,AS"
_NOTE_COLUMNS = "G,L,Q,R,S,V,AA,AF,AI,AJ,AK,AL,AM,AN,AO,AP,AQ,AR,AS,AT,AU,AV,AW,AX"

DEFAULT_DELETE_CONFIG: dict[str, str] = {
    "invoice": _INVOICE_COLUMNS,
    "invoice_ims": _INVOICE_COLUMNS,
    "note": _NOTE_COLUMNS,
    "note_ims": _NOTE_COLUMNS,
}
"""Sheet name (matched case-insensitively) → comma-separated column letters."""
