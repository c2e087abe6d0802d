"""
Report sulle righe corrette.

Parte dal DataFrame esportato (core/export.rows_to_dataframe, tutte stringhe)
e produce:
  - pivot mese di arrivo × proprietà (lordo, netto, fee, incasso proprietario)
  - riepilogo per proprietà
  - riepilogo per sorgente
"""

import pandas as pd

MONEY_COLUMNS = ["gross", "net", "booking_fee", "house_owner_fee", "total_fees", "owner_income"]


def prepare(df: pd.DataFrame) -> pd.DataFrame:
    """Tipizza colonne numeriche e aggiunge anno_mese (dall'arrivo)."""
    if df.empty:
        return pd.DataFrame()

    df2 = df.copy()
    for col in MONEY_COLUMNS + ["number_of_people"]:
        if col in df2.columns:
            df2[col] = pd.to_numeric(df2[col], errors="coerce").fillna(0)

    arrival = pd.to_datetime(df2["arrival_date"], errors="coerce")
    departure = pd.to_datetime(df2["departure_date"], errors="coerce")
    df2["anno_mese"] = arrival.dt.strftime("%Y-%m").fillna("N/D")
    df2["notti"] = (departure - arrival).dt.days.fillna(0).astype(int)
    return df2


def pivot_by_month_property(df: pd.DataFrame) -> pd.DataFrame:
    """Pivot: mese × proprietà, valori lordo/netto/fee/incasso proprietario."""
    df2 = prepare(df)
    if df2.empty:
        return pd.DataFrame()

    pivot = df2.pivot_table(
        values=["gross", "net", "total_fees", "owner_income"],
        index="anno_mese",
        columns="property",
        aggfunc="sum",
        fill_value=0,
        margins=True,
        margins_name="TOTALE",
    )
    return pivot.round(2)


def totals_by_property(df: pd.DataFrame) -> pd.DataFrame:
    """Riepilogo per proprietà."""
    df2 = prepare(df)
    if df2.empty:
        return pd.DataFrame()

    summary = df2.groupby("property").agg(
        prenotazioni=("booking_ref", "count"),
        notti=("notti", "sum"),
        lordo=("gross", "sum"),
        netto=("net", "sum"),
        booking_fee=("booking_fee", "sum"),
        house_owner_fee=("house_owner_fee", "sum"),
        fee_totali=("total_fees", "sum"),
        incasso_proprietario=("owner_income", "sum"),
    ).reset_index()
    return summary.round(2)


def totals_by_source(df: pd.DataFrame) -> pd.DataFrame:
    """Riepilogo per sorgente (booking.com, airbnb, ...)."""
    df2 = prepare(df)
    if df2.empty:
        return pd.DataFrame()

    summary = df2.groupby("source").agg(
        prenotazioni=("booking_ref", "count"),
        lordo=("gross", "sum"),
        booking_fee=("booking_fee", "sum"),
    ).reset_index()
    return summary.round(2)
