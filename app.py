"""
Holiday Bookings - correzione commissioni e fee delle prenotazioni
Web app Streamlit: carica il CSV prenotazioni + settings.json, scarica il CSV corretto.
"""

import streamlit as st
import pandas as pd
import json
import os
import sys
import tempfile

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import BUSINESS_OPENING_DATE, SETTINGS_PATH
from core.bookings import reconcile_batch
from core.catalog import PropertyCatalog, load_settings
from core.errors import SettingsError
from core.export import df_to_excel_bytes, rows_to_dataframe
from core.models import BusinessConfig
from core.sheets import save_to_sheets
from parsers.bookings_csv import parse_bookings_csv
from reports.summary import pivot_by_month_property, totals_by_property, totals_by_source

st.set_page_config(
    page_title="Holiday Bookings",
    page_icon="🏠",
    layout="wide",
)

st.title("🏠 Holiday Bookings - correzione fee")


# ── Verifica connessione Google Sheets ──────────────────────────────────────
def check_sheets_connection() -> bool:
    try:
        _ = st.secrets["gcp_service_account"]
        _ = st.secrets["google_sheets"]["spreadsheet_id"]
        return True
    except Exception:
        return False


with st.sidebar:
    st.header("Impostazioni")
    settings_file = st.file_uploader("settings.json", type=["json"], help=f"Se vuoto usa {SETTINGS_PATH}")
    opening_date = st.date_input("Data apertura attività", value=BUSINESS_OPENING_DATE)

    st.divider()
    if check_sheets_connection():
        st.success("✓ Google Sheets connesso")
    else:
        st.caption("Google Sheets non configurato (`.streamlit/secrets.toml`)")


def get_catalog():
    """Catalogo dal file caricato o da settings.json su disco. None se non disponibile."""
    try:
        if settings_file is not None:
            return PropertyCatalog.from_settings(json.loads(settings_file.getvalue()))
        return load_settings(SETTINGS_PATH)
    except (SettingsError, json.JSONDecodeError, UnicodeDecodeError) as e:
        st.error(f"Errore settings: {e}")
        return None


config = BusinessConfig(opening_date=opening_date)
catalog = get_catalog()

tab_fix, tab_report, tab_props = st.tabs(["📥 Correggi", "📊 Report", "🏘️ Proprietà"])


# ============================================================
# TAB 1: CORREGGI
# ============================================================
with tab_fix:
    st.header("Correggi CSV prenotazioni")
    uploaded = st.file_uploader("CSV prenotazioni", type=["csv"])

    if uploaded and catalog is not None:
        with tempfile.NamedTemporaryFile(delete=False, suffix=".csv") as tmp:
            tmp.write(uploaded.getbuffer())
            tmp_path = tmp.name
        try:
            forms, parse_errors = parse_bookings_csv(tmp_path)
        except ValueError as e:
            st.error(str(e))
            forms, parse_errors = [], []
        finally:
            os.unlink(tmp_path)

        rows, calc_errors = reconcile_batch(forms, catalog, config)
        errors = sorted(parse_errors + calc_errors, key=lambda e: e.line)
        df_fixed = rows_to_dataframe(rows)
        st.session_state["df_fixed"] = df_fixed

        st.subheader(f"Righe corrette ({len(rows)})")
        st.dataframe(df_fixed, use_container_width=True, hide_index=True)

        if errors:
            st.subheader(f"⚠️ Righe scartate ({len(errors)})")
            st.dataframe(
                pd.DataFrame([{"Riga": e.line, "Codice": e.booking_ref, "Campo": e.field, "Errore": e.message} for e in errors]),
                use_container_width=True,
                hide_index=True,
            )

        col1, col2, col3 = st.columns(3)
        with col1:
            st.download_button(
                "⬇️ CSV corretto",
                data=df_fixed.to_csv(index=False).encode("utf-8"),
                file_name="out.csv",
                mime="text/csv",
            )
        with col2:
            st.download_button(
                "⬇️ XLSX corretto",
                data=df_to_excel_bytes(df_fixed),
                file_name="out.xlsx",
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            )
        with col3:
            if check_sheets_connection() and st.button("✅ Salva su Google Sheets", type="primary"):
                with st.spinner("Salvataggio in corso..."):
                    added, skipped = save_to_sheets(rows)
                st.success(f"✓ Salvate **{added}** righe. Saltate (già presenti): {len(skipped)}.")


# ============================================================
# TAB 2: REPORT
# ============================================================
with tab_report:
    st.header("Report")
    df_fixed = st.session_state.get("df_fixed")
    if df_fixed is None or df_fixed.empty:
        st.info("Nessun dato. Carica un CSV dal tab Correggi.")
    else:
        by_prop = totals_by_property(df_fixed)
        k1, k2, k3, k4 = st.columns(4)
        k1.metric("Prenotazioni", int(by_prop["prenotazioni"].sum()))
        k2.metric("Lordo €", f"{by_prop['lordo'].sum():,.2f}")
        k3.metric("Fee totali €", f"{by_prop['fee_totali'].sum():,.2f}")
        k4.metric("Incasso proprietari €", f"{by_prop['incasso_proprietario'].sum():,.2f}")

        st.subheader("Per proprietà")
        st.dataframe(by_prop, use_container_width=True, hide_index=True)
        st.subheader("Per mese di arrivo")
        st.dataframe(pivot_by_month_property(df_fixed), use_container_width=True)
        st.subheader("Per sorgente")
        st.dataframe(totals_by_source(df_fixed), use_container_width=True, hide_index=True)


# ============================================================
# TAB 3: PROPRIETÀ
# ============================================================
with tab_props:
    st.header("Proprietà")
    if catalog is None:
        st.warning("Nessun settings caricato.")
    else:
        st.dataframe(
            pd.DataFrame([{
                "Codice": p.short_name,
                "Nome": p.long_name,
                "Calendario": p.calendar,
                "Commissione": p.commission,
                "Comm. booking": p.booking_commission,
                "Comm. gestore": p.house_owner_commission,
                "Accoglienza €": p.greeting,
                "Lavanderia €": ", ".join(f"{x:g}" for x in p.laundry),
                "Pulizie €": p.cleaning,
                "Consumabili €": ", ".join(f"{x:g}" for x in p.consumables),
            } for p in catalog]),
            use_container_width=True,
            hide_index=True,
        )
