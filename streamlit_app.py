from __future__ import annotations

import os
from datetime import date

import requests
import streamlit as st

st.set_page_config(page_title="Prenotazioni", layout="wide")

API_BASE = os.getenv("API_BASE", "http://127.0.0.1:5000")

SLOTS = [f"{h:02d}:{m:02d}" for h in range(8, 19) for m in (0, 30)]



# HTTP client

class ApiError(Exception):
    pass


def _message(r: requests.Response) -> str:
    try:
        return r.json().get("message") or f"HTTP {r.status_code}"
    except ValueError:
        return f"HTTP {r.status_code}"


def api_get(path: str, params: dict | None = None) -> list | dict:
    r = requests.get(f"{API_BASE}{path}", params=params, timeout=10)
    if r.status_code >= 400:
        raise ApiError(_message(r))
    return r.json()


def api_post(path: str, payload: dict) -> str:
    r = requests.post(f"{API_BASE}{path}", json=payload, timeout=10)
    if r.status_code >= 400:
        raise ApiError(_message(r))
    return _message(r)


def current_user() -> str | None:
    # nessun token: l'API non gestisce sessioni, basta ricordare chi ha fatto login
    return st.session_state.get("username")



# Sidebar accesso

with st.sidebar:
    st.header("Accesso")

    if not current_user():
        u = st.text_input("Username", key="login_user")
        p = st.text_input("Password", type="password", key="login_pass")
        role = st.selectbox("Ruolo", options=["user", "admin"], key="login_role")

        c1, c2 = st.columns(2)
        if c1.button("Login", key="login_btn"):
            try:
                api_post("/api/login", {"username": u.strip(), "password": p, "role": role})
                st.session_state["username"] = u.strip()
                st.rerun()
            except ApiError as e:
                st.error(str(e))
            except requests.RequestException as e:
                st.error(f"API non raggiungibile: {e}")

        if c2.button("Registrati", key="register_btn"):
            try:
                st.success(api_post("/api/register", {"username": u.strip(), "password": p}))
            except ApiError as e:
                st.error(str(e))
            except requests.RequestException as e:
                st.error(f"API non raggiungibile: {e}")
    else:
        st.write(f"Utente: **{current_user()}**")
        if st.button("Logout", key="logout_btn"):
            st.session_state.pop("username", None)
            st.rerun()

    st.divider()
    st.caption(f"API: {API_BASE}")



# UI

st.title("Prenotazione appuntamenti")

tab1, tab2, tab3 = st.tabs(["Prenota", "I miei appuntamenti", "Tutti gli appuntamenti"])


with tab1:
    st.subheader("Nuova prenotazione")

    user = current_user()
    if not user:
        st.info("Effettua il login dalla sidebar per prenotare.")
    else:
        colA, colB = st.columns(2)
        patient = colA.text_input("Paziente", key="pren_patient")
        doctor = colA.text_input("Medico", key="pren_doctor")
        giorno = colB.date_input("Data", value=date.today(), key="pren_date")
        slot = colB.selectbox("Orario", options=SLOTS, key="pren_slot")

        if st.button("Conferma prenotazione", key="pren_submit"):
            payload = {
                "patient": patient.strip(),
                "doctor": doctor.strip(),
                "date": giorno.isoformat(),
                "slot": slot,
                "username": user,
            }
            try:
                st.success(api_post("/api/appointments", payload))
            except ApiError as e:
                st.error(str(e))
            except requests.RequestException as e:
                st.error(f"API non raggiungibile: {e}")


with tab2:
    st.subheader("Le mie prenotazioni")

    user = current_user()
    if not user:
        st.info("Effettua il login dalla sidebar.")
    else:
        try:
            items = api_get("/api/appointments", params={"username": user})
            if not items:
                st.info("Nessun appuntamento.")
            else:
                for a in items:
                    st.write(f"- **{a['date']} {a['slot']}** | {a['doctor']}")
        except (ApiError, requests.RequestException) as e:
            st.error(f"Errore caricamento: {e}")


with tab3:
    st.subheader("Agenda completa")

    try:
        items = api_get("/api/appointments")
        if not items:
            st.info("Nessun appuntamento.")
        else:
            st.dataframe(items, width="stretch")
    except (ApiError, requests.RequestException) as e:
        st.error(f"Errore caricamento: {e}")
