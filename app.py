"""PassForge -- Streamlit web interface."""

from concurrent.futures import TimeoutError as FutureTimeoutError

import streamlit as st

from passforge import (
    DEFAULT_LENGTH,
    MAX_LENGTH,
    MAX_SCORE,
    MIN_LENGTH,
    PassforgeError,
    estimate_strength,
    generate_random,
)
from passforge.pool import DerivationPool

# Seconds a session waits for a derivation before giving up.
DERIVE_TIMEOUT = 60

# ── Lucide icons (from lucide.dev) ────────────────────────────────────────

_LUCIDE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="{s}" height="{s}" '
    'viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2" '
    'stroke-linecap="round" stroke-linejoin="round">{paths}</svg>'
)

ICON_SHIELD = _LUCIDE.format(s=32, paths=(
    '<path d="M20 13c0 5-3.5 7.5-7.66 8.95a1 1 0 0 1-.67-.01'
    'C7.5 20.5 4 18 4 13V6a1 1 0 0 1 1-1c2 0 4.5-1.2 6.24-2.72'
    'a1.17 1.17 0 0 1 1.52 0C14.51 3.81 17 5 19 5a1 1 0 0 1 1 1z"/>'
))

ICON_ZAP = _LUCIDE.format(s=20, paths=(
    '<path d="M4 14a1 1 0 0 1-.78-1.63l9.9-10.2a.5.5 0 0 1 .86.46'
    'l-1.92 6.02A1 1 0 0 0 13 10h7a1 1 0 0 1 .78 1.63l-9.9 10.2'
    'a.5.5 0 0 1-.86-.46l1.92-6.02A1 1 0 0 0 11 14z"/>'
))

ICON_SHUFFLE = _LUCIDE.format(s=20, paths=(
    '<path d="m18 14 4 4-4 4"/><path d="m18 2 4 4-4 4"/>'
    '<path d="M2 18h1.973a4 4 0 0 0 3.3-1.7l5.454-7.6a4 4 0 0 1 3.3-1.7H22"/>'
    '<path d="M2 6h1.972a4 4 0 0 1 3.271 1.7l.569.8"/>'
    '<path d="M22 18h-6.041a4 4 0 0 1-3.3-1.8l-.359-.45"/>'
))

ICON_MICROSCOPE = _LUCIDE.format(s=20, paths=(
    '<path d="M6 18h8"/><path d="M3 22h18"/>'
    '<path d="M14 22a7 7 0 1 0 0-14h-1"/><path d="M9 14h2"/>'
    '<path d="M9 12a2 2 0 0 1-2-2V6h6v4a2 2 0 0 1-2 2Z"/>'
    '<path d="M12 6V3a1 1 0 0 0-1-1H9a1 1 0 0 0-1 1v3"/>'
))

# Weak ... INSANE
LABEL_COLORS = {
    "Weak": "#d32f2f",
    "Fair": "#f57c00",
    "Good": "#fbc02d",
    "Strong": "#7cb342",
    "Very Strong": "#388e3c",
    "Excellent": "#1b5e20",
    "Maximum": "#00838f",
    "INSANE": "#6a1b9a",
}


@st.cache_resource
def _pool() -> DerivationPool:
    # shared by every session
    return DerivationPool()


def _heading(icon: str, text: str) -> None:
    st.markdown(
        f'<p style="display:flex;align-items:center;gap:6px">'
        f"{icon} <strong>{text}</strong></p>",
        unsafe_allow_html=True,
    )


def _show_strength(password: str) -> None:
    report = estimate_strength(password)
    color = LABEL_COLORS[report["label"]]
    st.markdown(
        f"**Strength:** <span style='color:{color}'>{report['label']}</span>"
        f" &nbsp;·&nbsp; {report['entropy_bits']} bits of entropy",
        unsafe_allow_html=True,
    )
    st.progress(report["score"] / MAX_SCORE)


# ── Page config ───────────────────────────────────────────────────────────

st.set_page_config(
    page_title="PassForge",
    page_icon="\U0001f511",
    layout="centered",
)

# ── Custom CSS ────────────────────────────────────────────────────────────

st.markdown("""<style>
/* Always show copy-to-clipboard button on code blocks */
[data-testid="stCode"] button,
[data-testid="stCodeBlock"] button,
pre ~ button {
    opacity: 1 !important;
    visibility: visible !important;
    transition: none !important;
}
</style>""", unsafe_allow_html=True)

# ── Header ────────────────────────────────────────────────────────────────

st.markdown(
    f'<h1 style="display:flex;align-items:center;gap:10px">'
    f"{ICON_SHIELD} PassForge</h1>",
    unsafe_allow_html=True,
)
st.caption(
    "One master password, a unique password for every site.  \n"
    "Passwords are derived locally with **Argon2id** (64 MB, 4 passes) "
    "and are never stored or sent anywhere. "
    "The same master password and domain always give the same result."
)

tab_derive, tab_random, tab_check = st.tabs(
    ["Derive Password", "Random Password", "Analyse Password"],
)

# ── Derive tab ─────────────────────────────────────────────────────────────

with tab_derive:
    _heading(ICON_ZAP, "Derive a site password")
    master = st.text_input(
        "Master password",
        type="password",
        placeholder="Your secret master password",
        autocomplete="off",
        key="master",
    )
    domain = st.text_input(
        "Domain / site",
        placeholder="example.com",
        autocomplete="off",
        key="domain",
    )
    length = st.slider("Length", MIN_LENGTH, MAX_LENGTH, DEFAULT_LENGTH, key="derive_length")

    if st.button(
        "Derive", type="primary", key="derive",
        disabled=not (master and domain.strip()),
    ):
        with st.spinner("Deriving with Argon2id…"):
            try:
                pwd = _pool().derive(master, domain, length, timeout=DERIVE_TIMEOUT)
            except FutureTimeoutError:
                st.error("**Derivation timed out.** The server is busy, try again shortly.")
                st.stop()
            except PassforgeError as exc:
                st.error(f"**Derivation failed:** {exc}")
                st.stop()

        st.code(pwd, language=None)
        _show_strength(pwd)

# ── Random tab ─────────────────────────────────────────────────────────────

with tab_random:
    _heading(ICON_SHUFFLE, "Generate a policy-compliant random password")
    st.caption(
        "Always contains an uppercase letter, a lowercase letter, a digit "
        "and a symbol. Not reproducible."
    )
    rand_length = st.slider("Length", MIN_LENGTH, MAX_LENGTH, DEFAULT_LENGTH, key="random_length")

    if st.button("Generate password", type="primary"):
        try:
            pwd = generate_random(rand_length)
        except PassforgeError as exc:
            st.error(f"**Generation failed:** {exc}")
            st.stop()

        st.code(pwd, language=None)
        _show_strength(pwd)

# ── Analyse tab ────────────────────────────────────────────────────────────

with tab_check:
    _heading(ICON_MICROSCOPE, "Analyse a password")
    password = st.text_input(
        "Password",
        type="default",
        placeholder="Enter a password…",
        autocomplete="off",
    )

    if password:
        report = estimate_strength(password)
        _show_strength(password)
        present = [name for name, found in report["char_classes"].items() if found]
        st.caption(
            f"{report['length']} characters · classes: {', '.join(present)}"
        )
