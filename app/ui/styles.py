import streamlit as st

# Consolidated CSS with theme tokens + dark-mode fix for scorecards
BASE_CSS = """
<style>
:root{
  --space-2:.5rem; --space-3:.75rem; --space-4:1rem;
  --radius:16px; --brand:#ec4899; --muted:#94a3b8;

  --card-bg:#ffffff; --card-fg:#334155; --card-sub:#94a3b8; --card-border:#fce7f3;
  --pill-bg:#fdf2f8; --pill-fg:#334155; --track:#f1f5f9;
}

@media (prefers-color-scheme: dark){
  :root{
    --card-bg:#111827; --card-fg:#f3f4f6; --card-sub:#cbd5e1; --card-border:#374151;
    --pill-bg:#1f2937; --pill-fg:#f3f4f6; --track:#1f2937;
  }
}

div.block-container { padding-top: 1.5rem; max-width: 760px; }

.eyebrow{ font-size:.75rem; font-weight:600; letter-spacing:4px; text-transform:uppercase; color:#f472b6; }

.score-card{
  background: var(--card-bg);
  border: 1px solid var(--card-border);
  border-radius: var(--radius);
  padding: 14px 16px;
  box-shadow: 0 1px 3px rgba(0,0,0,0.04);
  color: var(--card-fg);
  text-align: center;
}
.score-val{ font-size: 2.2rem; font-weight: 700; }
.score-sub{ color: var(--card-sub) !important; font-size: 0.85rem; }

.bar-row{ display:grid; grid-template-columns: 1.2fr 2fr auto; gap: var(--space-2); align-items:center; margin: var(--space-2) 0; }
.bar{ display:block; height:8px; background:var(--track); border-radius:999px; overflow:hidden; }
.bar-fill{ display:block; height:100%; }
.tier-pill{ background:var(--pill-bg); color:var(--pill-fg); padding:2px 10px; border-radius:999px; font-size:.8rem; white-space:nowrap; }

.starter{ border-left:3px solid var(--brand); padding-left: var(--space-3); margin: var(--space-3) 0; }
</style>
"""


def inject() -> None:
    st.markdown(BASE_CSS, unsafe_allow_html=True)
