import os, requests
from dotenv import load_dotenv
load_dotenv()
API = os.getenv("API_BASE_URL", "http://localhost:8000")
TOKEN = os.getenv("API_TOKEN", "dev-token")
S = requests.Session(); S.headers.update({"Content-Type":"application/json"})

def _auth(): return {"Authorization": f"Bearer {TOKEN}"}

def healthz():       r=S.get(f"{API}/healthz",timeout=10); r.raise_for_status(); return r.json()
def restaurants(**p):r=S.get(f"{API}/api/restaurants",params=p,timeout=30); r.raise_for_status(); return r.json()
def combos(**p):     r=S.get(f"{API}/api/combos",params=p,timeout=30); r.raise_for_status(); return r.json()
def combo(combo_id: str):
    r = S.get(f"{API}/api/combos/{combo_id}", timeout=20)
    r.raise_for_status()
    return r.json()

def create_combo(body):
    r=S.post(f"{API}/api/combos",json=body,headers=_auth(),timeout=30); r.raise_for_status(); return r.json()
def repair_combos(batch_size=500):
    r=S.post(f"{API}/api/maintenance/repair-combos",params={"batch_size":int(batch_size)},headers=_auth(),timeout=300)
    r.raise_for_status(); return r.json()
