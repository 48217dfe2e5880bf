from __future__ import annotations
import argparse
from flask import Flask, request, jsonify, Response
from markov import config as CFG
from markov.engine import Engine
from markov.errors import MalformedInput, NoMatch

app = Flask(__name__)
_engine: Engine | None = None


def _require_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("No chain store attached")
    return _engine


@app.errorhandler(NoMatch)
def _no_match(exc: NoMatch):
    return jsonify({"error": str(exc)}), 404


@app.errorhandler(MalformedInput)
def _malformed(exc: MalformedInput):
    return jsonify({"error": str(exc), "line_no": exc.line_no}), 400


# ---------- API ----------
@app.get("/api/generate")
def api_generate():
    eng = _require_engine()
    words = request.args.getlist("w")
    seed = request.args.get("seed", None, type=int)
    max_words = request.args.get("max", None, type=int)
    text = eng.generate(words, seed=seed, max_words=max_words)
    return jsonify({"text": text})


@app.post("/api/ingest")
def api_ingest():
    eng = _require_engine()
    body = request.get_json(silent=True) or {}
    text = body.get("text", "")
    if not isinstance(text, str) or not text.strip():
        return jsonify({"error": "missing 'text'"}), 400
    try:
        order = int(body.get("order", CFG.DEFAULT_ORDER))
    except (TypeError, ValueError):
        return jsonify({"error": "'order' must be an integer"}), 400
    if order < 1:
        return jsonify({"error": "'order' must be >= 1"}), 400
    st = eng.ingest(text.splitlines(), order=order, author=str(body.get("author", "")))
    return jsonify({"lines": st.lines, "words": st.words, "observations": st.observations})


@app.get("/api/prefixes")
def api_prefixes():
    eng = _require_engine()
    w = request.args.get("w", "", type=str)
    n = request.args.get("n", CFG.TOP_N_PREFIXES, type=int)
    if not w.strip():
        return jsonify([])
    return jsonify([p.to_dict() for p in eng.search(w, limit=n)])


@app.get("/api/stats")
def api_stats():
    return jsonify(_require_engine().stats())


@app.get("/health")
def health():
    return jsonify({"ok": _engine is not None})


# ---------- UI ----------
@app.get("/")
def home():
    # Single page: seed box + generate button, no external deps.
    html = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Markov • Flask UI</title>
<style>
:root{ --bg:#0b0f14; --panel:#0f141b; --ink:#cfd8e3; --muted:#8a94a6; --accent:#6ee7ff; --border:#1c2530; }
*{box-sizing:border-box}
body{ margin:0; background:var(--bg); color:var(--ink);
  font:16px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,"Helvetica Neue",Arial; }
.container{ max-width:820px; margin:24px auto; padding:0 16px; }
.card{ background:var(--panel); border:1px solid var(--border); border-radius:16px; padding:18px; }
.controls{ display:flex; gap:12px; margin:12px 0; }
input{ flex:1; padding:12px 14px; border-radius:12px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); font-size:16px; outline:none; }
input:focus{ border-color:var(--accent) }
.btn{ padding:10px 14px; border-radius:10px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); cursor:pointer; }
#out{ white-space:pre-wrap; min-height:3em; color:var(--ink) }
#meta{ color:var(--muted); font-size:13px }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>Markov</h1>
      <div class="controls">
        <input id="w" type="text" placeholder="Seed word (empty = random start)" autocomplete="off" autofocus />
        <button id="go" class="btn">Generate</button>
      </div>
      <div id="meta">Ready.</div>
      <p id="out"></p>
    </div>
  </div>
<script>
const w = document.querySelector("#w"), out = document.querySelector("#out"), meta = document.querySelector("#meta");
async function generate(){
  const word = w.value.trim();
  const url = word ? `/api/generate?max=200&w=${encodeURIComponent(word)}` : "/api/generate?max=200";
  const resp = await fetch(url);
  const data = await resp.json();
  if(!resp.ok){ meta.textContent = data.error || `HTTP ${resp.status}`; out.textContent = ""; return; }
  meta.textContent = `${data.text.split(" ").length} words`;
  out.textContent = data.text;
}
document.querySelector("#go").addEventListener("click", generate);
w.addEventListener("keydown", (ev)=>{ if(ev.key === "Enter") generate(); });
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Markov Flask UI")
    ap.add_argument("--db", default=CFG.DEFAULT_DSN, help="Store DSN (sqlite:///path or memory://)")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _engine
    _engine = Engine().open(args.db, verbose=args.verbose)
    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
