"""
routes/viewers.py

Browser-facing pages around the model registry:

  - /ar/{id}    AR scene (A-Frame + AR.js marker tracking) for one model.
                This is the page encoded in every link code.
  - /view/{id}  3D orbit viewer (<model-viewer>) with an AR button for
                devices that support WebXR / Scene Viewer / Quick Look.
  - /models     gallery of every uploaded model, newest first.
  - /upload     upload form posting to /api/upload-model.

Rendering is done entirely by the third-party engines loaded from CDNs;
these handlers only fill in record data.
"""

from __future__ import annotations

from html import escape
from string import Template

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from armodel_db.core import ARModelDB
from armodel_db.errors import RecordNotFound
from armodel_db.registry.models import ModelRecord
from .deps import check_model_id, get_db

router = APIRouter(tags=["viewers"])

AFRAME_JS = "https://aframe.io/releases/1.4.0/aframe.min.js"
ARJS_JS = "https://cdn.jsdelivr.net/gh/AR-js-org/AR.js@3.4.5/aframe/build/aframe-ar.js"
MODEL_VIEWER_JS = "https://ajax.googleapis.com/ajax/libs/model-viewer/3.4.0/model-viewer.min.js"


_PAGE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>$title</title>
$head
<style>
body { margin: 0; font-family: system-ui, sans-serif; }
main { max-width: 960px; margin: 0 auto; padding: 1rem; }
.card { border: 1px solid #ddd; border-radius: 8px; padding: 1rem; margin: 0.5rem 0; }
.card img { width: 128px; height: 128px; }
model-viewer { width: 100%; height: 70vh; background: #f4f4f4; }
</style>
</head>
<body>
$body
</body>
</html>
""")

_AR_BODY = Template("""
<a-scene embedded arjs="sourceType: webcam; debugUIEnabled: false;"
         vr-mode-ui="enabled: false" renderer="logarithmicDepthBuffer: true;">
  <a-marker preset="hiro">
    <a-entity gltf-model="url($asset_url)" scale="0.5 0.5 0.5"
              position="0 0 0" rotation="0 0 0"></a-entity>
  </a-marker>
  <a-entity camera></a-entity>
</a-scene>
<div style="position: fixed; bottom: 1rem; left: 1rem; background: #fff; padding: 0.5rem;">
  <strong>$name</strong> &middot; point your camera at a Hiro marker
  &middot; <a href="/view/$id">3D view</a>
</div>
""")

_VIEW_BODY = Template("""
<main>
  <h1>$name</h1>
  <p>$description</p>
  <model-viewer src="$asset_url" alt="$name" camera-controls auto-rotate
                ar ar-modes="webxr scene-viewer quick-look" shadow-intensity="1">
  </model-viewer>
  <p><a href="/ar/$id">Open AR marker view</a> &middot; <a href="/models">All models</a></p>
  $link_code
</main>
""")

_UPLOAD_BODY = """
<main>
  <h1>Upload a 3D model</h1>
  <form id="upload" class="card">
    <p><label>Name <input name="name" required></label></p>
    <p><label>Description <textarea name="description"></textarea></label></p>
    <p><input type="file" name="file" accept=".glb" required></p>
    <p><button type="submit">Upload</button></p>
  </form>
  <div id="result"></div>
  <p><a href="/models">All models</a></p>
</main>
<script>
document.getElementById("upload").addEventListener("submit", async (ev) => {
  ev.preventDefault();
  const out = document.getElementById("result");
  out.textContent = "Uploading...";
  const res = await fetch("/api/upload-model", { method: "POST", body: new FormData(ev.target) });
  const data = await res.json();
  if (!res.ok) { out.textContent = "Error: " + data.error; return; }
  const card = document.createElement("div");
  card.className = "card";
  const title = document.createElement("p");
  title.textContent = data.model.name;
  const img = document.createElement("img");
  img.setAttribute("src", data.model.qrCodeUrl);
  img.setAttribute("width", "256");
  img.setAttribute("height", "256");
  img.setAttribute("alt", "QR code");
  const link = document.createElement("a");
  link.setAttribute("href", "/view/" + encodeURIComponent(data.model.id));
  link.textContent = "Open viewer";
  const linkRow = document.createElement("p");
  linkRow.appendChild(link);
  card.append(title, img, linkRow);
  out.replaceChildren(card);
});
</script>
"""


def _page(title: str, body: str, head: str = "", status_code: int = 200) -> HTMLResponse:
    return HTMLResponse(
        _PAGE.substitute(title=escape(title), head=head, body=body),
        status_code=status_code,
    )


def _script(src: str) -> str:
    return f'<script src="{src}"></script>'


def _load(db: ARModelDB, model_id: str) -> ModelRecord | None:
    try:
        return db.get_model(model_id)
    except RecordNotFound:
        return None


def _not_found(model_id: str) -> HTMLResponse:
    body = f"<main><h1>Model not found</h1><p>{escape(model_id)}</p>" \
           f'<p><a href="/models">All models</a></p></main>'
    return _page("Model not found", body, status_code=404)


@router.get("/ar/{model_id}", response_class=HTMLResponse)
def ar_viewer(model_id: str, db: ARModelDB = Depends(get_db)):
    check_model_id(model_id)
    record = _load(db, model_id)
    if record is None:
        return _not_found(model_id)

    body = _AR_BODY.substitute(
        id=escape(record.id),
        name=escape(record.name),
        asset_url=escape(record.asset_url),
    )
    return _page(f"AR - {record.name}", body, head=_script(AFRAME_JS) + _script(ARJS_JS))


@router.get("/view/{model_id}", response_class=HTMLResponse)
def orbit_viewer(model_id: str, db: ARModelDB = Depends(get_db)):
    check_model_id(model_id)
    record = _load(db, model_id)
    if record is None:
        return _not_found(model_id)

    link_code = ""
    if record.link_code_url:
        link_code = f'<img src="{escape(record.link_code_url)}" width="256" height="256" ' \
                    f'alt="Scan to open in AR">'

    body = _VIEW_BODY.substitute(
        id=escape(record.id),
        name=escape(record.name),
        description=escape(record.description or ""),
        asset_url=escape(record.asset_url),
        link_code=link_code,
    )
    head = f'<script type="module" src="{MODEL_VIEWER_JS}"></script>'
    return _page(record.name, body, head=head)


@router.get("/models", response_class=HTMLResponse)
def gallery(db: ARModelDB = Depends(get_db)):
    cards = []
    for record in db.list_models():
        qr = ""
        if record.link_code_url:
            qr = f'<img src="{escape(record.link_code_url)}" alt="QR code">'
        cards.append(
            f'<div class="card"><h2>{escape(record.name)}</h2>'
            f"<p>{escape(record.description or '')}</p>{qr}"
            f'<p><a href="/view/{escape(record.id)}">3D view</a> &middot; '
            f'<a href="/ar/{escape(record.id)}">AR view</a></p></div>'
        )

    if not cards:
        cards.append('<p>No models yet. <a href="/upload">Upload one</a>.</p>')

    body = "<main><h1>Models</h1>" + "".join(cards) + "</main>"
    return _page("Models", body)


@router.get("/upload", response_class=HTMLResponse)
def upload_form():
    return _page("Upload a 3D model", _UPLOAD_BODY)
