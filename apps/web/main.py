"""FastAPI web application for testcrate."""

from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import HTMLResponse, Response
from pydantic import BaseModel

from core.analyze import analyze_python_project
from core.errors import CrateError
from core.manifests import MANIFEST_FILES, MARKER_FILES, evidence_from_files
from core.models import Framework, Overrides
from core.render import render_files
from core.synthesize import synthesize

app = FastAPI(
    title="testcrate",
    description="Containerize any test automation project",
    version="0.1.0",
)

KNOWN_FILES = frozenset((*MANIFEST_FILES, *MARKER_FILES))


class AnalyzeRequest(BaseModel):
    """Request model for analyzing a project from its manifest contents."""
    files: dict[str, str]
    framework: Optional[str] = None
    no_browser: bool = False
    allure: Optional[bool] = None
    system_packages: str = ""
    platforms: Optional[list[str]] = None


class GeneratedFile(BaseModel):
    name: str
    content: str
    mode: int


class AnalyzeResponse(BaseModel):
    """Response model with the analysis, configuration and rendered files."""
    framework: str
    analysis: dict
    configuration: dict
    files: list[GeneratedFile]


@app.get("/", response_class=HTMLResponse)
async def home():
    """Serve the main application page."""
    return get_index_html()


@app.get("/favicon.ico")
async def favicon():
    """Return an empty favicon to prevent 404 errors."""
    return Response(status_code=204)


@app.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze_project(request: AnalyzeRequest):
    """Analyze manifest contents and render the container files."""
    try:
        files = {name: content for name, content in request.files.items() if name in KNOWN_FILES}
        if not files and not request.framework:
            raise HTTPException(status_code=400, detail="No manifest files provided")

        framework = None
        if request.framework:
            try:
                framework = Framework(request.framework)
            except ValueError:
                raise HTTPException(
                    status_code=400,
                    detail=f"Unsupported framework: {request.framework}",
                )

        evidence = evidence_from_files(files, root="upload")
        analysis = analyze_python_project(evidence)
        config = synthesize(
            evidence,
            Overrides(
                framework=framework,
                no_browser=request.no_browser,
                has_allure=request.allure,
                system_packages=request.system_packages,
                platforms=request.platforms,
            ),
            analysis=analysis,
        )

        return AnalyzeResponse(
            framework=config.framework.value,
            analysis=analysis.as_dict(),
            configuration=config.as_dict(),
            files=[
                GeneratedFile(name=f.name, content=f.content, mode=f.mode)
                for f in render_files(config)
            ],
        )

    except HTTPException:
        # Re-raise HTTP exceptions (don't convert to 500)
        raise
    except CrateError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error analyzing project: {str(e)}")


@app.post("/api/upload", response_model=AnalyzeResponse)
async def upload_files(
    files: list[UploadFile] = File(...),
    framework: Optional[str] = Form(None),
    no_browser: bool = Form(False),
):
    """Upload manifest files and analyze them."""
    contents = {}
    for upload in files:
        if not upload.filename:
            continue
        data = await upload.read()
        try:
            contents[upload.filename] = data.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise HTTPException(status_code=400, detail=f"{upload.filename} is not UTF-8 text")

    request = AnalyzeRequest(files=contents, framework=framework, no_browser=no_browser)
    return await analyze_project(request)


def get_index_html() -> str:
    """Return the main HTML page."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <title>testcrate - Test Project Containerizer</title>
        <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.0/dist/css/bootstrap.min.css" rel="stylesheet">
    </head>
    <body>
        <div class="container py-4">
            <div class="text-center mb-5">
                <h1 class="display-4 fw-bold text-primary">testcrate</h1>
                <p class="lead text-muted">Generate a Dockerfile for your test automation project</p>
            </div>

            <div class="row">
                <div class="col-lg-6 mb-4">
                    <label for="fileInput" class="form-label">Manifest files (requirements.txt, pyproject.toml, package.json, lockfiles, pytest.ini)</label>
                    <input type="file" id="fileInput" class="form-control" multiple>
                    <div class="row mt-3">
                        <div class="col-md-6">
                            <label for="framework" class="form-label">Framework</label>
                            <select id="framework" class="form-select">
                                <option value="">Auto-detect</option>
                                <option value="playwright">Playwright (Node.js)</option>
                                <option value="pytest">Pytest (Python)</option>
                            </select>
                        </div>
                        <div class="col-md-6 form-check mt-4">
                            <input type="checkbox" id="noBrowser" class="form-check-input">
                            <label for="noBrowser" class="form-check-label">API tests only (no browser)</label>
                        </div>
                    </div>
                    <button id="analyzeBtn" class="btn btn-primary w-100 mt-3">Analyze</button>
                </div>

                <div class="col-lg-6 mb-4">
                    <div id="warning" class="alert alert-warning d-none"></div>
                    <pre id="output" class="bg-light p-3 rounded font-monospace small"></pre>
                </div>
            </div>
        </div>

        <script>
            document.getElementById('analyzeBtn').addEventListener('click', async () => {
                const form = new FormData();
                for (const file of document.getElementById('fileInput').files) {
                    form.append('files', file);
                }
                const framework = document.getElementById('framework').value;
                if (framework) form.append('framework', framework);
                form.append('no_browser', document.getElementById('noBrowser').checked);

                const output = document.getElementById('output');
                const warning = document.getElementById('warning');
                const response = await fetch('/api/upload', { method: 'POST', body: form });
                const data = await response.json();

                if (!response.ok) {
                    warning.classList.add('d-none');
                    output.textContent = data.detail || 'Analysis failed';
                    return;
                }

                const message = data.configuration.warning_message;
                warning.textContent = message || '';
                warning.classList.toggle('d-none', !message);
                output.textContent = data.files
                    .map(f => '# ' + f.name + '\\n' + f.content)
                    .join('\\n');
            });
        </script>
    </body>
    </html>
    """
