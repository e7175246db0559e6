"""Viewer selection — maps an artifact's language tag to how the UI shows it."""

import html
import json

from rtlforge.errors import RenderError

MARKDOWN = "markdown"
MERMAID = "mermaid"
CODE = "code"

MERMAID_CDN = "https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.esm.min.mjs"

# Language tag (lower-cased) -> st.code highlighting name.
_CODE_LANGUAGES = {
    "verilog": "verilog",
    "systemverilog": "verilog",
    "sv": "verilog",
    "vhdl": "vhdl",
    "tcl": "tcl",
    "bash": "bash",
    "shell": "bash",
    "sh": "bash",
    "makefile": "makefile",
    "python": "python",
    "json": "json",
    "text": "text",
    "plain text": "text",
}


def viewer_for(language: str) -> str:
    """Pick the viewer for a content-language tag: markdown, mermaid or code."""
    tag = (language or "").strip().lower()
    if tag in ("markdown", "md"):
        return MARKDOWN
    if tag == "mermaid":
        return MERMAID
    return CODE


def code_language(language: str) -> str:
    """Syntax-highlighting name for the code viewer; unknown tags render as text."""
    return _CODE_LANGUAGES.get((language or "").strip().lower(), "text")


def _js_string(text: str) -> str:
    """JSON-encode text for embedding inside a <script> block."""
    return json.dumps(text).replace("</", "<\\/")


def mermaid_html(source: str, element_id: str) -> str:
    """HTML snippet that renders a Mermaid diagram in the browser.

    Syntax errors are caught by the snippet and shown inline instead of the
    diagram. Raises RenderError for an empty source.
    """
    if not source or not source.strip():
        raise RenderError("Diagram source is empty.")
    safe_id = "".join(c if c.isalnum() or c in "-_" else "-" for c in element_id)
    return f"""\
<div id="{safe_id}"></div>
<script type="module">
  import mermaid from "{MERMAID_CDN}";
  mermaid.initialize({{ startOnLoad: false, theme: "dark" }});
  const target = document.getElementById("{safe_id}");
  try {{
    const {{ svg }} = await mermaid.render("{safe_id}-svg", {_js_string(source)});
    target.innerHTML = svg;
  }} catch (e) {{
    target.innerHTML = "<p><b>Could not render diagram:</b></p><pre>" +
      String(e && e.message ? e.message : "Unknown error")
        .replace(/&/g, "&amp;").replace(/</g, "&lt;") + "</pre>";
  }}
</script>
<noscript><pre>{html.escape(source)}</pre></noscript>
"""
