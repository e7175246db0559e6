"""Output Formatter — writes a generation result to disk and summarizes it."""

from pathlib import Path

from rtlforge.deliverables import get_display_name
from rtlforge.state import GenerationResult
from rtlforge.utils.session import ordered_result_ids

# Used when the model leaves filename empty.
_FALLBACK_EXTENSIONS = {
    "verilog": ".v",
    "systemverilog": ".sv",
    "vhdl": ".vhd",
    "markdown": ".md",
    "mermaid": ".mmd",
    "tcl": ".tcl",
}


def _safe_filename(deliverable_id: str, artifact: dict) -> str:
    """Model-chosen filename reduced to a bare name; never a path."""
    name = Path(str(artifact.get("filename", "")).replace("\\", "/")).name
    if name and name not in (".", ".."):
        return name
    ext = _FALLBACK_EXTENSIONS.get(str(artifact.get("language", "")).lower(), ".txt")
    return f"{deliverable_id}{ext}"


def _non_conflicting(path: Path) -> Path:
    """Append ' (2)', ' (3)', ... until the path is free."""
    candidate = path
    counter = 1
    while candidate.exists():
        counter += 1
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
    return candidate


def write_artifacts(result: GenerationResult, output_dir: Path) -> dict[str, Path]:
    """Write each artifact to ``output_dir`` in catalog order.

    Existing files are never overwritten. Returns deliverable id -> written path.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = {}
    for key in ordered_result_ids(result):
        artifact = result[key]
        path = _non_conflicting(output_dir / _safe_filename(key, artifact))
        path.write_text(artifact.get("code", ""), encoding="utf-8")
        written[key] = path
    return written


def render_summary(result: GenerationResult, written: dict[str, Path] | None = None) -> str:
    """Markdown table of the artifacts in a result."""
    if not result:
        return "*No deliverables were returned.*"

    lines = [
        "| Deliverable | File | Language | Lines |",
        "|-------------|------|----------|-------|",
    ]
    for key in ordered_result_ids(result):
        artifact = result[key]
        filename = written[key].name if written and key in written else artifact.get("filename", "")
        code = artifact.get("code", "")
        line_count = len(code.splitlines())
        lines.append(
            f"| {get_display_name(key)} | `{filename}` | {artifact.get('language', '')} | {line_count} |"
        )
    return "\n".join(lines)
