"""
Run Logger - Markdown report for one landing-page run

Writes a step-by-step report with:
- Table of Contents
- Phase headings (login, navigation, panels, save)
- Per-field fill table
- Final summary

Usage:
    run_log = RunLogger(headline="Cost Guide", url="https://example.com/wp-admin")
    run_log.log_heading("Login")
    run_log.log_text("Already logged in (saved session)")
    run_log.log_fill_summary(summary.to_dict())
    run_log.finalize(success=True, duration_ms=12000, url=preview_url)
"""

import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


class RunLogger:
    """Markdown run logger for step-by-step diagnostics."""

    def __init__(
        self,
        headline: str,
        url: Optional[str],
        log_dir: str = "./logs",
        session_id: Optional[str] = None
    ):
        self.session_id = session_id or datetime.now().strftime('%Y%m%d-%H%M%S-%f')
        self.dir = Path(log_dir)
        self.dir.mkdir(parents=True, exist_ok=True)
        self.path = self.dir / f'run-{self.session_id}.md'

        self._toc_placeholder = "<!-- TOC_PLACEHOLDER -->"
        self._toc: List[tuple] = []  # (title, anchor)

        with open(self.path, 'w', encoding='utf-8') as f:
            f.write(f"# wpfiller Run Log ({self.session_id})\n\n")
            f.write("## Contents\n\n")
            f.write(self._toc_placeholder + "\n\n")
            if url:
                f.write(f"- **Admin URL**: {url}\n")
            if headline:
                f.write(f"- **Headline**: {headline}\n\n")

    def _write(self, text: str):
        with open(self.path, 'a', encoding='utf-8') as f:
            f.write(text)

    def log_heading(self, text: str):
        """Section heading with TOC entry."""
        anchor = self._slugify(text)
        self._write("\n---\n\n")
        self._write(f"## {text}\n\n")
        self._toc.append((text, anchor))
        self._update_toc()

    def log_text(self, text: str):
        self._write(f"{text}\n\n")

    def log_kv(self, key: str, value: str):
        self._write(f"- {key}: {value}\n")

    def log_image(self, image_path: str, alt: str = ""):
        img = Path(image_path)
        rel = os.path.relpath(img.resolve(), start=self.dir.resolve())
        self._write(f"![{alt or img.name}]({rel})\n\n")

    def log_table(self, headers: List[str], rows: List[List[str]], title: str = ""):
        """
        Markdown table with aligned columns.

        Args:
            headers: Column headers
            rows: Rows of cell values
            title: Optional title above the table
        """
        if title:
            self._write(f"### {title}\n\n")
        if not headers or not rows:
            return

        col_widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(col_widths):
                    col_widths[i] = max(col_widths[i], len(str(cell)))

        header_line = "| " + " | ".join(h.ljust(col_widths[i]) for i, h in enumerate(headers)) + " |"
        self._write(header_line + "\n")
        sep_line = "|" + "|".join("-" * (w + 2) for w in col_widths) + "|"
        self._write(sep_line + "\n")
        for row in rows:
            padded_row = list(row) + [""] * (len(headers) - len(row))
            row_line = "| " + " | ".join(
                str(c).ljust(col_widths[i]) for i, c in enumerate(padded_row[:len(headers)])
            ) + " |"
            self._write(row_line + "\n")
        self._write("\n")

    def log_fill_summary(self, summary: Dict[str, Any]):
        """
        Per-field table for a FillSummary.to_dict() result.
        """
        rows = []
        for entry in summary.get("fields", []):
            status = {
                "filled": "FILLED",
                "skipped-no-data": "SKIPPED",
                "failed": "FAILED",
            }.get(entry.get("outcome"), str(entry.get("outcome")))
            if entry.get("verified") is False:
                status += " (unverified)"
            detail = entry.get("detail") or entry.get("method") or ""
            rows.append([
                entry.get("field", ""),
                entry.get("panel") or "-",
                status,
                detail[:60] + ("..." if len(detail) > 60 else ""),
            ])
        self.log_table(["Field", "Panel", "Status", "Detail"], rows, "Form Fields Summary")

        counts = summary.get("counts") or {}
        if counts:
            self._write(
                f"**Filled:** {counts.get('filled', 0)} | "
                f"**Skipped:** {counts.get('skipped-no-data', 0)} | "
                f"**Failed:** {counts.get('failed', 0)}\n\n"
            )

    def log_error(self, message: str):
        self._write(f"**ERROR:** {message}\n\n")

    def log_warning(self, message: str):
        self._write(f"**WARNING:** {message}\n\n")

    def finalize(self, success: bool, duration_ms: int = 0, url: Optional[str] = None,
                 error: Optional[str] = None):
        self._write("\n---\n\n")
        self._write("## Summary\n\n")
        self._write(f"**Status:** {'SUCCESS' if success else 'FAILED'}\n")
        self._write(f"**Duration:** {duration_ms}ms\n")
        if url:
            self._write(f"**URL:** {url}\n")
        if error:
            self._write(f"\n**Error:** {error}\n")
        self._write("\n")

    def _slugify(self, text: str) -> str:
        s = text.strip().lower()
        s = re.sub(r"[^a-z0-9\s-]", "", s)
        s = re.sub(r"\s+", "-", s)
        return s

    def _update_toc(self):
        with open(self.path, 'r', encoding='utf-8') as fr:
            content = fr.read()
        items = [f"- [{title}](#{anchor})" for title, anchor in self._toc]
        toc_md = "\n".join(items) + "\n" + self._toc_placeholder
        # keep only the latest TOC block
        head, sep, rest = content.partition("## Contents\n\n")
        if sep:
            _, _, tail = rest.partition(self._toc_placeholder)
            content = head + sep + toc_md + tail
        with open(self.path, 'w', encoding='utf-8') as fw:
            fw.write(content)

    @property
    def log_path(self) -> str:
        return str(self.path)
