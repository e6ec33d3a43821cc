"""StampService: stamp metadata into markdown files on disk.

Pipeline per document: READ -> TRANSFORM -> RENDER -> WRITE -> REPORT

Fatal errors (unreadable file, malformed frontmatter, failing git query,
raising computed field) abort that document only; the batch continues and
the result reports every failure.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mdstamp.config.logging import document_context
from mdstamp.infrastructure.filesystem import (
    find_markdown_files,
    read_document,
    render_document,
    write_document,
)
from mdstamp.services.result import (
    DocumentOutcome,
    DocumentStatus,
    ServiceError,
    ServiceResult,
)
from mdstamp.services.transform import MetadataTransformer, metadata

if TYPE_CHECKING:
    from mdstamp.config.settings import StampSettings
    from mdstamp.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


def _destination(path: Path, roots: list[Path], output_dir: Path) -> Path:
    """Mirror *path* under *output_dir* relative to the directory it came from."""
    for root in roots:
        if root.is_dir() and path.is_relative_to(root):
            return output_dir / path.relative_to(root)
    return output_dir / path.name


class StampService:
    """Stamps configured metadata into markdown documents."""

    def __init__(self, settings: StampSettings, plugins: PluginManager | None = None) -> None:
        self._settings = settings
        self._plugins = plugins

    def field_specs(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Assemble field specs: plugins, then config, then *overrides*."""
        specs: dict[str, Any] = {}
        if self._plugins is not None:
            specs.update(self._plugins.collect_fields())
        specs.update(self._settings.field_specs())
        specs.update(overrides or {})
        return specs

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def stamp(
        self,
        paths: Iterable[Path],
        *,
        fields: Mapping[str, Any] | None = None,
        dry_run: bool = False,
        output_dir: Path | None = None,
    ) -> ServiceResult:
        """Stamp every markdown document found under *paths*.

        Args:
            paths: Files and/or directories to process.
            fields: Extra field specs, overriding config and plugin fields.
            dry_run: Report what would change without writing anything.
            output_dir: Write results under this directory (mirroring the
                input layout) instead of rewriting sources in place.
        """
        op = "stamp"
        roots = list(paths)
        specs = self.field_specs(fields)
        transformer = metadata(git=self._settings.git, metadata=specs)
        files = find_markdown_files(roots)

        outcomes: list[DocumentOutcome] = []
        warnings: list[str] = []

        if not files:
            warnings.append("No markdown documents found")

        for path in files:
            dest = _destination(path, roots, output_dir) if output_dir is not None else None
            with document_context(path):
                outcome = self._stamp_one(
                    path, transformer, dest=dest, dry_run=dry_run, warnings=warnings
                )
            outcomes.append(outcome)

        counts = Counter(o.status for o in outcomes)
        data = {
            "items": [o.as_item() for o in outcomes],
            "changed": counts[DocumentStatus.CHANGED],
            "unchanged": counts[DocumentStatus.UNCHANGED],
            "failed": counts[DocumentStatus.FAILED],
        }
        meta = {"git": self._settings.git, "fields": list(specs), "dry_run": dry_run}

        failures = {o.path: o.error for o in outcomes if o.status is DocumentStatus.FAILED}
        if failures:
            return ServiceResult(
                ok=False,
                op=op,
                data=data,
                warnings=warnings,
                meta=meta,
                error=ServiceError(
                    code="STAMP_FAILED",
                    message=f"{len(failures)} of {len(files)} document(s) failed",
                    detail=failures,
                ),
            )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings, meta=meta)

    # ------------------------------------------------------------------
    # Per-document pipeline
    # ------------------------------------------------------------------

    def _stamp_one(
        self,
        path: Path,
        transformer: MetadataTransformer,
        *,
        dest: Path | None,
        dry_run: bool,
        warnings: list[str],
    ) -> DocumentOutcome:
        document = None
        try:
            # ── READ ─────────────────────────────────────────────
            tree, document = read_document(path)
            if dest is not None:
                document.data["destination_path"] = dest
            before = render_document(tree)

            # ── TRANSFORM / RENDER ───────────────────────────────
            values = transformer.apply(tree, document)
            changed = render_document(tree) != before

            # ── WRITE ────────────────────────────────────────────
            written = not dry_run and (changed or dest is not None)
            if written:
                write_document(dest or path, tree)
        except Exception as exc:
            logger.warning("Failed to stamp %s: %s", path, exc)
            return DocumentOutcome(
                path=str(path),
                status=DocumentStatus.FAILED,
                error=f"{type(exc).__name__}: {exc}",
            )
        finally:
            # ── REPORT ───────────────────────────────────────────
            if document is not None:
                warnings.extend(f"{path}: {d.message}" for d in document.messages)

        logger.debug("%s: changed=%s written=%s", path, changed, written)
        return DocumentOutcome(
            path=str(path),
            status=DocumentStatus.CHANGED if changed else DocumentStatus.UNCHANGED,
            written=written,
            fields=list(values),
            destination=str(dest) if dest is not None else None,
        )
