"""Materialize template documents into the hierarchy store, and back.

The materializer walks a template document's cabinet entries, validates
each one, creates the cabinet, derives its panels with the rules engine and
adds them. Entries are independent: a malformed entry, or an adapter
failure while building one cabinet, leaves its siblings alone.
An id repeated within one document is malformed; only its first entry is
built.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from casework.domain.entities import Cabinet
from casework.domain.hierarchy import HierarchyStore
from casework.domain.rules import derive_panels

from .schema import (
    CabinetTemplateSchema,
    describe_validation_error,
    parse_template_document,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedEntry:
    """A template entry that did not produce a cabinet.

    Attributes:
        index: Position of the entry in the document's ``cabinets`` list.
        name: Entry name, when it had a usable one.
        reason: Why it was skipped.
    """

    index: int
    name: str | None
    reason: str


@dataclass
class MaterializationResult:
    """Outcome of materializing one template document."""

    cabinets: list[Cabinet] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every entry produced a cabinet."""
        return not self.skipped


def _entry_name(entry: Any) -> str | None:
    if isinstance(entry, dict) and isinstance(entry.get("name"), str):
        return entry["name"]
    return None


class TemplateMaterializer:
    """Creates cabinets and their panels from template documents.

    Example:
        materializer = TemplateMaterializer(store)
        result = materializer.materialize(document, floor_id=floor.id)
        for skipped in result.skipped:
            print(skipped.index, skipped.reason)
    """

    def __init__(self, store: HierarchyStore) -> None:
        self.store = store

    def load_from_template(self, document: Any, floor_id: Any = None) -> list[Cabinet]:
        """Materialize a document and return the cabinets created, in order."""
        return self.materialize(document, floor_id=floor_id).cabinets

    def materialize(self, document: Any, floor_id: Any = None) -> MaterializationResult:
        """Materialize every valid cabinet entry of a template document.

        Args:
            document: Template document as a dict, JSON string or
                TemplateDocument.
            floor_id: Floor to place the cabinets on; None puts them at
                the scene root.

        Returns:
            MaterializationResult with created cabinets and skipped entries.

        Raises:
            TemplateError: If the document has no ``cabinets`` list. The
                store is not touched in that case.
        """
        parsed = parse_template_document(document)
        result = MaterializationResult()

        if floor_id is not None and self.store.get_floor(floor_id) is None:
            logger.warning("Cannot load template: floor %r not found", floor_id)
            result.skipped.extend(
                SkippedEntry(index, _entry_name(entry), f"floor {floor_id!r} not found")
                for index, entry in enumerate(parsed.cabinets)
            )
            return result

        seen_ids: set[str] = set()
        for index, entry in enumerate(parsed.cabinets):
            try:
                spec = CabinetTemplateSchema.model_validate(entry)
            except ValidationError as e:
                reason = "; ".join(describe_validation_error(e))
                self._skip(result, index, _entry_name(entry), reason)
                continue
            if spec.id is not None:
                if spec.id in seen_ids:
                    self._skip(result, index, spec.name, f"duplicate id {spec.id!r} in template")
                    continue
                seen_ids.add(spec.id)

            cabinet = self._materialize_entry(result, index, spec, floor_id)
            if cabinet is not None:
                result.cabinets.append(cabinet)

        logger.info(
            "Materialized %d cabinet(s), skipped %d",
            len(result.cabinets),
            len(result.skipped),
        )
        return result

    def _materialize_entry(
        self,
        result: MaterializationResult,
        index: int,
        spec: CabinetTemplateSchema,
        floor_id: Any,
    ) -> Cabinet | None:
        if spec.id is not None:
            existing_kind = self.store.kind_of(spec.id)
            if existing_kind is not None and self.store.get_cabinet(spec.id) is None:
                self._skip(result, index, spec.name, f"id {spec.id!r} is used by a {existing_kind.value}")
                return None
            if existing_kind is not None:
                logger.debug("Replacing cabinet %s from template", spec.id)
                self.store.remove_cabinet(spec.id)

        cabinet = self.store.create_cabinet(floor_id, spec.name, explicit_id=spec.id)
        if cabinet is None:
            self._skip(result, index, spec.name, "cabinet could not be created")
            return None
        cabinet.parameters = spec.to_parameters()

        params = cabinet.parameters
        try:
            for panel_spec in derive_panels(
                params.width, params.height, params.depth, params.thickness, params.options
            ):
                self.store.add_panel_spec(cabinet.id, panel_spec)
        except Exception as e:
            logger.exception("Adapter failed while materializing cabinet %r", spec.name)
            self.store.remove_cabinet(cabinet.id)
            result.skipped.append(SkippedEntry(index, spec.name, f"materialization failed: {e}"))
            return None
        return cabinet

    @staticmethod
    def _skip(result: MaterializationResult, index: int, name: str | None, reason: str) -> None:
        logger.warning("Skipping template entry %d (%s): %s", index, name or "unnamed", reason)
        result.skipped.append(SkippedEntry(index, name, reason))


class TemplateExporter:
    """Writes cabinets back out as a template document.

    Only cabinets that remember the parameters they were derived from can
    be exported; hand-built cabinets are left out.
    """

    def __init__(self, store: HierarchyStore) -> None:
        self.store = store

    def export(self, cabinet_ids: Iterable[Any] | None = None) -> dict[str, Any]:
        if cabinet_ids is None:
            cabinets = self.store.get_all_cabinets()
        else:
            cabinets = [
                cabinet
                for cabinet in (self.store.get_cabinet(cid) for cid in cabinet_ids)
                if cabinet is not None
            ]

        entries = []
        for cabinet in cabinets:
            if cabinet.parameters is None:
                logger.info("Not exporting %s: no construction parameters", cabinet.name)
                continue
            entries.append(
                {"id": cabinet.id, "name": cabinet.name, **cabinet.parameters.to_template_entry()}
            )
        return {"cabinets": entries}
